from ..errors import OIHelperError


class ProgramError(OIHelperError):
    pass


class CompileError(ProgramError):
    pass
