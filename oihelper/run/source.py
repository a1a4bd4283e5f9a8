"""
Implementation of programs provided by C++ source code.
"""
import os
import logging
import subprocess

from ..config import CompilerConfig, executable_path
from .errors import CompileError, ProgramError
from .program import Program

log = logging.getLogger(__name__)


def tokenize_flags(flags):
    """Split a compiler flag string into arguments.

    Whitespace separates arguments except inside double quotes.  Inside
    quotes a backslash inserts the following character literally, so
    "a \\" b" is the single argument 'a " b'.

    Args:
        flags (str): the flag string, e.g. '-O2 -DNAME="a b"'

    Returns:
        list of str
    """
    result = []
    buffer = []
    pending = False
    quoted = False
    escaped = False
    for ch in flags:
        if escaped:
            buffer.append(ch)
            escaped = False
        elif quoted:
            if ch == '"':
                quoted = False
            elif ch == '\\':
                escaped = True
            else:
                buffer.append(ch)
        elif ch == '"':
            quoted = True
            pending = True
        elif ch.isspace():
            if pending or buffer:
                result.append(''.join(buffer))
            buffer = []
            pending = False
        else:
            buffer.append(ch)
    if pending or buffer:
        result.append(''.join(buffer))
    return result


class SourceCode(Program):
    """A single C++ source file and the executable built from it.

    Running a SourceCode runs its executable, which must have been built
    by compile() first.
    """
    def __init__(self, path, config: CompilerConfig):
        """Instantiate SourceCode object

        Args:
            path (str): path of the source file.

            config (CompilerConfig): which compiler to use and which
                flags to pass to it.
        """
        self.path = path
        self.name = os.path.basename(path)
        self.config = config
        self.binary = executable_path(path)

    def __str__(self):
        """String representation"""
        return '%s (%s)' % (self.name, self.config.cc_compiler)

    def get_compilecmd(self):
        return ([self.config.cc_compiler]
                + tokenize_flags(self.config.cc_flags)
                + ['-o', self.binary, self.path])

    def is_built(self) -> bool:
        return os.path.isfile(self.binary) and os.access(self.binary, os.X_OK)

    def get_runcmd(self):
        if not self.is_built():
            raise ProgramError('%s is not an executable program' % self.binary)
        return [os.path.abspath(self.binary)]

    def remove_binary(self):
        """Delete the executable if it exists."""
        if os.path.lexists(self.binary):
            try:
                os.remove(self.binary)
            except OSError as exc:
                raise ProgramError('Failed to remove %s: %s' % (self.binary, exc.strerror))

    def compile(self) -> None:
        """Compile the source code.

        A stale executable from an earlier build is removed first.  A
        compiler that runs but exits non-zero is not treated as an
        error here; the compiler's own diagnostics go to the terminal.

        Raises:
            CompileError: the compiler could not be launched, or it did
                not leave an executable behind.
        """
        self.remove_binary()

        command = self.get_compilecmd()
        log.debug('compile command: %s', command)
        try:
            status = subprocess.call(command)
        except OSError as exc:
            raise CompileError('Failed to run compiler %s: %s' % (command[0], exc.strerror))
        if status != 0:
            log.warning('Compiler exited with status %d', status)

        if not self.is_built():
            raise CompileError('Compilation of %s produced no executable %s' % (self.path, self.binary))
