"""Package for compiling and running the programs judged by oihelper.
"""
from .errors import CompileError, ProgramError
from .program import Program, RunOutcome
from .source import SourceCode, tokenize_flags
