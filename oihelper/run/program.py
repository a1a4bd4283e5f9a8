"""Abstract base class for programs.
"""
import logging
import os
import signal
import subprocess
import time
from dataclasses import dataclass

from .errors import ProgramError

log = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """What happened when a program was run once.

    Attributes:
        timed_out (bool): the wall-clock limit was hit and the process
            group was killed.
        stdout (bytes): everything the program wrote to standard output
            (empty when timed out).
        status (int | None): exit status, None when timed out.
        runtime (float): wall-clock time in seconds.
    """
    timed_out: bool
    stdout: bytes
    status: int | None
    runtime: float


class Program(object):
    """Abstract base class for programs.
    """

    def get_runcmd(self) -> list[str]:
        raise NotImplementedError

    def run(self, infile, timelim=1000) -> RunOutcome:
        """Run the program.

        Args:
            infile (str): name of file to pass on stdin
            timelim (int): wall-clock time limit in milliseconds

        Returns:
            RunOutcome describing the run.
        """
        runcmd = self.get_runcmd()
        if runcmd == []:
            raise ProgramError('Could not figure out how to run %s' % self)
        return self.__run_wait(runcmd, infile, timelim)

    @staticmethod
    def __run_wait(argv, infile, timelim) -> RunOutcome:
        log.debug('run "%s < %s" with time limit %d ms', ' '.join(argv), infile, timelim)
        start = time.monotonic()
        try:
            with open(infile, 'rb') as stdin:
                # A session of its own, so a timeout can kill everything the
                # program forked along with it.
                proc = subprocess.Popen(argv, stdin=stdin, stdout=subprocess.PIPE,
                                        start_new_session=True)
        except OSError as exc:
            raise ProgramError('Failed to start %s: %s' % (argv[0], exc))

        try:
            stdout, _ = proc.communicate(timeout=timelim / 1000.0)
        except subprocess.TimeoutExpired:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                log.debug('process group %d exited before it could be killed', proc.pid)
            # Processes that left the group may still hold the pipe open, so
            # it is closed unread.
            proc.stdout.close()
            proc.wait()
            return RunOutcome(timed_out=True, stdout=b'', status=None,
                              runtime=time.monotonic() - start)

        return RunOutcome(timed_out=False, stdout=stdout, status=proc.returncode,
                          runtime=time.monotonic() - start)
