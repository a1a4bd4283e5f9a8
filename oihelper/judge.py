"""
Judge a C++ program against a sample corpus.

The target is compiled once, then every sample is fed to it through a
single scratch file, one at a time:

    compile -> sample 0 -> sample 1 -> ... -> report total, clean up

A sample is worth its points only if the trimmed output equals the
expected output exactly; wrong answers and timeouts score 0 and never
stop the run.
"""
from __future__ import annotations

import logging
import os
from typing import Literal

from . import strdiff
from .config import CompilerConfig
from .run import ProgramError, SourceCode
from .samples import Sample, SampleCorpus, SampleIOError

log = logging.getLogger(__name__)

Verdict = Literal['AC', 'WA', 'TLE']

DEFAULT_SCRATCH_FILE = '.oihelper_scratch.in.txt'


class SampleResult:
    def __init__(self, index: int, verdict: Verdict, points: int = 0, expected: str | None = None,
                 actual: str | None = None, sample_input: str | None = None) -> None:
        self.index = index
        self.verdict = verdict
        self.points = points
        self.expected = expected
        self.actual = actual
        self.sample_input = sample_input
        self.runtime = -1.0

    @property
    def accepted(self) -> bool:
        return self.verdict == 'AC'

    def __str__(self) -> str:
        return f'{self.verdict}({self.points})'

    def __repr__(self) -> str:
        return f'SampleResult(#{self.index}, {self})'


class RunResult:
    """Outcome of one pass over a corpus."""

    def __init__(self) -> None:
        self.results: list[SampleResult] = []

    def add(self, result: SampleResult) -> None:
        self.results.append(result)

    @property
    def total(self) -> int:
        return sum(res.points for res in self.results if res.accepted)

    @property
    def verdicts(self) -> list[Verdict]:
        return [res.verdict for res in self.results]

    def __str__(self) -> str:
        return f'{self.total} point{"" if self.total == 1 else "s"} [{", ".join(str(r) for r in self.results)}]'


def diff_report(expected: str, actual: str, sample_input: str, color: bool = True) -> str:
    styled_expected, styled_actual = strdiff.render(expected, actual)
    return '\n'.join([
        'Expected:',
        strdiff.format_spans(styled_expected, color),
        'Actually:',
        strdiff.format_spans(styled_actual, color),
        '=' * 48,
        'Sample in:',
        sample_input,
    ])


class Judge:
    """Compiles a target and runs it against every sample of a corpus.

    Not safe to run concurrently in the same work_dir: all samples share
    one scratch file.
    """

    def __init__(self, config: CompilerConfig, work_dir: str = '.',
                 scratch_file: str = DEFAULT_SCRATCH_FILE, color: bool = True) -> None:
        self.config = config
        self.work_dir = work_dir
        self.scratch = os.path.join(work_dir, scratch_file)
        self.color = color

    def compile(self, target: str) -> SourceCode:
        source = SourceCode(os.path.join(self.work_dir, self.config.source_path(target)), self.config)
        log.info('Compiling %s...', source)
        source.compile()
        log.info('Compiled.')
        return source

    def _write_scratch(self, text: str) -> None:
        try:
            with open(self.scratch, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as exc:
            raise SampleIOError(self.scratch, f'Error writing scratch input ({exc.strerror})')
        log.debug('Wrote %d characters to %s', len(text), self.scratch)

    def judge_sample(self, program: SourceCode, index: int, sample: Sample) -> SampleResult:
        self._write_scratch(sample.expected_in)
        outcome = program.run(self.scratch, timelim=sample.timeout_ms)

        if outcome.timed_out:
            res = SampleResult(index, 'TLE', expected=sample.expected_out, sample_input=sample.expected_in)
        else:
            actual = outcome.stdout.decode('utf-8', 'replace').strip()
            # Only the actual output is trimmed; the stored expected output is compared as is.
            if actual == sample.expected_out:
                res = SampleResult(index, 'AC', points=sample.points)
            else:
                res = SampleResult(index, 'WA', expected=sample.expected_out, actual=actual,
                                   sample_input=sample.expected_in)
        res.runtime = outcome.runtime
        return res

    def report(self, res: SampleResult) -> None:
        if res.accepted:
            log.info('Test #%d passed: %s in %.2fs', res.index, res, res.runtime)
        elif res.verdict == 'WA':
            log.warning('Test #%d failed: %s in %.2fs', res.index, res, res.runtime,
                        extra={'additional_info': diff_report(res.expected or '', res.actual or '',
                                                              res.sample_input or '', self.color)})
        else:
            log.warning('Test #%d failed: %s after %.2fs', res.index, res, res.runtime,
                        extra={'additional_info': 'Sample in:\n' + (res.sample_input or '')})

    def test(self, target: str, corpus: SampleCorpus) -> RunResult:
        """Judge target against every sample in corpus.

        Args:
            target (str): source name, with or without extension.
            corpus (SampleCorpus): samples to run; never modified.

        Returns:
            RunResult with one SampleResult per sample.

        Raises:
            CompileError: the compiler could not be run.
            SampleIOError: a sample artifact or the scratch file could not
                be read or written.
            ProgramError: the executable could not be started, or the
                executable or scratch file could not be removed afterwards.
        """
        source = self.compile(target)
        result = RunResult()
        try:
            for index, sample in enumerate(corpus):
                log.info('Testing test #%d...', index)
                res = self.judge_sample(source, index, sample)
                self.report(res)
                result.add(res)
            log.info('Total points you get: %d', result.total)
        finally:
            self._cleanup(source)
        return result

    def _cleanup(self, source: SourceCode) -> None:
        source.remove_binary()
        if os.path.lexists(self.scratch):
            try:
                os.remove(self.scratch)
            except OSError as exc:
                raise ProgramError('Failed to remove %s: %s' % (self.scratch, exc.strerror))
