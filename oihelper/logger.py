"""
Logging for oihelper.

Every module logs below the "oihelper" logger:

  oihelper
  |
  +- oihelper.judge
  +- oihelper.samples
  +- oihelper.fetch

Messages may carry additional info (a diff, a sample input, compiler
output) in the extra dict, like so:
    log.warning('Test #1 failed: WA(0)', extra={'additional_info': diff})
The formatter installed by initialize_logging prints it indented below the
message, truncated to a maximum number of lines.
"""

import logging
import sys

import colorlog

LOG_FORMAT = '%(log_color)s%(levelname)s%(reset)s %(message)s'

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}


class Counter(logging.Filter):
    """
    A stateful filter than counts the number of warnings and errors it has seen.
    """

    def __init__(self):
        super().__init__()
        self.errors: int = 0
        self.warnings: int = 0

    def __str__(self) -> str:
        def p(x):
            return "" if x == 1 else "s"

        return f"{self.errors} error{p(self.errors)}, {self.warnings} warning{p(self.warnings)}"

    def filter(self, record) -> bool:
        if record.levelno == logging.WARNING:
            self.warnings += 1
        if record.levelno >= logging.ERROR:
            self.errors += 1
        return True


def append_additional_info(msg: str, additional_info: str | None, max_additional_info: int = 15) -> str:
    if additional_info is None or max_additional_info <= 0:
        return msg
    additional_info = additional_info.rstrip()
    if not additional_info:
        return msg
    lines = additional_info.split("\n")
    if len(lines) == 1:
        return "%s (%s)" % (msg, lines[0])
    if len(lines) > max_additional_info:
        lines = lines[:max_additional_info] + [
            "[.....truncated to %d lines.....]" % max_additional_info
        ]
    return "%s:\n%s" % (msg, "\n".join(" " * 8 + line for line in lines))


class AdditionalInfoFormatter(colorlog.ColoredFormatter):
    """
    Colored formatter that appends record.additional_info, when present,
    below the formatted message.
    """

    def __init__(self, max_additional_info=15, **kwargs):
        super().__init__(**kwargs)
        self._max_additional_info = max_additional_info

    def format(self, record: logging.LogRecord) -> str:
        result = super().format(record)
        return append_additional_info(result, getattr(record, "additional_info", None),
                                      self._max_additional_info)


root = logging.getLogger("oihelper")
count = Counter()


def initialize_logging(log_level: str = "info", max_additional_info: int = 15, stream=None) -> None:
    """
    Send oihelper's log records to stdout in color.

    Safe to call more than once; the previous handler is replaced.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(AdditionalInfoFormatter(max_additional_info=max_additional_info,
                                                 fmt=LOG_FORMAT, log_colors=LOG_COLORS))
    handler.addFilter(count)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))
    root.propagate = False
