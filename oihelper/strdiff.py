"""
Positional character diff used to explain a wrong answer.

The comparison is index by index, with no alignment: one inserted
character marks everything after it as changed.
"""
from dataclasses import dataclass

from colorlog.escape_codes import escape_codes, parse_colors


@dataclass(frozen=True)
class Span:
    text: str
    changed: bool = False


PLAIN_STYLE = 'green'
CHANGED_STYLE = 'bold,bg_red'


def render(expected: str, actual: str) -> tuple[list[Span], list[Span]]:
    """Style two strings for side-by-side display.

    Returns:
        (expected spans, actual spans), one span per character.  Where the
        strings disagree only the actual side is marked changed.  Characters
        past the end of the shorter string are marked changed on the longer
        side; when actual is the shorter one it is padded with changed blanks
        so both sides have the same length.
    """
    common = min(len(expected), len(actual))
    styled_expected = [Span(ch) for ch in expected[:common]]
    styled_actual = [Span(b, changed=a != b) for a, b in zip(expected, actual)]

    if len(actual) > common:
        styled_actual.extend(Span(ch, changed=True) for ch in actual[common:])
    elif len(expected) > common:
        for ch in expected[common:]:
            styled_expected.append(Span(ch, changed=True))
            styled_actual.append(Span(' ', changed=True))

    return styled_expected, styled_actual


def format_spans(spans: list[Span], color: bool = True) -> str:
    if not color:
        return ''.join(span.text for span in spans)
    reset = escape_codes['reset']
    out = []
    for span in spans:
        style = CHANGED_STYLE if span.changed else PLAIN_STYLE
        out.append(f'{parse_colors(style)}{span.text}{reset}')
    return ''.join(out)
