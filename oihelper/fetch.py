"""
Import samples from a public problem page.

The page is walked looking for headings such as "输入样例 #1" and
"输出样例 #1"; the <pre><code> block right after each heading holds the
sample text.  Pairing is positional: an input block is paired with the
next output block found at the same level.
"""
import enum
import logging
from typing import Sequence

import requests
from bs4 import BeautifulSoup, NavigableString, ParserRejectedMarkup, Tag
from bs4.element import PreformattedString

from .errors import OIHelperError
from .samples import SampleCorpus

log = logging.getLogger(__name__)

DEFAULT_URL = 'https://www.luogu.com.cn/problem/{problem_id}'
DEFAULT_INPUT_MARKERS = ('输入样例',)
DEFAULT_OUTPUT_MARKERS = ('输出样例',)

HEADING_TAGS = frozenset(['h1', 'h2', 'h3', 'h4', 'h5', 'h6'])


class FetchError(OIHelperError):
    pass


class ParseError(OIHelperError):
    pass


class _Mode(enum.Enum):
    SCANNING = 0
    AWAITING_INPUT = 1
    AWAITING_OUTPUT = 2


def unescape_entities(text: str) -> str:
    # &amp; must go last, otherwise "&amp;lt;" would become "<".
    return text.replace('&lt;', '<').replace('&gt;', '>').replace('&amp;', '&')


def _is_text(node) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _is_blank(node) -> bool:
    return _is_text(node) and not node.strip()


def _heading_marker(tag: Tag, input_markers: Sequence[str], output_markers: Sequence[str]) -> _Mode:
    if tag.name not in HEADING_TAGS or not tag.contents or not _is_text(tag.contents[0]):
        return _Mode.SCANNING
    text = str(tag.contents[0])
    if text.startswith(tuple(input_markers)):
        return _Mode.AWAITING_INPUT
    if text.startswith(tuple(output_markers)):
        return _Mode.AWAITING_OUTPUT
    return _Mode.SCANNING


def _block_text(node) -> str | None:
    """Text of a <pre><code>text</code></pre> block, or None if node does
    not have that shape."""
    if not isinstance(node, Tag) or node.name != 'pre' or not node.contents:
        return None
    code = node.contents[0]
    if not isinstance(code, Tag) or code.name != 'code' or not code.contents:
        return None
    text = code.contents[0]
    if not _is_text(text):
        return None
    # The parser has already decoded character references; re-escape the
    # markup characters so the decoding below sees the page's own text.
    return unescape_entities(text.output_ready(formatter='minimal'))


def _search(node, input_markers: Sequence[str], output_markers: Sequence[str]) -> list[tuple[str, str]] | None:
    if not isinstance(node, Tag):
        return None

    samples: list[tuple[str, str]] = []
    pending_in = ''
    mode = _Mode.SCANNING

    for child in node.children:
        if _is_blank(child):
            continue

        if mode is _Mode.SCANNING:
            if not isinstance(child, Tag):
                continue
            mode = _heading_marker(child, input_markers, output_markers)
            if mode is not _Mode.SCANNING:
                continue
            found = _search(child, input_markers, output_markers)
            if found:
                samples.extend(found)

        elif mode is _Mode.AWAITING_INPUT:
            text = _block_text(child)
            if text is not None:
                pending_in = text
            mode = _Mode.SCANNING

        else:
            text = _block_text(child)
            if text is not None:
                samples.append((pending_in, text))
                pending_in = ''
            mode = _Mode.SCANNING

    return samples


def extract_samples(tree: BeautifulSoup, input_markers: Sequence[str] = DEFAULT_INPUT_MARKERS,
                    output_markers: Sequence[str] = DEFAULT_OUTPUT_MARKERS) -> list[tuple[str, str]]:
    """All (input, output) sample pairs in a parsed page, in document order."""
    samples = []
    for node in tree.contents:
        found = _search(node, input_markers, output_markers)
        if found:
            samples.extend(found)
    return samples


def parse_document(content: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(content, 'html.parser')
    except ParserRejectedMarkup as exc:
        raise ParseError(f'Failed to parse problem page: {exc}')


def fetch_document(problem_id: str, url: str = DEFAULT_URL, timeout: float = 10,
                   user_agent: str | None = None) -> BeautifulSoup:
    """Download and parse the page of a problem.  One attempt, no retries.

    Raises:
        FetchError: network failure or non-2xx response.
        ParseError: the page could not be parsed.
    """
    full_url = url.format(problem_id=problem_id)
    headers = {'User-Agent': user_agent} if user_agent else {}
    log.debug('GET %s', full_url)
    try:
        response = requests.get(full_url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f'Error occurred while fetching samples from {full_url}: {exc}')
    log.debug('Got %d bytes from %s (status %d)', len(response.content), full_url, response.status_code)
    return parse_document(response.text)


def fetch(problem_id: str, conf: dict | None = None) -> list[tuple[str, str]]:
    """Sample pairs of a remote problem.

    Args:
        problem_id (str): problem identifier substituted into the URL.
        conf (dict): the "fetch" section of the configuration.
    """
    conf = conf or {}
    tree = fetch_document(problem_id,
                          url=conf.get('url', DEFAULT_URL),
                          timeout=conf.get('timeout', 10),
                          user_agent=conf.get('user_agent'))
    return extract_samples(tree,
                           input_markers=conf.get('input_markers', DEFAULT_INPUT_MARKERS),
                           output_markers=conf.get('output_markers', DEFAULT_OUTPUT_MARKERS))


def fetch_and_store(problem_id: str, corpus: SampleCorpus, conf: dict | None = None) -> list[int]:
    """Fetch the samples of a problem and append them to corpus.

    Returns:
        list of int, indices of the new samples.
    """
    conf = conf or {}
    log.info('Starting fetching samples from %s...', problem_id)
    pairs = fetch(problem_id, conf)
    if not pairs:
        raise ParseError(f'No samples found on the page of {problem_id}')
    log.info('Content fetched. Loading %d sample(s)...', len(pairs))
    indices = corpus.import_pairs(pairs,
                                  total_points=conf.get('total_points', 100),
                                  timeout_ms=conf.get('timeout_ms', 1000),
                                  memory_limit=conf.get('memory_limit', 256))
    log.info('Fetching done.')
    return indices
