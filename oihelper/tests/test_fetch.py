# -*- coding: utf-8 -*-
import pytest
import requests

from oihelper import fetch
from oihelper.samples import SampleCorpus, METADATA_FILE


def extract(html, **kwargs):
    return fetch.extract_samples(fetch.parse_document(html), **kwargs)


def test_single_sample():
    html = ('<div><h3>输入样例#1</h3><pre><code>5</code></pre>'
            '<h3>输出样例#1</h3><pre><code>25</code></pre></div>')
    assert extract(html) == [('5', '25')]


def test_whitespace_between_elements():
    html = """
<html>
  <body>
    <article>
      <h3>输入样例 #1</h3>
      <pre><code>1 2
3 4
</code></pre>
      <h3>输出样例 #1</h3>
      <pre><code>10
</code></pre>
    </article>
  </body>
</html>
"""
    assert extract(html) == [('1 2\n3 4\n', '10\n')]


def test_nested_and_ordered():
    html = ('<main>'
            '<section><h3>输入样例#1</h3><pre><code>a</code></pre>'
            '<h3>输出样例#1</h3><pre><code>A</code></pre></section>'
            '<div><div><h3>输入样例#2</h3><pre><code>b</code></pre>'
            '<h3>输出样例#2</h3><pre><code>B</code></pre></div></div>'
            '</main>')
    assert extract(html) == [('a', 'A'), ('b', 'B')]


def test_entities_decoded_once():
    html = ('<div><h3>输入样例#1</h3><pre><code>a &lt; b &amp;&amp; c &gt; d</code></pre>'
            '<h3>输出样例#1</h3><pre><code>&amp;lt;</code></pre></div>')
    assert extract(html) == [('a < b && c > d', '&lt;')]


def test_other_character_references_decoded_by_parser():
    html = ('<div><h3>输入样例#1</h3><pre><code>say &quot;hi&quot; &#39;x&#39;</code></pre>'
            '<h3>输出样例#1</h3><pre><code>&amp;quot;</code></pre></div>')
    assert extract(html) == [('say "hi" \'x\'', '&quot;')]


def test_unescape_order():
    assert fetch.unescape_entities('&lt;&gt;&amp;') == '<>&'
    assert fetch.unescape_entities('&amp;lt;') == '&lt;'
    assert fetch.unescape_entities('&quot;') == '&quot;'


def test_input_heading_without_block():
    html = ('<div><h3>输入样例#1</h3><p>see below</p>'
            '<h3>输出样例#1</h3><pre><code>25</code></pre></div>')
    assert extract(html) == [('', '25')]


def test_output_heading_without_block_emits_nothing():
    html = ('<div><h3>输入样例#1</h3><pre><code>5</code></pre>'
            '<h3>输出样例#1</h3><p>25</p></div>')
    assert extract(html) == []


def test_block_must_follow_heading_directly():
    html = ('<div><h3>输入样例#1</h3><p>note</p><pre><code>5</code></pre>'
            '<h3>输出样例#1</h3><pre><code>25</code></pre></div>')
    assert extract(html) == [('', '25')]


def test_positional_pairing_without_symmetry_check():
    html = ('<div><h3>输入样例#1</h3><pre><code>1</code></pre>'
            '<h3>输入样例#2</h3><pre><code>2</code></pre>'
            '<h3>输出样例#2</h3><pre><code>4</code></pre>'
            '<h3>输出样例#3</h3><pre><code>9</code></pre></div>')
    assert extract(html) == [('2', '4'), ('', '9')]


def test_pre_without_code_is_ignored():
    html = ('<div><h3>输入样例#1</h3><pre>5</pre>'
            '<h3>输出样例#1</h3><pre><code>25</code></pre></div>')
    assert extract(html) == [('', '25')]


def test_heading_text_must_start_with_marker():
    html = ('<div><h3>The 输入样例</h3><pre><code>5</code></pre>'
            '<h3><span>输出样例</span></h3><pre><code>25</code></pre></div>')
    assert extract(html) == []


def test_custom_markers():
    html = ('<div><h2>Sample Input 1</h2><pre><code>5</code></pre>'
            '<h2>Sample Output 1</h2><pre><code>25</code></pre></div>')
    assert extract(html) == []
    assert extract(html, input_markers=['Sample Input'], output_markers=['Sample Output']) == [('5', '25')]


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.content = text.encode('utf-8')
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} Client Error')


PAGE = ('<html><body><div><h3>输入样例#1</h3><pre><code>1</code></pre>'
        '<h3>输出样例#1</h3><pre><code>1</code></pre>'
        '<h3>输入样例#2</h3><pre><code>2</code></pre>'
        '<h3>输出样例#2</h3><pre><code>4</code></pre>'
        '<h3>输入样例#3</h3><pre><code>3</code></pre>'
        '<h3>输出样例#3</h3><pre><code>9</code></pre></div></body></html>')


def test_fetch_uses_url_template(monkeypatch):
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, headers, timeout))
        return FakeResponse(PAGE)

    monkeypatch.setattr(requests, 'get', fake_get)
    pairs = fetch.fetch('P1001', {'url': 'https://example.org/p/{problem_id}', 'timeout': 3,
                                  'user_agent': 'test-agent'})
    assert pairs == [('1', '1'), ('2', '4'), ('3', '9')]
    assert calls == [('https://example.org/p/P1001', {'User-Agent': 'test-agent'}, 3)]


def test_fetch_http_error(monkeypatch):
    monkeypatch.setattr(requests, 'get', lambda url, **kwargs: FakeResponse('gone', 404))
    with pytest.raises(fetch.FetchError):
        fetch.fetch('P0')


def test_fetch_network_error(monkeypatch):
    def fake_get(url, **kwargs):
        raise requests.ConnectionError('no route to host')

    monkeypatch.setattr(requests, 'get', fake_get)
    with pytest.raises(fetch.FetchError) as excinfo:
        fetch.fetch('P0')
    assert 'no route to host' in str(excinfo.value)


def test_fetch_and_store(monkeypatch, tmp_path):
    monkeypatch.setattr(requests, 'get', lambda url, **kwargs: FakeResponse(PAGE))
    corpus = SampleCorpus.create(str(tmp_path / METADATA_FILE))

    assert fetch.fetch_and_store('P1001', corpus) == [0, 1, 2]
    stored = list(SampleCorpus.open(corpus.path))
    assert [(s.expected_in, s.expected_out) for s in stored] == [('1', '1'), ('2', '4'), ('3', '9')]
    assert [s.points for s in stored] == [33, 33, 33]
    assert [(s.timeout_ms, s.memory_limit) for s in stored] == [(1000, 256)] * 3


def test_fetch_and_store_without_samples(monkeypatch, tmp_path):
    monkeypatch.setattr(requests, 'get', lambda url, **kwargs: FakeResponse('<html><p>nothing</p></html>'))
    corpus = SampleCorpus.create(str(tmp_path / METADATA_FILE))
    with pytest.raises(fetch.ParseError):
        fetch.fetch_and_store('P1001', corpus)
    assert len(corpus) == 0
