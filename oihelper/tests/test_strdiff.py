# -*- coding: utf-8 -*-
from unittest import TestCase

from oihelper import strdiff
from oihelper.strdiff import Span


class Render_test(TestCase):
    def test_identical(self):
        for s in ['', 'a', 'hello world', '1 2 3\n4 5 6', '输出']:
            expected, actual = strdiff.render(s, s)
            assert len(expected) == len(actual) == len(s)
            assert not any(span.changed for span in expected + actual)

    def test_single_difference(self):
        expected, actual = strdiff.render('abc', 'abd')
        assert [span.changed for span in expected] == [False, False, False]
        assert [span.changed for span in actual] == [False, False, True]
        assert ''.join(span.text for span in actual) == 'abd'

    def test_actual_longer(self):
        expected, actual = strdiff.render('ab', 'abcd')
        assert expected == [Span('a'), Span('b')]
        assert actual == [Span('a'), Span('b'), Span('c', True), Span('d', True)]

    def test_actual_shorter_is_padded(self):
        expected, actual = strdiff.render('abcd', 'ab')
        assert len(expected) == len(actual) == 4
        assert ''.join(span.text for span in expected) == 'abcd'
        assert [span.changed for span in expected] == [False, False, True, True]
        assert actual[2:] == [Span(' ', True), Span(' ', True)]

    def test_insertion_cascades(self):
        _, actual = strdiff.render('12345', '102345')
        assert [span.changed for span in actual] == [False, True, True, True, True, True]


def test_format_without_color():
    expected, actual = strdiff.render('abc', 'abd')
    assert strdiff.format_spans(expected, color=False) == 'abc'
    assert strdiff.format_spans(actual, color=False) == 'abd'


def test_format_with_color():
    _, actual = strdiff.render('abc', 'abd')
    out = strdiff.format_spans(actual, color=True)
    assert '\033[' in out
    assert out.count('d') == 1
    assert out != strdiff.format_spans(strdiff.render('abc', 'abc')[1], color=True)
