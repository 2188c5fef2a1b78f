"""Tests for line-number lookup."""

from __future__ import annotations

from types import SimpleNamespace

from site_auditor.locator import NOT_FOUND, LineCursor, element_line, line_at, line_of


def test_line_at_counts_preceding_newlines():
    text = "one\ntwo\nthree"
    assert line_at(text, 0) == 1
    assert line_at(text, text.index("two")) == 2
    assert line_at(text, text.index("three")) == 3


def test_line_of_needle_at_known_line():
    lines = ["<html>", "<body>", "<p>hello</p>", "<span>needle</span>", "</body>"]
    assert line_of("\n".join(lines), "needle") == 4


def test_line_of_missing_needle_is_not_found():
    assert line_of("a\nb\nc", "zzz") is NOT_FOUND
    assert line_of("a\nb\nc", "") is NOT_FOUND


def test_line_of_from_offset_skips_earlier_occurrences():
    text = "x\nx\nx"
    assert line_of(text, "x") == 1
    assert line_of(text, "x", 1) == 2
    assert line_of(text, "x", text.rindex("x")) == 3


def test_multiline_needle_reports_start_line():
    text = "first\n<!--\ncomment\n-->\nlast"
    assert line_of(text, "<!--\ncomment\n-->") == 2


def test_cursor_attributes_duplicates_to_successive_lines():
    text = '<img src="a.png">\n<p>x</p>\n<img src="a.png">'
    cursor = LineCursor(text)
    assert cursor.find("a.png") == 1
    assert cursor.find("a.png") == 3
    assert cursor.find("a.png") is NOT_FOUND


def test_cursor_stays_put_on_miss():
    text = "alpha\nbeta\nalpha"
    cursor = LineCursor(text)
    assert cursor.find("alpha") == 1
    offset = cursor.offset
    assert cursor.find("gamma") is NOT_FOUND
    assert cursor.offset == offset
    assert cursor.find("alpha") == 3


def test_seek_moves_to_line_and_column():
    text = "ab\ncd x\nef"
    cursor = LineCursor(text)
    cursor.seek(2, 3)
    assert cursor.offset == text.index("x")
    cursor.seek(99)
    assert cursor.offset == text.index("x")


def test_element_line_starts_at_the_element():
    text = '<link href="hero.png">\n<img src="hero.png">'
    tag = SimpleNamespace(sourceline=2, sourcepos=0)
    assert element_line(LineCursor(text), tag, "hero.png") == 2


def test_element_line_falls_back_to_parser_line():
    tag = SimpleNamespace(sourceline=3, sourcepos=0)
    assert element_line(LineCursor("a\nb\n<img src=\"a&amp;b.png\">"), tag, "a&b.png") == 3
