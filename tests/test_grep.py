import io

import pytest

from coursetools.grep import grep_lines, main, match


@pytest.mark.parametrize(
    "pattern, text, expected",
    [
        ("^ab", "abc", True),
        ("^bc", "abc", False),
        ("b$", "ab", True),
        ("a$", "ab", False),
        ("a*b", "b", True),
        ("a.c", "xxabcxx", True),
        (".", "", False),
        ("", "", True),
        ("x", "abc", False),
        ("^a.*z$", "abcz", True),
        ("^a.*z$", "abczq", False),
    ],
)
def test_match(pattern, text, expected):
    assert match(pattern, text) is expected


def test_grep_lines_selects_matches():
    stream = io.StringIO("foo\nbar\nfood\n")
    assert list(grep_lines("foo", stream)) == ["foo\n", "food\n"]


def test_grep_lines_drops_unterminated_last_line():
    stream = io.StringIO("foo\nfoo")
    assert list(grep_lines("foo", stream)) == ["foo\n"]


def test_grep_lines_stops_on_overlong_line():
    stream = io.StringIO("x" * 2000 + "\nfoo\n")
    assert list(grep_lines("foo", stream)) == []


def test_main_without_pattern_fails(capsys):
    assert main([]) == 1
    assert "usage: grep pattern" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope.txt"
    assert main(["a", str(missing)]) == 1
    assert f"grep: cannot open {missing}" in capsys.readouterr().out


def test_main_prints_matching_lines(tmp_path, capsys):
    path = tmp_path / "in.txt"
    path.write_text("alpha\nbeta\ngamma\n")
    assert main(["^.a", str(path)]) == 0
    assert capsys.readouterr().out == "gamma\n"