import io
import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import rematch
from vmre.config import EngineConfig


def test_scan_file_emits_json_lines(tmp_path, capsys):
    haystack = tmp_path / "haystack.txt"
    haystack.write_text("xxab\nnothing here\nab\n", encoding="utf-8")

    assert rematch.main(["ab", str(haystack)]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line) for line in lines] == [
        {"line": 1, "start": 2, "end": 4, "match": "ab"},
        {"line": 3, "start": 0, "end": 2, "match": "ab"},
    ]


def test_scan_stdin_pretty_print_to_file(tmp_path, monkeypatch):
    out_path = tmp_path / "out.json"
    monkeypatch.setattr(sys, "stdin", io.StringIO("baaab\nbbb\n"))

    assert rematch.main(["a+", "--pretty-print", "-o", str(out_path)]) == 0

    with open(out_path, "r", encoding="utf-8") as f:
        assert json.load(f) == [{"line": 1, "start": 1, "end": 4, "match": "aaa"}]


def test_dump_bytecode(capsys):
    assert rematch.main(["--dump-bytecode", "a*"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "00: SPLIT -> 01, 03",
        "01: LITERAL 'a'",
        "02: JUMP -> 00",
        "03: MATCH",
    ]


def test_dump_bytecode_without_optimizer(capsys):
    assert rematch.main(["--dump-bytecode", "--no-optimize", ""]) == 0
    assert capsys.readouterr().out.splitlines() == ["00: NOP", "01: MATCH"]


def test_dump_ast(capsys):
    assert rematch.main(["--dump-ast", "a|b*"]) == 0
    assert capsys.readouterr().out.strip() == "Union(Literal('a'), Star(Literal('b')))"


def test_syntax_error_exit_status(capsys):
    assert rematch.main(["(a"]) == 1
    assert "error: unexpected end of pattern at position 2" in capsys.readouterr().err


def test_thread_overflow_exit_status(tmp_path, capsys):
    haystack = tmp_path / "haystack.txt"
    haystack.write_text("a" * 100 + "\n", encoding="utf-8")
    assert rematch.main(["a*", str(haystack), "--max-threads", "5"]) == 1
    assert "overflowed" in capsys.readouterr().err


def test_interactive_session():
    stream = io.StringIO("ab\nxxab\nzz\n<REGEX>\nz+\nzz\n<EXIT>\n")
    out = io.StringIO()

    assert rematch.interactive_session(None, EngineConfig(), stream, out) == 0

    transcript = out.getvalue()
    assert "xxab => Match! [2, 4)" in transcript
    assert "zz => Not match." in transcript
    assert "zz => Match! [0, 2)" in transcript
    assert transcript.endswith("Bye :)\n")


def test_interactive_session_reports_bad_replacement_pattern():
    stream = io.StringIO("<REGEX>\n(a\nab\n")
    out = io.StringIO()

    assert rematch.interactive_session("ab", EngineConfig(), stream, out) == 0

    transcript = out.getvalue()
    assert "error: unexpected end of pattern" in transcript
    assert "ab => Match! [0, 2)" in transcript
