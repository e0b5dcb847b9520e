"""FindingsReaderのテスト。"""

import json
import tempfile
from pathlib import Path

import pytest

from pcp_report.io.findings_reader import FindingsReader, normalize_file_path


SAMPLE_OUTPUT = json.dumps([
    {
        "file": "/private/var/folders/tmp/hello-dolly/hello.php",
        "line": 10,
        "column": 5,
        "type": "ERROR",
        "code": "WordPress.Security.EscapeOutput.OutputNotEscaped",
        "message": "All output should be run through an escaping function.",
        "docs": "https://developer.wordpress.org/apis/security/escaping/",
    },
    {
        "file": "readme.txt",
        "line": 0,
        "column": 0,
        "type": "WARNING",
        "code": "outdated_tested_upto_header",
        "message": "Tested up to: 6.0 < 6.4.",
        "docs": "",
    },
])


class TestNormalizeFilePath:
    """パス正規化のテスト。"""

    @pytest.mark.parametrize("raw, expected", [
        ("/private/tmp/plugin/a.php", "tmp/plugin/a.php"),
        ("/tmp/plugin/a.php", "tmp/plugin/a.php"),
        ("a.php", "a.php"),
        ("dir/private/a.php", "dir/private/a.php"),
    ])
    def test_normalize(self, raw, expected):
        """/private接頭辞と先頭スラッシュの除去のテスト。"""
        assert normalize_file_path(raw) == expected


class TestParseJson:
    """strict-json出力のパースのテスト。"""

    def test_parse_sample_output(self):
        """通常の出力のパースのテスト。"""
        findings = FindingsReader().parse_json(SAMPLE_OUTPUT)
        assert len(findings) == 2
        assert findings[0].file == "var/folders/tmp/hello-dolly/hello.php"
        assert findings[0].line == 10
        assert findings[0].severity == "ERROR"
        assert findings[1].docs is None
        assert findings[1].has_location is False

    @pytest.mark.parametrize("text", [None, "", "   ", "[]", "not json"])
    def test_empty_or_invalid(self, text):
        """空・不正なJSONは空リストになることのテスト。"""
        assert FindingsReader().parse_json(text) == []

    def test_non_array(self):
        """配列以外はエラーになることのテスト。"""
        with pytest.raises(ValueError):
            FindingsReader().parse_json('{"file": "a.php"}')

    def test_invalid_records_are_skipped(self):
        """不正なレコードがスキップされることのテスト。"""
        text = json.dumps([
            "not an object",
            {"file": "a.php", "type": "ERROR", "code": "", "message": "m"},
            {"file": "b.php", "type": "ERROR", "code": "X", "message": "m"},
        ])
        findings = FindingsReader().parse_json(text)
        assert [f.file for f in findings] == ["b.php"]

    def test_non_finite_line_number(self):
        """行番号が無限大でも読み込みが中断しないことのテスト。"""
        text = (
            '[{"file": "a.php", "line": 1e999, "column": -1e999, "type": "ERROR",'
            ' "code": "X", "message": "m"},'
            ' {"file": "b.php", "line": 2, "type": "ERROR", "code": "Y", "message": "m"}]'
        )
        findings = FindingsReader().parse_json(text)
        assert [f.file for f in findings] == ["a.php", "b.php"]
        assert findings[0].line == 0
        assert findings[0].column == 0
        assert findings[1].line == 2


class TestReadFile:
    """保存済みファイルの読み込みのテスト。"""

    def test_read_json_file(self):
        """JSONファイルの読み込みのテスト。"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "results.json"
            path.write_text(SAMPLE_OUTPUT, encoding="utf-8")
            findings = FindingsReader().read(str(path))
            assert len(findings) == 2

    def test_read_csv_file(self):
        """CSVファイルの読み込みのテスト。"""
        content = (
            "File,Line,Column,Type,Code,Message\n"
            "/private/tmp/a.php,3,1,ERROR,WordPress.DB.PreparedSQL,Use prepare.\n"
            "b.php,,,WARNING,plugin_header_missing,Missing header.\n"
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "results.csv"
            path.write_text(content, encoding="utf-8")
            findings = FindingsReader().read(str(path))

            assert len(findings) == 2
            assert findings[0].file == "tmp/a.php"
            assert findings[0].line == 3
            assert findings[0].code == "WordPress.DB.PreparedSQL"
            assert findings[1].line == 0
            assert findings[1].docs is None

    def test_missing_required_column(self):
        """必須列がない場合のテスト。"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "results.csv"
            path.write_text("file,line\na.php,1\n", encoding="utf-8")
            with pytest.raises(ValueError):
                FindingsReader().read(str(path))

    def test_unsupported_format(self):
        """未対応の拡張子のテスト。"""
        with pytest.raises(ValueError, match="Unsupported file format"):
            FindingsReader().read("results.txt")
