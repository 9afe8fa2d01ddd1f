"""Tests for the CLI main module."""

import json
from pathlib import Path

import pytest

from robust_text_encoding.cli.main import (
    FileProcessor,
    collect_files,
    create_argument_parser,
    find_files,
    format_results,
    main,
)
from robust_text_encoding.shared.config import EncodingConfig


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    """Directory with one file per encoding outcome."""
    (tmp_path / "latin1.txt").write_bytes(b"Se\xf1or")
    (tmp_path / "cp1252.txt").write_bytes(b"Smart \x93quotes\x94")
    (tmp_path / "utf8.txt").write_bytes("café".encode())
    (tmp_path / "unknown.dat").write_bytes(b"\x81")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "deep.txt").write_bytes(b"ni\xf1o")
    return tmp_path


class TestFindFiles:
    """Test file discovery."""

    def test_single_file(self, sample_dir):
        path = sample_dir / "latin1.txt"

        assert list(find_files(path)) == [path]

    def test_pattern(self, sample_dir):
        names = [p.name for p in find_files(sample_dir, "*.txt")]

        assert names == ["cp1252.txt", "latin1.txt", "utf8.txt"]

    def test_recursive(self, sample_dir):
        names = {p.name for p in find_files(sample_dir, "*.txt", recursive=True)}

        assert "deep.txt" in names

    def test_missing_path(self, tmp_path):
        assert list(find_files(tmp_path / "missing")) == []

    def test_collect_files_deduplicates(self, sample_dir):
        path = sample_dir / "latin1.txt"

        assert collect_files([path, sample_dir], "latin1.*", False) == [path]


class TestFileProcessor:
    """Test per-file detection and repair."""

    def test_detect_file(self, sample_dir):
        processor = FileProcessor(EncodingConfig())

        result = processor.detect_file(sample_dir / "cp1252.txt")

        assert result["success"] is True
        assert result["encoding"] == "Windows-1252"
        assert result["windows1252_specific"] == 2
        assert result["high_bytes"] == 2

    def test_detect_missing_file(self, tmp_path):
        processor = FileProcessor(EncodingConfig())

        result = processor.detect_file(tmp_path / "missing.txt")

        assert result["success"] is False
        assert "error" in result

    def test_fix_file_writes_utf8(self, sample_dir):
        processor = FileProcessor(EncodingConfig())
        output = sample_dir / "out" / "latin1.txt"

        result = processor.fix_file(sample_dir / "latin1.txt", output)

        assert result["written"] == str(output)
        assert output.read_text(encoding="utf-8") == "Señor"

    def test_fix_file_leaves_utf8_alone(self, sample_dir):
        processor = FileProcessor(EncodingConfig())
        output = sample_dir / "utf8_fixed.txt"

        result = processor.fix_file(sample_dir / "utf8.txt", output)

        assert result["encoding"] == "UTF-8"
        assert result["written"] is None
        assert not output.exists()

    def test_fix_file_leaves_unknown_alone(self, sample_dir):
        processor = FileProcessor(EncodingConfig())
        output = sample_dir / "unknown_fixed.dat"

        result = processor.fix_file(sample_dir / "unknown.dat", output)

        assert result["encoding"] is None
        assert result["written"] is None
        assert not output.exists()


class TestFormatResults:
    """Test output formatting."""

    RESULTS = [
        {"file": "a.txt", "success": True, "encoding": "Latin-1", "size": 6, "high_bytes": 1},
        {"file": "b.txt", "success": False, "error": "boom"},
    ]

    def test_json(self):
        assert json.loads(format_results(self.RESULTS, "json")) == self.RESULTS

    def test_csv(self):
        lines = format_results(self.RESULTS, "csv").splitlines()

        assert lines[0] == "file,encoding,size,high_bytes,error"
        assert lines[1] == "a.txt,Latin-1,6,1,"
        assert lines[2] == "b.txt,,0,0,boom"

    def test_text(self):
        output = format_results(self.RESULTS, "text")

        assert "a.txt: Latin-1 (1 high bytes)" in output
        assert "✗ b.txt: boom" in output

    def test_empty(self):
        assert format_results([], "csv") == ""
        assert format_results([], "text") == "No files to display."


class TestArgumentParser:
    """Test argument parsing."""

    def test_detect_defaults(self):
        args = create_argument_parser().parse_args(["detect", "file.txt"])

        assert args.command == "detect"
        assert args.paths == [Path("file.txt")]
        assert args.pattern == "*"
        assert args.format == "text"
        assert args.recursive is False

    def test_fix_options(self):
        args = create_argument_parser().parse_args(
            ["fix", "dir", "-e", "cp1252", "--fallback-char", "?", "--in-place", "-r"]
        )

        assert args.encoding == "cp1252"
        assert args.fallback_char == "?"
        assert args.in_place is True
        assert args.recursive is True
        assert args.suffix == "_fixed"


class TestMain:
    """Test the CLI entry point."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_detect_json(self, sample_dir, capsys):
        exit_code = main(["detect", str(sample_dir), "--format", "json"])

        assert exit_code == 0
        results = {Path(r["file"]).name: r["encoding"] for r in json.loads(capsys.readouterr().out)}
        assert results == {
            "cp1252.txt": "Windows-1252",
            "latin1.txt": "Latin-1",
            "unknown.dat": None,
            "utf8.txt": "UTF-8",
        }

    def test_detect_to_output_file(self, sample_dir, tmp_path):
        report = tmp_path / "report.csv"

        assert main(["detect", str(sample_dir / "latin1.txt"), "-f", "csv", "-o", str(report)]) == 0
        assert "Latin-1" in report.read_text(encoding="utf-8")

    def test_detect_nothing_found(self, tmp_path, capsys):
        assert main(["detect", str(tmp_path / "missing")]) == 1

    def test_fix_with_suffix(self, sample_dir, capsys):
        exit_code = main(["fix", str(sample_dir), "--pattern", "*.txt"])

        assert exit_code == 0
        assert (sample_dir / "latin1_fixed.txt").read_text(encoding="utf-8") == "Señor"
        assert (sample_dir / "cp1252_fixed.txt").read_text(encoding="utf-8") == "Smart “quotes”"
        assert not (sample_dir / "utf8_fixed.txt").exists()

    def test_fix_in_place(self, sample_dir, capsys):
        target = sample_dir / "latin1.txt"

        assert main(["fix", str(target), "--in-place"]) == 0
        assert target.read_bytes() == "Señor".encode()

    def test_fix_output_dir(self, sample_dir, tmp_path, capsys):
        out_dir = tmp_path / "fixed"

        assert main(["fix", str(sample_dir / "cp1252.txt"), "-d", str(out_dir), "--suffix", ""]) == 0
        assert (out_dir / "cp1252.txt").read_text(encoding="utf-8") == "Smart “quotes”"

    def test_fix_recursive_output_dir_keeps_layout(self, tmp_path, capsys):
        src = tmp_path / "src"
        (src / "a").mkdir(parents=True)
        (src / "b").mkdir()
        (src / "a" / "x.txt").write_bytes(b"Se\xf1or")
        (src / "b" / "x.txt").write_bytes(b"ni\xf1o")
        out_dir = tmp_path / "out"

        exit_code = main(["fix", str(src), "-r", "-p", "*.txt", "-d", str(out_dir)])

        assert exit_code == 0
        assert (out_dir / "a" / "x_fixed.txt").read_text(encoding="utf-8") == "Señor"
        assert (out_dir / "b" / "x_fixed.txt").read_text(encoding="utf-8") == "niño"

    def test_fix_output_collision_fails(self, tmp_path, capsys):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (first / "x.txt").write_bytes(b"Se\xf1or")
        (second / "x.txt").write_bytes(b"ni\xf1o")
        out_dir = tmp_path / "out"

        exit_code = main(["fix", str(first / "x.txt"), str(second / "x.txt"), "-d", str(out_dir)])

        assert exit_code == 1
        assert (out_dir / "x_fixed.txt").read_text(encoding="utf-8") == "Señor"
        assert "already used" in capsys.readouterr().err

    def test_fix_preserves_line_endings(self, tmp_path, capsys):
        target = tmp_path / "crlf.txt"
        target.write_bytes(b"Se\xf1or\r\nni\xf1o\n")

        assert main(["fix", str(target), "--in-place"]) == 0
        assert target.read_bytes() == "Señor\r\nniño\n".encode()

    def test_fix_empty_fallback_char_rejected(self, sample_dir, capsys):
        assert main(["fix", str(sample_dir / "latin1.txt"), "--fallback-char", ""]) == 1
        assert "fallback_char" in capsys.readouterr().err

    def test_fix_forced_encoding_and_fallback(self, sample_dir, capsys):
        exit_code = main([
            "fix", str(sample_dir / "unknown.dat"),
            "--encoding", "windows-1252", "--fallback-char", "?",
        ])

        assert exit_code == 0
        assert (sample_dir / "unknown_fixed.dat").read_text(encoding="utf-8") == "?"

    def test_fix_unknown_encoding_name(self, sample_dir, capsys):
        assert main(["fix", str(sample_dir), "--encoding", "ebcdic"]) == 1
        assert "Unsupported encoding" in capsys.readouterr().err

    def test_config_file(self, sample_dir, tmp_path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"fallback_char": "#"}), encoding="utf-8")

        exit_code = main([
            "--config", str(config_path),
            "fix", str(sample_dir / "unknown.dat"), "--encoding", "latin-1",
        ])

        assert exit_code == 0
        assert (sample_dir / "unknown_fixed.dat").read_text(encoding="utf-8") == "#"

    def test_invalid_config_file(self, sample_dir, tmp_path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text('{"fallback_char": "##"}', encoding="utf-8")

        assert main(["--config", str(config_path), "detect", str(sample_dir)]) == 1
        assert "fallback_char" in capsys.readouterr().err
