from pathlib import Path

import pytest

from launchpad_agent import (
    NotAFileError,
    ReadError,
    TooLargeError,
    read_file,
    validate,
)
from launchpad_agent.tools import ReadFileTool
from launchpad_agent.tools.read_file import MAX_FILE_BYTES


def write_lines(path: Path, count: int) -> Path:
    path.write_text("".join(f"line {i}\n" for i in range(1, count + 1)))
    return path


class TestReadFile:
    def test_truncates_to_max_lines(self, tmp_path: Path) -> None:
        target = write_lines(tmp_path / "big.txt", 600)

        snapshot = read_file(validate(str(target)), max_lines=500)

        assert snapshot.truncated
        assert snapshot.total_line_count == 600
        lines = snapshot.content.split("\n")
        assert len(lines) == 500
        assert lines[0] == "line 1"
        assert lines[-1] == "line 500"

    def test_short_file_returned_verbatim(self, tmp_path: Path) -> None:
        target = tmp_path / "small.txt"
        target.write_bytes(b"a\r\nb\n\nc\n")

        snapshot = read_file(validate(str(target)), max_lines=10)

        assert not snapshot.truncated
        assert snapshot.total_line_count == 4
        assert snapshot.content == "a\r\nb\n\nc\n"

    def test_exactly_max_lines_is_not_truncated(self, tmp_path: Path) -> None:
        target = write_lines(tmp_path / "exact.txt", 5)

        snapshot = read_file(validate(str(target)), max_lines=5)

        assert not snapshot.truncated
        assert snapshot.total_line_count == 5

    def test_truncated_content_strips_carriage_returns(self, tmp_path: Path) -> None:
        target = tmp_path / "crlf.txt"
        target.write_bytes(b"one\r\ntwo\r\nthree\r\n")

        snapshot = read_file(validate(str(target)), max_lines=2)

        assert snapshot.content == "one\ntwo"
        assert snapshot.total_line_count == 3

    def test_missing_trailing_newline(self, tmp_path: Path) -> None:
        target = tmp_path / "t.txt"
        target.write_text("x\ny")
        assert read_file(validate(str(target))).total_line_count == 2

    def test_empty_file(self, tmp_path: Path) -> None:
        target = tmp_path / "empty.txt"
        target.write_text("")

        snapshot = read_file(validate(str(target)))

        assert snapshot.content == ""
        assert snapshot.total_line_count == 0
        assert not snapshot.truncated

    def test_zero_max_lines(self, tmp_path: Path) -> None:
        target = write_lines(tmp_path / "f.txt", 3)

        snapshot = read_file(validate(str(target)), max_lines=0)

        assert snapshot.content == ""
        assert snapshot.truncated

    def test_path_is_canonical(self, tmp_path: Path) -> None:
        target = tmp_path / "f.txt"
        target.write_text("x\n")
        snapshot = read_file(validate(str(tmp_path / "." / "f.txt")))
        assert snapshot.path == str(target.resolve())

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(NotAFileError, match="not a file"):
            read_file(validate(str(tmp_path)))

    def test_too_large(self, tmp_path: Path) -> None:
        target = tmp_path / "huge.log"
        target.write_bytes(b"x" * (MAX_FILE_BYTES + 1))

        with pytest.raises(TooLargeError, match="grep_files"):
            read_file(validate(str(target)))

    def test_at_size_limit_is_readable(self, tmp_path: Path) -> None:
        target = tmp_path / "edge.txt"
        target.write_bytes(b"x" * MAX_FILE_BYTES)
        assert read_file(validate(str(target))).total_line_count == 1

    def test_binary_file(self, tmp_path: Path) -> None:
        target = tmp_path / "image.png"
        target.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")

        with pytest.raises(ReadError):
            read_file(validate(str(target)))


class TestReadFileTool:
    async def test_output_format(self, tmp_path: Path) -> None:
        target = tmp_path / "hello.py"
        target.write_text("print('hi')\n")

        result = await ReadFileTool().execute({"file_path": str(target)})

        assert result.text == (
            f"File: {target.resolve()}\nLines: 1\n\nprint('hi')\n"
        )

    async def test_truncated_marker(self, tmp_path: Path) -> None:
        target = write_lines(tmp_path / "big.txt", 600)

        result = await ReadFileTool().execute(
            {"file_path": str(target), "max_lines": 500}
        )

        header, _, body = result.text.partition("\n\n")
        assert header == f"File: {target.resolve()}\nLines: 600 (truncated)"
        assert body.count("\n") == 499

    async def test_default_max_lines(self, tmp_path: Path) -> None:
        target = write_lines(tmp_path / "big.txt", 501)

        result = await ReadFileTool().execute({"file_path": str(target)})

        assert "Lines: 501 (truncated)" in result.text

    def test_schema(self) -> None:
        schema = ReadFileTool().input_schema
        assert schema["required"] == ["file_path"]
        assert set(schema["properties"]) == {"file_path", "max_lines"}
