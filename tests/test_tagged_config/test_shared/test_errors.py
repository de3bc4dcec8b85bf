"""Tests for the error hierarchy."""

import pytest

from tagged_config.shared import (
    ConfigIOError,
    FormatError,
    PathNotFoundError,
    TaggedConfigError,
)


class TestErrorHierarchy:
    """Test exception types and messages."""

    @pytest.mark.parametrize(
        "error,builtin",
        [
            (ConfigIOError("read failed"), OSError),
            (FormatError("bad markup"), ValueError),
            (PathNotFoundError("/a/b", "a"), LookupError),
        ],
    )
    def test_errors_share_a_base(self, error: Exception, builtin: type) -> None:
        """Test every error is a TaggedConfigError and a familiar builtin."""
        assert isinstance(error, TaggedConfigError)
        assert isinstance(error, builtin)

    def test_io_error_keeps_filename(self) -> None:
        """Test ConfigIOError carries the file name and its message."""
        error = ConfigIOError("read file x.conf error: gone", filename="x.conf")

        assert error.filename == "x.conf"
        assert str(error) == "read file x.conf error: gone"

    def test_format_error_with_position(self) -> None:
        """Test the position is appended to the message."""
        error = FormatError("unterminated comment", {"line": 4, "column": 7, "offset": 30})

        assert str(error) == "unterminated comment (line 4, column 7)"
        assert error.message == "unterminated comment"

    def test_format_error_without_line(self) -> None:
        """Test a position without a line is not rendered."""
        assert str(FormatError("cannot decode", {"offset": 3})) == "cannot decode"
        assert str(FormatError("too big")) == "too big"

    def test_path_not_found_message(self) -> None:
        """Test the message names the segment and the full path."""
        error = PathNotFoundError("/a/b", "b")

        assert str(error) == "segment 'b' not found while resolving '/a/b'"
        assert error.path == "/a/b"
        assert error.segment == "b"
