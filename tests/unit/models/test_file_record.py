"""Unit tests for the file record model."""

import os
from datetime import datetime

import pytest
from polling_file_watcher.models import FileRecord, NotFoundError, is_backup_path
from pydantic import ValidationError


class TestFileRecordFromPath:
    """Test cases for building records from the filesystem."""

    def test_file_record(self, tmp_path, set_mtime):
        """Test observing a regular file."""
        test_file = tmp_path / "notes.txt"
        test_file.write_text("hello")
        set_mtime(test_file, 1_700_000_000_123_456_789)

        record = FileRecord.from_path(test_file)

        assert record.path == str(test_file)
        assert record.parent_path == str(tmp_path)
        assert record.short_name == "notes.txt"
        assert record.last_modified_ns == 1_700_000_000_123_456_789
        assert record.size_bytes == 5
        assert record.is_directory is False
        assert record.is_file is True
        assert record.is_hidden is False
        assert record.is_readable is True
        assert record.is_backup is False

    def test_directory_record(self, tmp_path):
        """Test observing a directory."""
        sub_dir = tmp_path / "sub"
        sub_dir.mkdir()

        record = FileRecord.from_path(sub_dir)

        assert record.is_directory is True
        assert record.is_file is False
        assert record.short_name == "sub"

    def test_relative_path_is_made_absolute(self, tmp_path, monkeypatch):
        """Test that relative paths are resolved against the working directory."""
        (tmp_path / "rel.txt").write_text("x")
        monkeypatch.chdir(tmp_path)

        record = FileRecord.from_path("rel.txt")

        assert os.path.isabs(record.path)
        assert record.path == os.path.join(os.getcwd(), "rel.txt")

    def test_hidden_file(self, tmp_path):
        """Test that dot files are reported as hidden."""
        hidden = tmp_path / ".hidden"
        hidden.write_text("x")

        assert FileRecord.from_path(hidden).is_hidden is True

    def test_missing_path_raises_not_found(self, tmp_path):
        """Test observing a path that does not exist."""
        missing = tmp_path / "gone.txt"

        with pytest.raises(NotFoundError) as exc_info:
            FileRecord.from_path(missing)

        assert exc_info.value.path == str(missing)
        assert exc_info.value.error_code == "NOT_FOUND"
        assert "invalid location" in str(exc_info.value)

    def test_modified_at(self, tmp_path, set_mtime):
        """Test modification time conversion to datetime."""
        test_file = tmp_path / "a.txt"
        test_file.write_text("x")
        set_mtime(test_file, 1_600_000_000_000_000_000)

        modified_at = FileRecord.from_path(test_file).modified_at

        assert isinstance(modified_at, datetime)
        assert modified_at.tzinfo is not None
        assert int(modified_at.timestamp()) == 1_600_000_000


class TestFileRecordIdentity:
    """Test cases for path-based equality and hashing."""

    def test_equal_by_path_only(self):
        """Test that metadata differences do not affect equality."""
        old = FileRecord(path="/w/a.txt", short_name="a.txt", last_modified_ns=1, size_bytes=1)
        new = FileRecord(path="/w/a.txt", short_name="a.txt", last_modified_ns=2, size_bytes=99)

        assert old == new
        assert hash(old) == hash(new)
        assert len({old, new}) == 1

    def test_different_paths_not_equal(self):
        """Test that different paths are different records."""
        a = FileRecord(path="/w/a.txt", short_name="a.txt", last_modified_ns=1)
        b = FileRecord(path="/w/b.txt", short_name="b.txt", last_modified_ns=1)

        assert a != b

    def test_not_equal_to_other_types(self):
        """Test comparison with unrelated objects."""
        record = FileRecord(path="/w/a.txt", short_name="a.txt", last_modified_ns=1)

        assert record != "/w/a.txt"

    def test_record_is_immutable(self):
        """Test that records cannot be changed after creation."""
        record = FileRecord(path="/w/a.txt", short_name="a.txt", last_modified_ns=1)

        with pytest.raises(ValidationError):
            record.last_modified_ns = 2

    def test_string_representation(self):
        """Test string representation of records."""
        record = FileRecord(path="/w/d", short_name="d", last_modified_ns=1, is_directory=True)

        assert str(record) == "FileRecord(dir: /w/d)"


class TestBackupDetection:
    """Test cases for backup file detection."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/w/notes.txt~", True),
            ("/w/notes.bak", True),
            ("/w/NOTES.BAK", True),
            ("/w/notesbak", True),
            ("/w/notes.Bak", True),
            ("/w/notes.txt", False),
            ("/w/bakery.txt", False),
            ("/w/~notes.txt", False),
        ],
    )
    def test_is_backup_path(self, path, expected):
        """Test backup suffix detection."""
        assert is_backup_path(path) is expected

    def test_record_is_backup(self):
        """Test the computed backup flag on records."""
        record = FileRecord(path="/w/data.BAK", short_name="data.BAK", last_modified_ns=1)

        assert record.is_backup is True
        assert record.model_dump()["is_backup"] is True
