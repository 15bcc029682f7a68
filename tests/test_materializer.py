"""Tests for path materialization."""

import pytest

from article_clipper.clients import StorageFault
from article_clipper.storage import ensure_path, normalize_path


class TestNormalizePath:
    """Tests for normalize_path()."""

    def test_strips_slashes(self):
        """Leading, trailing and doubled slashes are removed."""
        assert normalize_path("/0 Reading//Title/") == "0 Reading/Title"

    def test_backslashes_become_slashes(self):
        """Windows separators are normalized."""
        assert normalize_path("a\\b\\c") == "a/b/c"

    def test_root_is_empty(self):
        """The store root normalizes to an empty string."""
        assert normalize_path(".") == ""
        assert normalize_path("/") == ""


class TestEnsurePath:
    """Tests for ensure_path()."""

    def test_creates_all_missing_folders_root_to_leaf(self, storage_cls):
        """Every missing ancestor is created, parents first."""
        storage = storage_cls()

        created = ensure_path(storage, "0 Reading/Title/images")

        assert created == ["0 Reading", "0 Reading/Title", "0 Reading/Title/images"]
        assert storage.created_folders() == created

    def test_creates_only_missing_suffix(self, storage_cls):
        """Existing ancestors are not created again."""
        storage = storage_cls(folders=["0 Reading"])

        created = ensure_path(storage, "0 Reading/Title/images")

        assert created == ["0 Reading/Title", "0 Reading/Title/images"]

    def test_stops_climbing_at_first_existing_folder(self, storage_cls):
        """Ancestors above an existing folder are never checked."""
        storage = storage_cls(folders=["a", "a/b"])

        ensure_path(storage, "a/b/c")

        checked = [path for name, path in storage.calls if name == "folder_exists"]
        assert checked == ["a/b/c", "a/b"]

    def test_second_call_creates_nothing(self, storage_cls):
        """Materialization is idempotent."""
        storage = storage_cls()
        ensure_path(storage, "x/y/z")
        storage.calls.clear()

        created = ensure_path(storage, "x/y/z")

        assert created == []
        assert storage.created_folders() == []

    def test_existing_path_is_noop(self, storage_cls):
        """An existing folder needs no creation."""
        storage = storage_cls(folders=["a", "a/b"])

        assert ensure_path(storage, "a/b") == []

    def test_empty_path_is_noop(self, storage_cls):
        """The store root always exists."""
        storage = storage_cls()

        assert ensure_path(storage, "") == []
        assert storage.calls == []

    def test_failure_propagates_and_stops(self, storage_cls):
        """A failed creation raises and later folders are not attempted."""
        storage = storage_cls()
        storage.files["a/b"] = "not a folder"

        with pytest.raises(StorageFault):
            ensure_path(storage, "a/b/c")

        assert storage.created_folders() == ["a", "a/b"]
        assert "a" in storage.folders
        assert "a/b/c" not in storage.folders

    def test_folder_created_concurrently_is_accepted(self, storage_cls):
        """A folder that appears between check and create is not an error."""

        class RacingStorage(storage_cls):
            def create_folder(self, path):
                if path == "a/b":
                    # Another task won the race
                    self.folders.add(path)
                    raise StorageFault(f"exists: {path}", path=path)
                super().create_folder(path)

        storage = RacingStorage()

        created = ensure_path(storage, "a/b/c")

        assert created == ["a", "a/b/c"]
        assert {"a", "a/b", "a/b/c"} <= storage.folders
