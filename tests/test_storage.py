"""Tests for the filesystem storage backend."""

import pytest

from article_clipper.clients import StorageFault
from article_clipper.storage import FilesystemStorage, ensure_path


class TestFilesystemStorageFolders:
    """Tests for folder operations."""

    def test_folder_exists(self, tmp_path):
        """folder_exists reflects directories under the root."""
        (tmp_path / "notes").mkdir()
        storage = FilesystemStorage(tmp_path)

        assert storage.folder_exists("notes") is True
        assert storage.folder_exists("missing") is False

    def test_file_is_not_a_folder(self, tmp_path):
        """A regular file does not count as a folder."""
        (tmp_path / "note.md").write_text("x")
        storage = FilesystemStorage(tmp_path)

        assert storage.folder_exists("note.md") is False

    def test_create_folder(self, tmp_path):
        """create_folder makes a single directory."""
        storage = FilesystemStorage(tmp_path)

        storage.create_folder("0 Reading")

        assert (tmp_path / "0 Reading").is_dir()

    def test_create_existing_folder_is_noop(self, tmp_path):
        """Creating an existing folder does not raise."""
        (tmp_path / "a").mkdir()
        storage = FilesystemStorage(tmp_path)

        storage.create_folder("a")

        assert (tmp_path / "a").is_dir()

    def test_create_folder_without_parent_fails(self, tmp_path):
        """Parents are never created implicitly."""
        storage = FilesystemStorage(tmp_path)

        with pytest.raises(StorageFault):
            storage.create_folder("a/b")

    def test_create_folder_over_file_fails(self, tmp_path):
        """A name collision with a file is a storage fault."""
        (tmp_path / "a").write_text("x")
        storage = FilesystemStorage(tmp_path)

        with pytest.raises(StorageFault) as exc_info:
            storage.create_folder("a")

        assert exc_info.value.path == "a"

    def test_path_escaping_root_rejected(self, tmp_path):
        """Paths may not climb out of the store."""
        storage = FilesystemStorage(tmp_path)

        with pytest.raises(StorageFault, match="escapes"):
            storage.create_folder("../outside")


class TestFilesystemStorageFiles:
    """Tests for file operations."""

    def test_create_text_file(self, tmp_path):
        """Text is written as UTF-8."""
        storage = FilesystemStorage(tmp_path)

        storage.create_text_file("note.md", "# Café\n")

        assert (tmp_path / "note.md").read_text(encoding="utf-8") == "# Café\n"

    def test_create_text_file_refuses_existing(self, tmp_path):
        """Existing notes are not replaced by default."""
        (tmp_path / "note.md").write_text("old")
        storage = FilesystemStorage(tmp_path)

        with pytest.raises(StorageFault):
            storage.create_text_file("note.md", "new")

        assert (tmp_path / "note.md").read_text() == "old"

    def test_create_text_file_overwrite(self, tmp_path):
        """overwrite=True replaces an existing note."""
        (tmp_path / "note.md").write_text("old")
        storage = FilesystemStorage(tmp_path)

        storage.create_text_file("note.md", "new", overwrite=True)

        assert (tmp_path / "note.md").read_text() == "new"

    def test_create_binary_file(self, tmp_path):
        """Bytes are written unchanged."""
        storage = FilesystemStorage(tmp_path)
        data = bytes(range(256))

        storage.create_binary_file("image.png", data)

        assert (tmp_path / "image.png").read_bytes() == data

    def test_create_binary_file_missing_parent(self, tmp_path):
        """Writing into a missing folder is a storage fault."""
        storage = FilesystemStorage(tmp_path)

        with pytest.raises(StorageFault):
            storage.create_binary_file("images/a.png", b"x")

    def test_works_with_materializer(self, tmp_path):
        """ensure_path creates nested directories on disk."""
        storage = FilesystemStorage(tmp_path)

        created = ensure_path(storage, "0 Reading/Title/images/media")

        assert len(created) == 4
        assert (tmp_path / "0 Reading" / "Title" / "images" / "media").is_dir()
        assert ensure_path(storage, "0 Reading/Title/images/media") == []
