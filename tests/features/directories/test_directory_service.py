"""Tests for the directory service."""

import pytest

from filebrowser.core.exceptions import AlreadyExistsError, InvalidFormatError, NotFoundError
from filebrowser.features.files.entities import CREATED_AT, SIZE, UPDATED_AT, File, FileFlags, Permission
from filebrowser.utils.timestamps import format_timestamp, parse_timestamp


async def store_file(file_repository, name, owner, created=None, updated=None):
    file = File.create(name, owner=owner)
    if created is not None:
        file.metadata[CREATED_AT] = format_timestamp(created)
        file.metadata[UPDATED_AT] = format_timestamp(updated)
    return await file_repository.create(file)


class TestDirectoryService:
    """Test cases for directory orchestration."""

    @pytest.mark.asyncio
    async def test_create(self, directory_service):
        """Test a user gets one empty directory."""
        directory = await directory_service.create(1)

        assert directory.id
        assert directory.files == {}
        assert (await directory_service.get(1)).id == directory.id

    @pytest.mark.asyncio
    async def test_create_twice(self, directory_service):
        """Test a second directory for the same user is refused."""
        await directory_service.create(1)
        with pytest.raises(AlreadyExistsError):
            await directory_service.create(1)

    @pytest.mark.asyncio
    async def test_get_missing(self, directory_service):
        """Test loading the directory of an unknown user."""
        with pytest.raises(NotFoundError):
            await directory_service.get(42)

    @pytest.mark.asyncio
    async def test_add_file_persists_placement(self, directory_service):
        """Test colliding placements are persisted."""
        await directory_service.create(1)

        assert await directory_service.add_file(1, "F1", "/a/b") == "a/b"
        assert await directory_service.add_file(1, "F2", "a/b") == "a/b (1)"
        assert (await directory_service.get(1)).files == {"a/b": "F1", "a/b (1)": "F2"}

    @pytest.mark.asyncio
    async def test_add_shared_file(self, directory_service):
        """Test shared placement keeps the key as given."""
        await directory_service.create(1)
        await directory_service.add_file(1, "F1", "F1")

        assert await directory_service.add_file(1, "F2", "F1", shared=True) == "F1"

    @pytest.mark.asyncio
    async def test_remove_file(self, directory_service):
        """Test removal is persisted and silent when absent."""
        await directory_service.create(1)
        await directory_service.add_file(1, "F1", "a")

        assert await directory_service.remove_file(1, "F1") is True
        assert await directory_service.remove_file(1, "F1") is False
        assert await directory_service.remove_file(99, "F1") is False
        assert await directory_service.file_id_by_path(1, "a") is None

    @pytest.mark.asyncio
    async def test_list_by_path(self, directory_service, file_repository):
        """Test listing the root aggregates child directories."""
        await directory_service.create(1)
        layout = {
            "a_file": (10, 15),
            "another_file": (20, 25),
            "a_directory/a_file": (10, 15),
            "a_directory/another_file": (20, 25),
            "a_directory/another_dir/a_file": (30, 35),
        }
        for path, (created, updated) in layout.items():
            file = await store_file(file_repository, path.rsplit("/", 1)[-1], 1, created, updated)
            await directory_service.add_file(1, file.id, path)

        listing = await directory_service.list_by_path(1, "/")

        assert set(listing) == {"a_file", "another_file", "a_directory"}
        directory = listing["a_directory"]
        assert directory.flags & FileFlags.DIRECTORY
        assert directory.metadata[SIZE] == "3"
        assert parse_timestamp(directory.metadata[CREATED_AT]) == 10
        assert parse_timestamp(directory.metadata[UPDATED_AT]) == 35

    @pytest.mark.asyncio
    async def test_file_named_like_a_directory_stays_listed(self, directory_service, file_repository):
        """Test a file placed where a directory already exists is renamed, not hidden."""
        await directory_service.create(1)
        nested = await store_file(file_repository, "y", 1)
        clashing = await store_file(file_repository, "x", 1)
        await directory_service.add_file(1, nested.id, "x/y")

        final = await directory_service.add_file(1, clashing.id, "x")

        assert final == "x (1)"
        listing = await directory_service.list_by_path(1, "")
        assert set(listing) == {"x", "x (1)"}
        assert listing["x"].is_directory
        assert listing["x (1)"].id == clashing.id

    @pytest.mark.asyncio
    async def test_listing_drops_missing_files(self, directory_service, file_repository):
        """Test entries of deleted files are dropped on read."""
        await directory_service.create(1)
        kept = await store_file(file_repository, "kept", 1)
        gone = await store_file(file_repository, "gone", 1)
        await directory_service.add_file(1, kept.id, "kept")
        await directory_service.add_file(1, gone.id, "gone")
        await file_repository.delete(gone.id)

        assert set(await directory_service.list_by_path(1, "")) == {"kept"}

    @pytest.mark.asyncio
    async def test_listing_redacts_shared_files(self, directory_service, file_repository):
        """Test files the caller does not own are listed blurred."""
        await directory_service.create(2)
        file = File.create("shared", owner=1)
        file.grant(2, Permission.READ)
        file.grant(3, Permission.READ)
        file = await file_repository.create(file)
        await directory_service.add_file(2, file.id, file.id, shared=True)

        listing = await directory_service.list_by_path(2, "")

        entry = listing[file.id]
        assert entry.is_blurred
        assert set(entry.permissions) == {1, 2}

    @pytest.mark.asyncio
    async def test_search(self, directory_service, file_repository):
        """Test search is case-insensitive and reports spans on the absolute path."""
        await directory_service.create(1)
        for path in ("docs/Report.pdf", "docs/notes.txt", "report-2.pdf"):
            file = await store_file(file_repository, path.rsplit("/", 1)[-1], 1)
            await directory_service.add_file(1, file.id, path)

        results = await directory_service.search(1, r"report")

        assert {match.path: (match.start, match.end) for match in results} == {
            "docs/Report.pdf": (6, 12),
            "report-2.pdf": (1, 7),
        }
        assert all(match.file.id for match in results)

    @pytest.mark.asyncio
    async def test_search_directory_hits(self, directory_service, file_repository):
        """Test a match in a parent directory returns the directory once."""
        await directory_service.create(1)
        for path in ("Reports/2023/q1.pdf", "Reports/2023/q2.pdf", "reports.txt"):
            file = await store_file(file_repository, path.rsplit("/", 1)[-1], 1)
            await directory_service.add_file(1, file.id, path)

        results = await directory_service.search(1, r"report")

        hits = {match.path: match for match in results}
        assert len(results) == 2
        assert set(hits) == {"Reports", "reports.txt"}
        directory = hits["Reports"]
        assert directory.file.is_directory
        assert directory.file.id is None
        assert (directory.start, directory.end) == (1, 7)
        assert hits["reports.txt"].file.id

    @pytest.mark.asyncio
    async def test_search_invalid_pattern(self, directory_service):
        """Test an invalid pattern is an InvalidFormatError."""
        await directory_service.create(1)
        with pytest.raises(InvalidFormatError):
            await directory_service.search(1, "[")

    @pytest.mark.asyncio
    async def test_delete(self, directory_service):
        """Test deleting a directory."""
        await directory_service.create(1)

        assert await directory_service.delete(1) is True
        assert await directory_service.delete(1) is False
