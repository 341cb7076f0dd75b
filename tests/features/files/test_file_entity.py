"""Tests for the File entity."""

import pytest

from filebrowser.core.exceptions import InvalidFormatError, ProtectedContentError, RegexNotMatchError
from filebrowser.features.files.entities import (
    CREATED_AT,
    OWNER_PERMISSIONS,
    SIZE,
    UPDATED_AT,
    File,
    FileFlags,
    Permission,
)


@pytest.fixture
def shared_file():
    """File owned by user 1, readable by 2 and writable by 3."""
    file = File.create("shared.txt", data=b"payload", owner=1)
    file.id = "f1"
    file.grant(2, Permission.READ)
    file.grant(3, Permission.WRITE)
    return file


class TestFileCreation:
    """Test cases for file construction and naming."""

    @pytest.mark.parametrize("name", ["a/b", "", "/", "dir/"])
    def test_invalid_names(self, name):
        """Test names that are empty or hold a separator are rejected."""
        with pytest.raises(InvalidFormatError):
            File.create(name)

    def test_invalid_name_is_regex_not_match(self):
        """Test the filename rule raises its dedicated kind."""
        with pytest.raises(RegexNotMatchError):
            File(name="a/b")

    def test_valid_name(self):
        """Test a plain name is accepted and timestamps seeded."""
        file = File.create("a.txt", data=b"abc")

        assert file.name == "a.txt"
        assert file.id is None
        assert file.metadata[CREATED_AT] == file.metadata[UPDATED_AT]
        assert file.metadata[SIZE] == "3"

    def test_owner_receives_full_permissions(self):
        """Test the creating user becomes owner with read and write."""
        file = File.create("a.txt", owner=7)
        assert file.permissions == {7: OWNER_PERMISSIONS}

    def test_server_managed_metadata_is_ignored(self):
        """Test clients cannot set server managed keys."""
        file = File.create("a.txt", metadata={SIZE: "999", CREATED_AT: "0", "app": "notes"})

        assert file.metadata[SIZE] == "0"
        assert file.metadata[CREATED_AT] != "0"
        assert file.metadata["app"] == "notes"

    def test_rename_validates(self):
        """Test renaming re-applies the filename rule."""
        file = File.create("a.txt")
        with pytest.raises(InvalidFormatError):
            file.rename("x/y")
        file.rename("b.txt")
        assert file.name == "b.txt"


class TestFilePermissions:
    """Test cases for permission management."""

    def test_grant_then_revoke_leaves_no_entry(self):
        """Test revoking what was granted removes the entry."""
        file = File.create("a.txt", owner=1)
        perms = Permission.READ | Permission.WRITE

        file.grant(5, perms)
        file.revoke(5, perms)

        assert 5 not in file.permissions

    def test_grant_accumulates(self):
        """Test grants are OR-ed together."""
        file = File.create("a.txt", owner=1)
        file.grant(5, Permission.READ)
        file.grant(5, Permission.WRITE)
        assert file.permissions[5] == Permission.READ | Permission.WRITE

    def test_partial_revoke_keeps_remaining_bits(self, shared_file):
        """Test revoking some bits keeps the others."""
        shared_file.grant(2, Permission.WRITE)
        shared_file.revoke(2, Permission.WRITE)
        assert shared_file.permissions[2] == Permission.READ

    def test_revoke_unknown_user_is_noop(self, shared_file):
        """Test revoking a stranger changes nothing."""
        before = dict(shared_file.permissions)
        shared_file.revoke(99, Permission.READ)
        assert shared_file.permissions == before

    def test_revoke_access(self, shared_file):
        """Test dropping every permission of a user."""
        assert shared_file.revoke_access(2) is True
        assert 2 not in shared_file.permissions
        assert shared_file.revoke_access(2) is False

    def test_revoke_access_refuses_last_owner(self, shared_file):
        """Test the last owner cannot be removed."""
        with pytest.raises(ProtectedContentError):
            shared_file.revoke_access(1)

    def test_revoke_access_with_two_owners(self, shared_file):
        """Test one of several owners may be removed."""
        shared_file.grant(2, Permission.OWNER)
        assert shared_file.revoke_access(1) is True
        assert shared_file.owners() == [2]

    def test_owners_and_shared_with(self, shared_file):
        """Test owner and sharee enumeration."""
        assert shared_file.owners() == [1]
        assert sorted(shared_file.shared_with()) == [1, 2, 3]

    def test_owner_implies_read_and_write(self):
        """Test authorization treats owner as read and write."""
        file = File(name="a.txt", permissions={1: Permission.OWNER})

        assert file.can(1, Permission.READ)
        assert file.can(1, Permission.WRITE)
        assert file.permissions[1] == Permission.OWNER

    def test_can(self, shared_file):
        """Test permission checks of non-owners."""
        assert shared_file.can(2, Permission.READ)
        assert not shared_file.can(2, Permission.WRITE)
        assert shared_file.can(3, Permission.WRITE)
        assert not shared_file.can(3, Permission.READ)
        assert not shared_file.can(4, Permission.READ)


class TestHideProtected:
    """Test cases for redacted views."""

    def test_keeps_caller_and_owners(self, shared_file):
        """Test only the caller and owners remain visible."""
        view = shared_file.hide_protected(2)

        assert view.permissions == {1: OWNER_PERMISSIONS, 2: Permission.READ}
        assert view.flags & FileFlags.BLURRED
        assert view.protected

    def test_source_is_untouched(self, shared_file):
        """Test the entity itself is not redacted."""
        shared_file.hide_protected(2)

        assert 3 in shared_file.permissions
        assert not shared_file.is_blurred
        assert not shared_file.protected
