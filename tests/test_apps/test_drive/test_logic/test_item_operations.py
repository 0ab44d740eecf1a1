"""Tests for folder, rename, move and star business logic."""

import pytest

from server.apps.drive.exceptions import InvalidItemError, ItemNotFoundError
from server.apps.drive.logic.catalog import ItemKind
from server.apps.drive.logic.item_operations import (
    create_folder,
    move_item,
    rename_item,
    toggle_star,
)
from server.apps.drive.logic.trash_operations import trash_item
from server.apps.drive.models import File, Folder


@pytest.mark.django_db
class TestCreateFolder:
    """Tests for create_folder."""

    def test_create_root_folder(self):
        """Test folder at root."""
        folder = create_folder('Photos')

        assert folder.id is not None
        assert folder.name == 'Photos'
        assert folder.parent is None
        assert folder.deleted_at is None

    def test_create_nested_folder(self):
        """Test folder under another folder."""
        parent = create_folder('Photos')

        child = create_folder('2024', str(parent.id))

        assert child.parent == parent

    def test_create_folder_blank_name(self):
        """Test blank name is a validation failure."""
        with pytest.raises(InvalidItemError):
            create_folder('')

        assert Folder.objects.count() == 0

    def test_create_folder_missing_parent(self):
        """Test unknown parent is not found."""
        with pytest.raises(ItemNotFoundError):
            create_folder('Photos', 999)

    def test_duplicate_names_allowed(self):
        """Test names are display strings, not unique keys."""
        first = create_folder('Photos')
        second = create_folder('Photos')

        assert first.id != second.id


@pytest.mark.django_db
class TestRenameItem:
    """Tests for rename_item."""

    def test_rename_file(self, upload):
        """Test file rename updates name and modification time."""
        file_instance = upload(b'abc', 'old.txt')
        modified_before = file_instance.modified_at

        result = rename_item(ItemKind.FILE, file_instance.id, 'new.txt')

        result.refresh_from_db()
        assert result.name == 'new.txt'
        assert result.modified_at >= modified_before
        assert result.storage_key == file_instance.storage_key

    def test_rename_folder(self):
        """Test folder rename."""
        folder = create_folder('Old')

        result = rename_item(ItemKind.FOLDER, folder.id, 'New')

        assert Folder.objects.get(pk=result.pk).name == 'New'

    def test_rename_missing_leaves_catalog_unchanged(self, upload):
        """Test renaming a non-existent id is not found and changes nothing."""
        file_instance = upload(b'abc', 'keep.txt')
        before = list(File.objects.values_list('id', 'name', 'modified_at'))

        with pytest.raises(ItemNotFoundError):
            rename_item(ItemKind.FILE, file_instance.id + 100, 'new.txt')

        assert list(
            File.objects.values_list('id', 'name', 'modified_at'),
        ) == before

    def test_rename_trashed_item(self, upload):
        """Test items in trash cannot be renamed."""
        file_instance = upload(b'abc', 'a.txt')
        trash_item(ItemKind.FILE, file_instance.id)

        with pytest.raises(ItemNotFoundError):
            rename_item(ItemKind.FILE, file_instance.id, 'b.txt')

    def test_rename_blank_name(self, upload):
        """Test blank names are rejected."""
        file_instance = upload(b'abc', 'a.txt')

        with pytest.raises(InvalidItemError):
            rename_item(ItemKind.FILE, file_instance.id, ' ')

        file_instance.refresh_from_db()
        assert file_instance.name == 'a.txt'


@pytest.mark.django_db
class TestMoveItem:
    """Tests for move_item."""

    def test_move_file_into_folder(self, upload):
        """Test re-parenting a file."""
        folder = create_folder('Docs')
        file_instance = upload(b'abc', 'a.txt')

        result = move_item(ItemKind.FILE, file_instance.id, folder.id)

        assert result.parent == folder

    def test_move_to_root(self, upload):
        """Test moving back to root."""
        folder = create_folder('Docs')
        file_instance = upload(b'abc', 'a.txt', folder.id)

        result = move_item(ItemKind.FILE, file_instance.id, None)

        assert result.parent is None

    def test_move_folder_into_itself(self):
        """Test a folder cannot contain itself."""
        folder = create_folder('Docs')

        with pytest.raises(InvalidItemError, match='itself'):
            move_item(ItemKind.FOLDER, folder.id, folder.id)

    def test_move_folder_into_descendant(self):
        """Test moving a folder into its subtree is rejected."""
        root = create_folder('Root')
        child = create_folder('Child', root.id)
        grandchild = create_folder('Grandchild', child.id)

        with pytest.raises(InvalidItemError, match='own subfolder'):
            move_item(ItemKind.FOLDER, root.id, grandchild.id)

        root.refresh_from_db()
        assert root.parent is None

    def test_move_into_trashed_folder(self, upload):
        """Test trashed folders are not valid destinations."""
        folder = create_folder('Old')
        file_instance = upload(b'abc', 'a.txt')
        trash_item(ItemKind.FOLDER, folder.id)

        with pytest.raises(ItemNotFoundError):
            move_item(ItemKind.FILE, file_instance.id, folder.id)


@pytest.mark.django_db
class TestToggleStar:
    """Tests for toggle_star."""

    def test_toggle_star_flips_flag(self, upload):
        """Test star is set, then cleared."""
        file_instance = upload(b'abc', 'a.txt')

        assert toggle_star(ItemKind.FILE, file_instance.id).is_starred is True
        assert toggle_star(ItemKind.FILE, file_instance.id).is_starred is False

    def test_toggle_star_persists(self):
        """Test star flag is saved."""
        folder = create_folder('Docs')

        toggle_star(ItemKind.FOLDER, folder.id)

        folder.refresh_from_db()
        assert folder.is_starred is True

    def test_toggle_star_missing(self, db):
        """Test unknown id is not found."""
        with pytest.raises(ItemNotFoundError):
            toggle_star(ItemKind.FOLDER, 1)
