"""
Inventory API — Inventory Repository Unit Tests
=================================================

What:  Tests for id issuing, ordering, partial updates and deletion.
How:   Pure in-memory tests; no HTTP, no file system.
"""

import pytest

from inventory_api.exceptions import NotFoundError, ValidationError
from inventory_api.services.inventory_repository import InventoryRepository, UNSET


class TestCreate:
    """Tests for InventoryRepository.create()."""

    def setup_method(self):
        self.repo = InventoryRepository()

    def test_ids_start_at_one_and_increase(self):
        """N creates yield ids 1..N in creation order."""
        ids = [self.repo.create(f"item {n}").id for n in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_ids_never_reused_after_delete(self):
        """Deleting items never frees their ids for reuse."""
        self.repo.create("a")
        second = self.repo.create("b")
        self.repo.delete(second.id)
        self.repo.delete(1)

        assert self.repo.create("c").id == 3

    def test_defaults(self):
        item = self.repo.create("Drill")
        assert item.description == ""
        assert item.photo_ref is None

    def test_none_description_becomes_empty(self):
        assert self.repo.create("Drill", None).description == ""

    def test_keeps_photo_ref(self):
        item = self.repo.create("Drill", "cordless", "abc.jpg")
        assert item.photo_ref == "abc.jpg"

    @pytest.mark.parametrize("name", ["", None])
    def test_missing_name_rejected(self, name):
        """Empty or absent names are a ValidationError and consume no id."""
        with pytest.raises(ValidationError, match="inventory_name is required"):
            self.repo.create(name)
        assert self.repo.create("ok").id == 1

    def test_whitespace_name_is_present(self):
        """Only presence is checked; a blank-looking name is still a name."""
        assert self.repo.create("  ").name == "  "


class TestReads:
    """Tests for list() and get()."""

    def setup_method(self):
        self.repo = InventoryRepository()

    def test_list_empty(self):
        assert self.repo.list() == []

    def test_list_reflects_surviving_items_in_insertion_order(self):
        for name in ("a", "b", "c", "d"):
            self.repo.create(name)
        self.repo.delete(2)
        self.repo.update(3, name="C")

        assert [(i.id, i.name) for i in self.repo.list()] == [(1, "a"), (3, "C"), (4, "d")]

    def test_get_unknown_id(self):
        with pytest.raises(NotFoundError, match="Item with ID '42' was not found"):
            self.repo.get(42)

    def test_get_after_delete_stays_not_found(self):
        self.repo.create("a")
        self.repo.delete(1)
        self.repo.create("b")

        with pytest.raises(NotFoundError):
            self.repo.get(1)

    def test_returned_items_are_snapshots(self):
        """Mutating a returned item never changes stored state."""
        item = self.repo.create("a")
        item.name = "changed"
        self.repo.list()[0].description = "changed"

        stored = self.repo.get(1)
        assert stored.name == "a"
        assert stored.description == ""

    def test_len_and_contains(self):
        self.repo.create("a")
        assert len(self.repo) == 1
        assert 1 in self.repo
        assert 2 not in self.repo


class TestUpdate:
    """Tests for partial updates and photo replacement."""

    def setup_method(self):
        self.repo = InventoryRepository()
        self.repo.create("Drill", "cordless")

    def test_description_only(self):
        item = self.repo.update(1, description="x")
        assert (item.name, item.description) == ("Drill", "x")

    def test_explicit_empty_name_is_applied(self):
        item = self.repo.update(1, name="")
        assert item.name == ""
        assert item.description == "cordless"

    def test_explicit_empty_description_is_applied(self):
        assert self.repo.update(1, description="").description == ""

    def test_no_fields_changes_nothing(self):
        item = self.repo.update(1)
        assert (item.name, item.description) == ("Drill", "cordless")

    def test_unset_marker_is_falsy_singleton(self):
        assert not UNSET
        assert UNSET is type(UNSET)()

    def test_update_unknown_id(self):
        with pytest.raises(NotFoundError):
            self.repo.update(9, name="x")

    def test_set_photo_overwrites(self):
        self.repo.set_photo(1, "first.jpg")
        item = self.repo.set_photo(1, "second.png")
        assert item.photo_ref == "second.png"
        assert self.repo.get(1).photo_ref == "second.png"

    def test_set_photo_unknown_id(self):
        with pytest.raises(NotFoundError):
            self.repo.set_photo(9, "x.jpg")


class TestDelete:
    """Tests for delete()."""

    def setup_method(self):
        self.repo = InventoryRepository()
        self.repo.create("Drill")

    def test_delete_removes(self):
        self.repo.delete(1)
        assert self.repo.list() == []

    def test_repeated_delete_always_fails(self):
        self.repo.delete(1)
        for _ in range(2):
            with pytest.raises(NotFoundError):
                self.repo.delete(1)
