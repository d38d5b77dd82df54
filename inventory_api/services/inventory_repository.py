"""
Inventory API — Inventory Repository
======================================

What:  In-memory owner of every InventoryItem.
Why:   Single place that issues ids and applies mutations, so the invariants
       (unique, strictly increasing, never reused ids) live in one class.
How:   An insertion-ordered dict of id → item plus a counter. Every public
       method takes the lock and hands out copies, never the stored objects.
Who:   Created once per application by create_app() and injected into the
       route handlers through FastAPI dependencies.

Lifecycle:
    Starts empty with the process; everything is lost when the process exits.

Concurrency:
    Async handlers run on one event loop and never await inside a repository
    call, so each call is already atomic there. The RLock keeps that true for
    sync endpoints FastAPI would run in its threadpool.
"""

import logging
import threading
from typing import Dict, List, Optional

from inventory_api.exceptions import NotFoundError, ValidationError
from inventory_api.models.item import InventoryItem

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for 'field not provided' in partial updates."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


class InventoryRepository:
    """
    Ordered in-memory collection of inventory items.

    Error Handling:
        Unknown ids raise NotFoundError; a missing name on create raises
        ValidationError. Nothing here touches the file system.
    """

    def __init__(self) -> None:
        self._items: Dict[int, InventoryItem] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        with self._lock:
            return item_id in self._items

    def create(
        self,
        name: Optional[str],
        description: Optional[str] = "",
        photo_ref: Optional[str] = None,
    ) -> InventoryItem:
        """
        Register a new item and return a copy of it.

        Raises:
            ValidationError: name is None or empty
        """
        if not name:
            raise ValidationError(
                message="inventory_name is required",
                field="inventory_name",
            )

        with self._lock:
            item = InventoryItem(
                id=self._next_id,
                name=name,
                description=description or "",
                photo_ref=photo_ref,
            )
            self._next_id += 1
            self._items[item.id] = item

        logger.info("Item created: id=%d name=%r photo=%s", item.id, item.name, photo_ref)
        return item.copy()

    def list(self) -> List[InventoryItem]:
        """All items in insertion order, as of the time of the call."""
        with self._lock:
            return [item.copy() for item in self._items.values()]

    def get(self, item_id: int) -> InventoryItem:
        with self._lock:
            return self._get_stored(item_id).copy()

    def update(self, item_id: int, *, name=UNSET, description=UNSET) -> InventoryItem:
        """
        Apply a partial update.

        Only fields that were provided are written. An explicit empty string
        counts as provided and IS applied, for name as well as description.
        """
        with self._lock:
            item = self._get_stored(item_id)
            if name is not UNSET:
                item.name = name
            if description is not UNSET:
                item.description = description
            snapshot = item.copy()

        logger.info("Item updated: id=%d", item_id)
        return snapshot

    def set_photo(self, item_id: int, photo_ref: Optional[str]) -> InventoryItem:
        with self._lock:
            item = self._get_stored(item_id)
            item.photo_ref = photo_ref
            snapshot = item.copy()

        logger.info("Item photo replaced: id=%d photo=%s", item_id, photo_ref)
        return snapshot

    def delete(self, item_id: int) -> None:
        with self._lock:
            self._get_stored(item_id)
            del self._items[item_id]

        logger.info("Item deleted: id=%d", item_id)

    def _get_stored(self, item_id: int) -> InventoryItem:
        # Caller must hold self._lock
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError(resource="Item", resource_id=item_id)
        return item
