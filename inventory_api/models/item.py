"""
Inventory API — Inventory Item Model
======================================

What:  In-memory record for a single inventory item.
Why:   Plain dataclass owned by the InventoryRepository; the API layer never
       sees it directly, it serializes through schemas.item.ItemResponse.
Who:   Created, mutated and copied by InventoryRepository only.

Field notes:
    - id: Positive, issued by the repository counter (1, 2, 3, ...), never reused
    - photo_ref: Stored filename inside the photo cache, NOT a URL. The API
      rewrites it to a public path before it leaves the process.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass
class InventoryItem:
    """A single inventory record."""

    id: int
    name: str
    description: str = ""
    photo_ref: Optional[str] = None

    def copy(self) -> "InventoryItem":
        """Detached snapshot; changes to it never reach the repository."""
        return replace(self)
