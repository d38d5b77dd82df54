"""
Inventory API — Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract for inventory items.
Why:   Input validation for JSON bodies, response serialization, and the
       OpenAPI document served at /swagger.json.

Design Decision:
    Schemas are separate from models.item.InventoryItem because the stored
    photo_ref (a filename) must never leave the process: responses carry the
    public photo path instead.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from inventory_api.models.item import InventoryItem


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ItemResponse(BaseModel):
    """
    What:  Wire representation of an inventory item.
    Who:   Returned by every JSON-producing inventory endpoint.

    photo is the public URL path (e.g. "/cache/3f2c....jpg") or null.
    """
    id: int = Field(description="Item identifier, issued sequentially from 1")
    name: str = Field(description="Item name")
    description: str = Field(default="", description="Free-text description")
    photo: Optional[str] = Field(
        default=None,
        description="Public path of the item's photo, null if it has none",
    )

    @classmethod
    def from_item(cls, item: InventoryItem, photo_path: Optional[str]) -> "ItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            photo=photo_path,
        )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ItemUpdate(BaseModel):
    """
    What:  Body of PUT /inventory/{id}.
    How:   Only keys present in the body are applied (see model_fields_set).
           An explicit "" is applied; an explicit null is rejected.
    """
    name: Optional[str] = Field(default=None, description="New item name")
    description: Optional[str] = Field(default=None, description="New description")

    model_config = {"extra": "ignore", "strict": True}

    @field_validator("name", "description", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must be a string, not null")
        return v

    def provided(self) -> dict:
        """Fields the client actually sent, ready for InventoryRepository.update()."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for 400/404/500 responses.

    Example:
        {
            "error": "validation_error",
            "message": "inventory_name is required",
            "details": {"field": "inventory_name"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
