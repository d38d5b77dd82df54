"""
Inventory API — Application Package
=====================================

An in-memory inventory tracking HTTP service: register items with an optional
photo, then list, fetch, update, replace the photo of, search or delete them.

Layering:

    ┌─────────────────────────────────────┐
    │   Routes + Route Table (API Layer)  │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (Repository, PhotoStore)  │  ← state, files, invariants
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← dataclass record + Pydantic
    └─────────────────────────────────────┘

Nothing is persisted: the inventory lives as long as the process does.
"""

__version__ = "1.0.0"
