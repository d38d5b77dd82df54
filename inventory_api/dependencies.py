"""
FastAPI dependencies handing the per-application repository and photo store
to route handlers. Both live on app.state (set up by create_app), so every
application instance, including each test app, has its own state.
"""

from fastapi import Request

from inventory_api.services.inventory_repository import InventoryRepository
from inventory_api.services.photo_store import PhotoStore


def get_repository(request: Request) -> InventoryRepository:
    return request.app.state.repository


def get_photo_store(request: Request) -> PhotoStore:
    return request.app.state.photo_store
