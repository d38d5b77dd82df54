"""
Inventory API — Inventory Route Handlers
==========================================

What:  HTTP handlers for registering, listing, fetching, updating, searching
       and deleting inventory items and their photos.
How:   Each handler reads its input, calls the repository and/or photo store,
       and serializes the result. Domain errors (ValidationError,
       NotFoundError, StorageError) propagate to the global exception handlers.
Who:   Registered on the route table below; main.create_app() includes it.

Route Inventory (registration order matters, see routing.RouteTable):
    POST   /register                 create item (multipart)
    GET    /inventory                list items
    GET    /inventory/:item_id/photo photo bytes
    PUT    /inventory/:item_id/photo replace photo (multipart)
    GET    /inventory/:item_id       single item
    PUT    /inventory/:item_id       partial update (JSON)
    DELETE /inventory/:item_id       delete item
    POST   /search                   lookup by id, optional photo annotation

Ids in the path are parsed here rather than typed as int in the signature: a
non-numeric id is just an id that matches no item, so it answers 404.
"""

import json
import logging
from typing import Any, List, Optional

from fastapi import Depends, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from inventory_api.dependencies import get_photo_store, get_repository
from inventory_api.exceptions import NotFoundError, ValidationError
from inventory_api.routing import RouteTable
from inventory_api.schemas.item import ErrorResponse, ItemResponse, ItemUpdate
from inventory_api.services.inventory_repository import InventoryRepository
from inventory_api.services.photo_store import PhotoStore

logger = logging.getLogger(__name__)

routes = RouteTable()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

NOT_FOUND = {404: {"description": "Item not found", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Invalid input", "model": ErrorResponse}}


def parse_item_id(raw: Any) -> Optional[int]:
    """
    Coerce a path or body id to an int, or None if it is not one.

    Accepts ints, integral floats and numeric strings ("3", " 3 ").
    Booleans are not ids.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


def _lookup_id(raw: Any) -> int:
    item_id = parse_item_id(raw)
    if item_id is None:
        raise NotFoundError(resource="Item", resource_id=raw)
    return item_id


def _has_file(upload: Optional[UploadFile]) -> bool:
    # A file part sent without a filename is an empty form control, not a file
    return upload is not None and bool(upload.filename)


def _to_response(item, store: PhotoStore) -> ItemResponse:
    return ItemResponse.from_item(item, store.public_path(item.photo_ref))


async def _read_body_fields(request: Request) -> dict:
    """
    Decode a JSON or form body into a dict.

    An empty body is an empty dict. Raises ValidationError for bodies that are
    not valid JSON.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items()}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(
            message="Request body must be valid JSON",
            field="body",
            context={"error": str(e)},
        )
    if not isinstance(data, dict):
        raise ValidationError(message="Request body must be a JSON object", field="body")
    return data


# ══════════════════════════════════════════════════════════════════════════
# Collection routes
# ══════════════════════════════════════════════════════════════════════════


@routes.route(
    "POST",
    "/register",
    status_code=201,
    response_model=ItemResponse,
    responses={**BAD_REQUEST, 500: {"description": "Photo could not be stored", "model": ErrorResponse}},
    summary="Register a new inventory item",
)
async def register_item(
    inventory_name: Optional[str] = Form(default=None, description="Item name (required)"),
    description: Optional[str] = Form(default=None, description="Item description"),
    photo: Optional[UploadFile] = File(default=None, description="Optional photo file"),
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> ItemResponse:
    """
    Create an item from a multipart form.

    The photo, if any, is written before the item is inserted: a failed write
    answers 500 and leaves no item behind.
    """
    if not inventory_name:
        raise ValidationError(message="inventory_name is required", field="inventory_name")

    logger.info(
        "Received register request: name=%r, photo=%s",
        inventory_name,
        photo.filename if _has_file(photo) else None,
    )

    photo_ref = None
    if _has_file(photo):
        try:
            photo_ref = await store.save(photo, photo.filename)
        finally:
            await photo.close()

    item = repository.create(inventory_name, description or "", photo_ref)
    return _to_response(item, store)


@routes.route(
    "GET",
    "/inventory",
    response_model=List[ItemResponse],
    summary="List all inventory items",
)
async def list_items(
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> List[ItemResponse]:
    return [_to_response(item, store) for item in repository.list()]


# ══════════════════════════════════════════════════════════════════════════
# Photo routes (registered before the generic /inventory/:item_id routes)
# ══════════════════════════════════════════════════════════════════════════


@routes.route(
    "GET",
    "/inventory/:item_id/photo",
    response_class=FileResponse,
    responses={200: {"description": "Photo bytes"}, **NOT_FOUND},
    summary="Download an item's photo",
)
async def get_item_photo(
    item_id: str,
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> FileResponse:
    """404 when the item is unknown, has no photo, or its file is gone from disk."""
    item = repository.get(_lookup_id(item_id))
    if not item.photo_ref:
        raise NotFoundError(resource="Photo", resource_id=item.id)
    return FileResponse(path=str(store.open_for_read(item.photo_ref)))


@routes.route(
    "PUT",
    "/inventory/:item_id/photo",
    response_model=ItemResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Replace an item's photo",
)
async def replace_item_photo(
    item_id: str,
    photo: Optional[UploadFile] = File(default=None, description="New photo file"),
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> ItemResponse:
    # Item first: an unknown id is 404 whether or not a file was sent
    item = repository.get(_lookup_id(item_id))
    if not _has_file(photo):
        raise ValidationError(message="Photo file required", field="photo")

    try:
        stored_name = await store.save(photo, photo.filename)
    finally:
        await photo.close()

    item = repository.set_photo(item.id, stored_name)
    return _to_response(item, store)


# ══════════════════════════════════════════════════════════════════════════
# Single item routes
# ══════════════════════════════════════════════════════════════════════════


@routes.route(
    "GET",
    "/inventory/:item_id",
    response_model=ItemResponse,
    responses=NOT_FOUND,
    summary="Get a single inventory item",
)
async def get_item(
    item_id: str,
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> ItemResponse:
    return _to_response(repository.get(_lookup_id(item_id)), store)


@routes.route(
    "PUT",
    "/inventory/:item_id",
    response_model=ItemResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Update an item's name and/or description",
)
async def update_item(
    item_id: str,
    request: Request,
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> ItemResponse:
    """
    Partial update from a JSON body {name?, description?}.

    Keys that are absent leave the stored value alone; an explicit empty
    string is applied. An empty body changes nothing.
    """
    item = repository.get(_lookup_id(item_id))
    fields = await _read_body_fields(request)
    try:
        update = ItemUpdate.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(
            message="name and description must be strings",
            field="body",
            context={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        )

    item = repository.update(item.id, **update.provided())
    return _to_response(item, store)


@routes.route(
    "DELETE",
    "/inventory/:item_id",
    response_class=PlainTextResponse,
    responses={200: {"description": "Item deleted"}, **NOT_FOUND},
    summary="Delete an inventory item",
)
async def delete_item(
    item_id: str,
    repository: InventoryRepository = Depends(get_repository),
) -> PlainTextResponse:
    repository.delete(_lookup_id(item_id))
    return PlainTextResponse("Deleted")


# ══════════════════════════════════════════════════════════════════════════
# Search
# ══════════════════════════════════════════════════════════════════════════


@routes.route(
    "POST",
    "/search",
    response_model=ItemResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    summary="Find an item by id",
)
async def search_item(
    request: Request,
    repository: InventoryRepository = Depends(get_repository),
    store: PhotoStore = Depends(get_photo_store),
) -> ItemResponse:
    """
    Look up an item by body `id` (JSON or form).

    With has_photo == "yes" and a photo present, the response description
    gets " (Photo: <public path>)" appended. Only the response copy changes;
    the stored description stays as it was.
    """
    fields = await _read_body_fields(request)
    item = repository.get(_lookup_id(fields.get("id")))

    response = _to_response(item, store)
    if fields.get("has_photo") == "yes" and item.photo_ref:
        response.description += f" (Photo: {response.photo})"
    return response
