"""
Inventory API — Services Layer
================================

Service Inventory:
    - InventoryRepository: in-memory item store, id issuing, partial updates
    - PhotoStore: photo upload streaming, lookup and public path building

Both are created per application by create_app() and handed to route
handlers through FastAPI dependencies (inventory_api.dependencies).
"""
