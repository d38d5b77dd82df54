"""
Inventory API — API Routes Package
====================================

Route Inventory:
    - inventory.py: every inventory endpoint, declared on one ordered
      RouteTable (see inventory_api.routing)

Routes stay THIN: read the request, call a service, shape the response.
"""
