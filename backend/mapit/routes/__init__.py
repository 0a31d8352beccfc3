"""
MapIt Backend: API Routes Package
===================================

What:  HTTP route handlers. Each module handles one resource.

Route Inventory:
    - maps.py:    GET  /maps                  (all maps with owner + zone count)
                  POST /maps                  (create a map)
                  GET  /customer/{id}/maps    (one customer's maps)
    - zones.py:   GET  /zones?map_id=         (zones of a map)
                  POST /zones                 (create a zone)
                  POST /zones/bulk            (update-or-insert a batch)
                  GET/PUT/DELETE /zones/{id}
    - orders.py:  GET  /orders?customer_id=     (orders with customer + package)
                  POST /orders                (place an order)
    - admin.py:   GET  /admin/maps             (maps with owner contact)
                  GET  /admin/orders           (all orders)
                  GET  /admin/stats            (store-wide totals)
    - health.py:  GET  /test-db               (database connectivity check)

Routes are thin: they resolve the session dependency, call a service, and
wrap the result in a `{success: true, ...}` envelope. Unsupported methods on
these paths fall through to the 405 handler in main.py.
"""
