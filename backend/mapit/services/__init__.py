"""
MapIt Backend: Services Layer
===============================

What:  Query handlers sitting between routes (HTTP) and the database.
How:   Each service method validates required inputs, composes one SQL
       statement with SQLAlchemy, runs it on the request's session, and maps
       the rows onto response schemas. Store failures are converted into
       MapIt exceptions here, so nothing unformatted reaches the transport.

Service Inventory:
    - MapService:  list maps, create a map, list one customer's maps
    - ZoneService: list/get/create/update/delete zones, bulk save
    - OrderService: list orders (optionally per customer), create an order
    - AdminService: admin map and order listings, store-wide stats

Services are stateless singletons; the session is passed into every call.
"""
