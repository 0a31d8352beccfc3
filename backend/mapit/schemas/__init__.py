"""
MapIt Backend: Pydantic Schemas
=================================

What:  The API contract: request bodies (creation variants) and the
       `{success, ...}` response envelopes.

Modules:
    - common.py: error envelope, plain message envelope, database check
    - map.py:    map creation body, map rows, map list envelopes
    - zone.py:   zone bodies, zone rows, zone envelopes
    - order.py:  order body, order rows with customer and package details
    - admin.py:  admin map listing and store-wide stats
"""
