"""
MapIt Backend: ORM Models
===========================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and the SQLite test suite).
"""

from mapit.models.customer import Customer
from mapit.models.map import Map
from mapit.models.order import Order
from mapit.models.package import Package
from mapit.models.zone import Zone

__all__ = ["Customer", "Map", "Order", "Package", "Zone"]
