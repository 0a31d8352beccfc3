"""Create packages and orders tables

Revision ID: 002
Revises: 001
Create Date: 2025-01-27 00:00:00.000000+00:00

What:  Adds the purchasable packages and the orders placed for them, and
       seeds the three default tiers.

Ownership: customer ← orders → packages. Deleting a customer deletes their
orders; a package with orders cannot be deleted.

Rollback: downgrade() drops both tables (destructive, all orders lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


DEFAULT_PACKAGES = [
    {"name": "free", "price": 0.00, "allowed_maps": 1, "priority": 1, "active": True},
    {"name": "starter", "price": 5.00, "allowed_maps": 3, "priority": 2, "active": True},
    {"name": "premium", "price": 15.00, "allowed_maps": 30, "priority": 3, "active": True},
]


def upgrade() -> None:
    """Create packages then orders, then seed the default packages."""
    packages = op.create_table(
        "packages",
        sa.Column("package_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("allowed_maps", sa.Integer(), nullable=False),
        sa.Column("priority", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("package_id", name="pk_packages"),
        sa.UniqueConstraint("name", name="uq_packages_name"),
    )
    op.create_index("idx_packages_active", "packages", ["active"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("package_id", sa.Integer(), nullable=False),
        sa.Column(
            "date_time",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "status", sa.String(50), server_default=sa.text("'pending'"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
        sa.ForeignKeyConstraint(
            ["customer_id"],
            ["customer.customer_id"],
            name="fk_orders_customer",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["package_id"],
            ["packages.package_id"],
            name="fk_orders_package",
            ondelete="RESTRICT",
        ),
    )
    op.create_index("idx_orders_customer_id", "orders", ["customer_id"])
    op.create_index("idx_orders_package_id", "orders", ["package_id"])
    op.create_index("idx_orders_date_time", "orders", ["date_time"])

    op.bulk_insert(packages, DEFAULT_PACKAGES)


def downgrade() -> None:
    """Drop orders then packages."""
    op.drop_index("idx_orders_date_time", table_name="orders")
    op.drop_index("idx_orders_package_id", table_name="orders")
    op.drop_index("idx_orders_customer_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("idx_packages_active", table_name="packages")
    op.drop_table("packages")
