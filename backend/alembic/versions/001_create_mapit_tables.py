"""Create customer, map and zones tables

Revision ID: 001
Revises: None
Create Date: 2025-01-20 00:00:00.000000+00:00

What:  Creates the three MapIt tables and their lookup indexes.
How:   PostgreSQL types: SERIAL keys, TIMESTAMP WITH TIME ZONE, JSONB documents.

Ownership chain: customer ← map ← zones. Deleting a customer deletes their
maps; deleting a map deletes its zones.

Rollback: downgrade() drops all three tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create customer, map and zones, in foreign-key order."""
    op.create_table(
        "customer",
        sa.Column("customer_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "registration_date",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("customer_id", name="pk_customer"),
        sa.UniqueConstraint("email", name="uq_customer_email"),
    )

    op.create_table(
        "map",
        sa.Column("map_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("country", sa.String(100), server_default=sa.text("''"), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        # Opaque documents owned by the map editor UI
        sa.Column("map_data", postgresql.JSONB(), nullable=True),
        sa.Column("map_bounds", postgresql.JSONB(), nullable=True),
        sa.Column("map_code", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("map_id", name="pk_map"),
        sa.ForeignKeyConstraint(
            ["customer_id"],
            ["customer.customer_id"],
            name="fk_map_customer",
            ondelete="CASCADE",
        ),
    )
    op.create_index("idx_map_customer_id", "map", ["customer_id"])
    op.create_index("idx_map_created_at", "map", [sa.text("created_at DESC")])

    op.create_table(
        "zones",
        sa.Column("zone_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("map_id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(20), nullable=False),
        # Ordered [[x, y], ...] boundary
        sa.Column("coordinates", postgresql.JSONB(), nullable=False),
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
        sa.PrimaryKeyConstraint("zone_id", name="pk_zones"),
        sa.ForeignKeyConstraint(
            ["map_id"],
            ["map.map_id"],
            name="fk_zones_map",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["customer_id"],
            ["customer.customer_id"],
            name="fk_zones_customer",
            ondelete="CASCADE",
        ),
    )
    op.create_index("idx_zones_map_id", "zones", ["map_id"])
    op.create_index("idx_zones_customer_id", "zones", ["customer_id"])


def downgrade() -> None:
    """Drop all MapIt tables (reverse foreign-key order)."""
    op.drop_index("idx_zones_customer_id", table_name="zones")
    op.drop_index("idx_zones_map_id", table_name="zones")
    op.drop_table("zones")
    op.drop_index("idx_map_created_at", table_name="map")
    op.drop_index("idx_map_customer_id", table_name="map")
    op.drop_table("map")
    op.drop_table("customer")
