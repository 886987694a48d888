"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("firstname", sa.String(128), nullable=False, server_default=""),
        sa.Column("lastname", sa.String(128), nullable=False, server_default=""),
        sa.Column("type", sa.String(16), nullable=False, server_default="user"),
        sa.Column("country", sa.String(64), nullable=False, server_default=""),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "locations",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("balance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(128), nullable=False, server_default=""),
        sa.Column("country", sa.String(64), nullable=False, server_default=""),
        sa.Column("city", sa.String(128), nullable=False, server_default=""),
        sa.Column("state", sa.String(128), nullable=False, server_default=""),
        sa.Column("address_1", sa.String(256), nullable=False, server_default=""),
        sa.Column("address_2", sa.String(256), nullable=False, server_default=""),
        sa.Column("latitude", sa.Float(), nullable=False, server_default="0"),
        sa.Column("longitude", sa.Float(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_locations_created_by", "locations", ["created_by"])

    op.create_table(
        "picking_routes",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("sector", sa.String(128), nullable=False, server_default=""),
        sa.Column("shift", sa.String(64), nullable=False, server_default=""),
        sa.Column("materials", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="Open"),
        sa.Column("gatherer_id", sa.String(64), nullable=False, server_default="unassigned"),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("initiated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("remaining_picking_points", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_picking_routes_status_starts_at", "picking_routes", ["status", "starts_at"])
    op.create_index("ix_picking_routes_gatherer_status", "picking_routes", ["gatherer_id", "status"])

    op.create_table(
        "picking_points",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("route_id", sa.String(64), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("location_id", sa.String(64), nullable=False),
        sa.Column("pinned_by", sa.String(64), nullable=False, server_default=""),
        sa.Column("name", sa.String(128), nullable=False, server_default=""),
        sa.Column("country", sa.String(64), nullable=False, server_default=""),
        sa.Column("city", sa.String(128), nullable=False, server_default=""),
        sa.Column("state", sa.String(128), nullable=False, server_default=""),
        sa.Column("address_1", sa.String(256), nullable=False, server_default=""),
        sa.Column("address_2", sa.String(256), nullable=False, server_default=""),
        sa.Column("latitude", sa.Float(), nullable=False, server_default="0"),
        sa.Column("longitude", sa.Float(), nullable=False, server_default="0"),
        sa.Column("materials", sa.JSON(), nullable=False),
        sa.Column("picked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["route_id"], ["picking_routes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("route_id", "location_id", name="uq_picking_points_route_location"),
    )
    op.create_index("ix_picking_points_route_id", "picking_points", ["route_id"])


def downgrade() -> None:
    op.drop_index("ix_picking_points_route_id", table_name="picking_points")
    op.drop_table("picking_points")
    op.drop_index("ix_picking_routes_gatherer_status", table_name="picking_routes")
    op.drop_index("ix_picking_routes_status_starts_at", table_name="picking_routes")
    op.drop_table("picking_routes")
    op.drop_index("ix_locations_created_by", table_name="locations")
    op.drop_table("locations")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
