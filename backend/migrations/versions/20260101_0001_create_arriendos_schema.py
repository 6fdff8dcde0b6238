"""create arriendos schema

Revision ID: 20260101_0001
Revises:
Create Date: 2026-01-01

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


revision = "20260101_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    if "clients" not in tables:
        op.create_table(
            "clients",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=150), nullable=False),
            sa.Column("company_name", sa.String(length=150), nullable=True),
            sa.Column("company_document", sa.String(length=100), nullable=True),
            sa.Column("rut", sa.String(length=20), nullable=True),
            sa.Column("phone_number", sa.String(length=30), nullable=True),
            sa.Column("address", sa.String(length=255), nullable=True),
            sa.Column("creation_date", sa.String(length=30), nullable=True),
            sa.Column("frequent_client", sa.String(length=10), nullable=True),
            sa.Column("created", sa.String(length=40), nullable=True),
            sa.Column("photo_file_name", sa.String(length=255), nullable=True),
            sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        )
        op.create_index("ix_clients_rut", "clients", ["rut"], unique=False)

    if "products" not in tables:
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("name", sa.String(length=150), nullable=False),
            sa.Column("code", sa.String(length=50), nullable=False),
            sa.Column("brand", sa.String(length=100), nullable=True),
            sa.Column("price_net", sa.Numeric(12, 2), server_default=sa.text("0"), nullable=False),
            sa.Column("price_iva", sa.Numeric(12, 2), server_default=sa.text("0"), nullable=False),
            sa.Column("price_total", sa.Numeric(12, 2), server_default=sa.text("0"), nullable=False),
            sa.Column("price_warranty", sa.Numeric(12, 2), server_default=sa.text("0"), nullable=False),
            sa.Column("rented", sa.Boolean(), server_default=sa.text("0"), nullable=False),
            sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.UniqueConstraint("code", name="uq_products_code"),
        )

    if "rents" not in tables:
        op.create_table(
            "rents",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("client_id", sa.Integer(), nullable=False),
            sa.Column("product_id", sa.Integer(), nullable=False),
            sa.Column("quantity", sa.Integer(), server_default=sa.text("1"), nullable=False),
            sa.Column("delivery_date", sa.String(length=40), nullable=True),
            sa.Column("payment_method", sa.String(length=50), nullable=True),
            sa.Column("warranty_value", sa.Numeric(12, 2), server_default=sa.text("0"), nullable=False),
            sa.Column("warranty_type", sa.String(length=50), nullable=True),
            sa.Column("is_finished", sa.Boolean(), server_default=sa.text("0"), nullable=False),
            sa.Column("is_paid", sa.Boolean(), server_default=sa.text("0"), nullable=False),
            sa.Column("total_days", sa.Numeric(10, 2), nullable=True),
            sa.Column("total_price", sa.Numeric(12, 2), nullable=True),
            sa.Column("observations", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
            sa.ForeignKeyConstraint(["client_id"], ["clients.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="RESTRICT"),
        )
        op.create_index("ix_rents_client_id", "rents", ["client_id"], unique=False)
        op.create_index("ix_rents_product_id", "rents", ["product_id"], unique=False)
        op.create_index("ix_rents_is_finished", "rents", ["is_finished"], unique=False)

    if "users" not in tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("username", sa.String(length=100), nullable=False),
            sa.Column("password", sa.String(length=255), nullable=False),
            sa.Column("name", sa.String(length=150), nullable=True),
            sa.Column("role", sa.String(length=50), server_default="user", nullable=False),
            sa.Column("membership_paid", sa.Boolean(), server_default=sa.text("0"), nullable=False),
            sa.UniqueConstraint("username", name="uq_users_username"),
        )


def downgrade():
    bind = op.get_bind()
    insp = inspect(bind)
    tables = set(insp.get_table_names())

    if "rents" in tables:
        op.drop_index("ix_rents_is_finished", table_name="rents")
        op.drop_index("ix_rents_product_id", table_name="rents")
        op.drop_index("ix_rents_client_id", table_name="rents")
        op.drop_table("rents")
    if "users" in tables:
        op.drop_table("users")
    if "products" in tables:
        op.drop_table("products")
    if "clients" in tables:
        op.drop_index("ix_clients_rut", table_name="clients")
        op.drop_table("clients")
