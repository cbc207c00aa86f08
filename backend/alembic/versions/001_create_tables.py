"""Create export desk tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates products, freight_rates, usd_rates, exportcustomers and
       exportcustomer_product.
How:   Product variants are a JSONB array on the products row, guarded by the
       `version` counter; see app/models/product.py.

Rollback: downgrade() drops every table (destructive).
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


def _timestamp(name: str, comment: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
        comment=comment,
    )


def upgrade() -> None:
    # ── products ──────────────────────────────────────────────────────────
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("common_name", sa.String(255), nullable=False),
        sa.Column("scientific_name", sa.String(255), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column(
            "variants",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
            comment="Ordered array of size/price variants",
        ),
        sa.Column(
            "version",
            sa.Integer(),
            server_default=sa.text("1"),
            nullable=False,
            comment="Optimistic concurrency counter, bumped on every write",
        ),
        _timestamp("created_at", "When the product was created (UTC)"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_products_common_name", "products", ["common_name"])

    # ── freight_rates ─────────────────────────────────────────────────────
    op.create_table(
        "freight_rates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("airport_code", sa.String(10), nullable=False),
        sa.Column("airport_name", sa.String(255), nullable=False),
        sa.Column("rate_45kg", sa.Float(), nullable=False),
        sa.Column("rate_100kg", sa.Float(), nullable=False),
        sa.Column("rate_300kg", sa.Float(), nullable=False),
        sa.Column("rate_500kg", sa.Float(), nullable=False),
        _timestamp("date", "Moment the rate applies to"),
        _timestamp("updated_at", "Last write; newest wins for 'latest' lookups"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_freight_rates_country_airport", "freight_rates", ["country", "airport_code"]
    )
    op.create_index(
        "idx_freight_rates_updated_at", "freight_rates", [sa.text("updated_at DESC")]
    )

    # ── usd_rates ─────────────────────────────────────────────────────────
    op.create_table(
        "usd_rates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rate", sa.Float(), nullable=False, comment="Local currency per 1 USD"),
        _timestamp("date", "Moment the rate applies to"),
        _timestamp("updated_at", "Last write; the newest row is the current rate"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_usd_rates_updated_at", "usd_rates", [sa.text("updated_at DESC")])

    # ── exportcustomers ───────────────────────────────────────────────────
    op.create_table(
        "exportcustomers",
        sa.Column("cus_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cus_name", sa.String(255), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("airport", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("cus_id"),
    )

    # ── exportcustomer_product ────────────────────────────────────────────
    money = [
        "purchasing_price",
        "exfactoryprice",
        "margin",
        "margin_percentage",
        "export_doc",
        "transport_cost",
        "loading_cost",
        "airway_cost",
        "forwardHandling_cost",
        "multiplier",
        "divisor",
        "freight_cost",
    ]
    op.create_table(
        "exportcustomer_product",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("cus_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("common_name", sa.String(255), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("size_range", sa.String(100), nullable=True),
        *[sa.Column(name, sa.Float(), nullable=True) for name in money],
        sa.Column("gross_weight_tier", sa.String(20), nullable=True),
        sa.Column("fob_price", sa.Float(), nullable=True),
        sa.Column("cnf", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(
            ["cus_id"], ["exportcustomers.cus_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_exportcustomer_product_cus_id", "exportcustomer_product", ["cus_id"]
    )


def downgrade() -> None:
    op.drop_index("idx_exportcustomer_product_cus_id", table_name="exportcustomer_product")
    op.drop_table("exportcustomer_product")
    op.drop_table("exportcustomers")
    op.drop_index("idx_usd_rates_updated_at", table_name="usd_rates")
    op.drop_table("usd_rates")
    op.drop_index("idx_freight_rates_updated_at", table_name="freight_rates")
    op.drop_index("idx_freight_rates_country_airport", table_name="freight_rates")
    op.drop_table("freight_rates")
    op.drop_index("idx_products_common_name", table_name="products")
    op.drop_table("products")
