"""create exchange_rates and transfer_fees tables

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "exchange_rates",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("from_currency", sa.String(3), nullable=False),
        sa.Column("to_currency", sa.String(3), nullable=False),
        sa.Column("rate", sa.Numeric(18, 8), nullable=False),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(), nullable=False,
        ),
        sa.UniqueConstraint("from_currency", "to_currency", name="uq_exchange_rates_pair"),
        sa.CheckConstraint("rate > 0", name="ck_exchange_rates_rate_positive"),
    )

    op.create_table(
        "transfer_fees",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("from_country", sa.String(2), nullable=False),
        sa.Column("to_country", sa.String(2), nullable=False),
        sa.Column("payment_method", sa.String(32), nullable=False),
        sa.Column("receiving_method", sa.String(32), nullable=False),
        sa.Column("fee_percentage", sa.Numeric(6, 5), nullable=False),
        sa.UniqueConstraint(
            "from_country", "to_country", "payment_method", "receiving_method",
            name="uq_transfer_fees_route_methods",
        ),
        sa.CheckConstraint(
            "fee_percentage >= 0 AND fee_percentage < 1",
            name="ck_transfer_fees_fraction",
        ),
    )


def downgrade() -> None:
    op.drop_table("transfer_fees")
    op.drop_table("exchange_rates")
