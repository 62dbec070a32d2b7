"""create transfers and beneficiaries tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision = "003"
down_revision = "002"
branch_labels = None
depends_on = None


def upgrade() -> None:
    transferstatus = sa.Enum(
        "pending", "completed", "cancelled", "failed",
        name="transferstatus",
    )
    transferstatus.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "transfers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("reference", sa.String(20), unique=True, index=True, nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), index=True, nullable=False),
        sa.Column("direction", sa.String(32), nullable=False),
        sa.Column("payment_method", sa.String(32), nullable=False),
        sa.Column("receiving_method", sa.String(32), nullable=False),
        sa.Column("amount_sent", sa.Numeric(18, 2), nullable=False),
        sa.Column("fees", sa.Numeric(18, 2), server_default="0", nullable=False),
        sa.Column("amount_received", sa.Numeric(18, 2), nullable=False),
        sa.Column("sender_currency", sa.String(3), nullable=False),
        sa.Column("receiver_currency", sa.String(3), nullable=False),
        sa.Column("exchange_rate", sa.Numeric(18, 8), nullable=False),
        sa.Column("original_fee_percentage", sa.Numeric(12, 10), nullable=False),
        sa.Column("effective_fee_percentage", sa.Numeric(12, 10), nullable=False),
        sa.Column(
            "promo_code_id", UUID(as_uuid=True),
            sa.ForeignKey("promo_codes.id"), nullable=True,
        ),
        sa.Column("funds_origin", sa.String(200), nullable=False),
        sa.Column("transfer_reason", sa.String(200), nullable=False),
        sa.Column("terms_accepted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("terms_accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", transferstatus, server_default="pending", nullable=False),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("checkout_session_id", sa.String(255), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(), nullable=False,
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(), nullable=False,
        ),
        sa.CheckConstraint("amount_sent > 0", name="ck_transfers_amount_sent_positive"),
        sa.CheckConstraint("amount_received > 0", name="ck_transfers_amount_received_positive"),
    )

    op.create_table(
        "beneficiaries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "transfer_id", UUID(as_uuid=True),
            sa.ForeignKey("transfers.id", ondelete="CASCADE"),
            unique=True, nullable=False,
        ),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("payment_details", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(), nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("beneficiaries")
    op.drop_table("transfers")
    sa.Enum(name="transferstatus").drop(op.get_bind(), checkfirst=True)
