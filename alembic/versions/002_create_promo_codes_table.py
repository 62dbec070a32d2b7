"""create promo_codes table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    discounttype = sa.Enum("PERCENTAGE", "FIXED", name="discounttype")
    discounttype.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "promo_codes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("code", sa.String(32), index=True, nullable=False),
        sa.Column("direction", sa.String(32), nullable=False),
        sa.Column("discount_type", discounttype, nullable=False),
        sa.Column("discount_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("current_uses", sa.Integer(), server_default="0", nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            server_default=sa.func.now(), nullable=False,
        ),
        sa.UniqueConstraint("code", "direction", name="uq_promo_codes_code_direction"),
        sa.CheckConstraint("discount_value > 0", name="ck_promo_codes_value_positive"),
        sa.CheckConstraint("current_uses >= 0", name="ck_promo_codes_uses_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("promo_codes")
    sa.Enum(name="discounttype").drop(op.get_bind(), checkfirst=True)
