"""Create children, vaccine_records and reminder_settings tables

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID

# revision identifiers, used by Alembic.
revision: str = "a1c2e3f4b5d6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "children",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("caregiver_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("idx_children_caregiver", "children", ["caregiver_id"])

    op.create_table(
        "vaccine_records",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "child_id", UUID(as_uuid=True),
            sa.ForeignKey("children.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("age_group", sa.String(30), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "completed", name="vaccinestatus"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("completed_date", sa.Date(), nullable=True),
        sa.Column("proof_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "child_id", "age_group", "name", name="uq_vaccine_child_group_name"
        ),
    )
    op.create_index("idx_vaccine_child", "vaccine_records", ["child_id"])
    op.create_index("idx_vaccine_child_due", "vaccine_records", ["child_id", "due_date"])

    op.create_table(
        "reminder_settings",
        sa.Column("caregiver_id", sa.String(100), primary_key=True),
        sa.Column("global_reminders_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("call_reminders_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notification_reminders_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reminder_days_before", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("disabled_vaccine_ids", JSONB(), nullable=False, server_default="[]"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("reminder_settings")
    op.drop_index("idx_vaccine_child_due", table_name="vaccine_records")
    op.drop_index("idx_vaccine_child", table_name="vaccine_records")
    op.drop_table("vaccine_records")
    op.execute("DROP TYPE IF EXISTS vaccinestatus")
    op.drop_index("idx_children_caregiver", table_name="children")
    op.drop_table("children")
