"""Create the append-only audit_logs table.

Revision ID: 001
Revises:
Create Date: 2026-10-18

Tables: audit_logs
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create audit_logs and its query indexes."""
    op.create_table(
        "audit_logs",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("operator_id", UUID),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("target_id", UUID, nullable=False),
        sa.Column("target_model", sa.String(32), nullable=False),
        sa.Column("operator_info", JSONB, nullable=False, server_default="{}"),
        sa.Column("target_info", JSONB, nullable=False, server_default="{}"),
        sa.Column(
            "changes",
            JSONB,
            nullable=False,
            server_default='{"before": {}, "after": {}}',
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE')",
            name="chk_audit_logs_action",
        ),
        sa.CheckConstraint(
            "target_model IN ('User', 'FormTemplate', 'Form', "
            "'MarketingCategory', 'MarketingBudget', 'MarketingExpense')",
            name="chk_audit_logs_target_model",
        ),
    )
    op.create_index("idx_audit_logs_operator", "audit_logs", ["operator_id"])
    op.create_index("idx_audit_logs_target", "audit_logs", ["target_id"])
    op.create_index(
        "idx_audit_logs_operator_identifier",
        "audit_logs",
        [sa.text("(operator_info->>'identifier')")],
    )
    op.create_index(
        "idx_audit_logs_created_at", "audit_logs", [sa.text("created_at DESC")]
    )
    op.create_index("idx_audit_logs_action", "audit_logs", ["action"])
    op.create_index("idx_audit_logs_target_model", "audit_logs", ["target_model"])
    op.create_index(
        "idx_audit_logs_target_model_created",
        "audit_logs",
        ["target_model", sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_audit_logs_operator_created",
        "audit_logs",
        ["operator_id", sa.text("created_at DESC")],
    )

    # Append-only: reject UPDATE and DELETE at the database level
    op.execute(
        """
        CREATE OR REPLACE FUNCTION audit_logs_reject_mutation() RETURNS trigger AS $$
        BEGIN
            RAISE EXCEPTION 'audit_logs is append-only';
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_audit_logs_append_only
        BEFORE UPDATE OR DELETE ON audit_logs
        FOR EACH ROW EXECUTE FUNCTION audit_logs_reject_mutation()
        """
    )


def downgrade() -> None:
    """Drop audit_logs."""
    op.execute("DROP TRIGGER IF EXISTS trg_audit_logs_append_only ON audit_logs")
    op.execute("DROP FUNCTION IF EXISTS audit_logs_reject_mutation()")
    op.drop_table("audit_logs")
