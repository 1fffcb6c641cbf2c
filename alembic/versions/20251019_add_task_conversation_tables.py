"""Add task conversation and task message tables

Revision ID: 20251019_add_task_conversation_tables
Revises:
Create Date: 2025-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20251019_add_task_conversation_tables"
down_revision = None
branch_labels = None
depends_on = None

MESSAGE_SENDER = postgresql.ENUM(
    "student", "counselor", name="message_sender", create_type=False
)
MESSAGE_TYPE = postgresql.ENUM(
    "normal", "feedback", "action", "resource", name="message_type", create_type=False
)


def upgrade() -> None:
    bind = op.get_bind()
    MESSAGE_SENDER.create(bind, checkfirst=True)
    MESSAGE_TYPE.create(bind, checkfirst=True)

    # Create task_conversation table
    op.create_table(
        "task_conversation",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=False),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("student_ivy_service_id", sa.String(64), nullable=False),
        sa.Column("selection_id", sa.String(64), nullable=False),
        sa.Column("task_title", sa.String(500), nullable=False),
        sa.Column("task_page", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    # Create task_message table
    op.create_table(
        "task_message",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=False),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("conversation_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("sender", MESSAGE_SENDER, nullable=False),
        sa.Column("sender_name", sa.String(255), nullable=False),
        sa.Column("text", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "message_type", MESSAGE_TYPE, nullable=False, server_default="normal"
        ),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("attachment_name", sa.String(255), nullable=True),
        sa.Column("attachment_url", sa.String(1000), nullable=True),
        sa.Column("attachment_size", sa.String(32), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    # Add foreign key constraint
    op.create_foreign_key(
        "fk_task_message_conversation_id",
        "task_message",
        "task_conversation",
        ["conversation_id"],
        ["id"],
        ondelete="CASCADE",
    )

    # One conversation per task: full key when a page is set, reduced key otherwise
    op.create_index(
        "uq_task_conversation_task_page",
        "task_conversation",
        ["selection_id", "task_title", "task_page"],
        unique=True,
        postgresql_where=sa.text("task_page IS NOT NULL"),
    )
    op.create_index(
        "uq_task_conversation_task",
        "task_conversation",
        ["selection_id", "task_title"],
        unique=True,
        postgresql_where=sa.text("task_page IS NULL"),
    )

    # Create indexes for efficient querying
    op.create_index(
        "ix_task_conversation_student_ivy_service_id",
        "task_conversation",
        ["student_ivy_service_id"],
    )
    op.create_index(
        "ix_task_message_conversation_id", "task_message", ["conversation_id"]
    )


def downgrade() -> None:
    # Drop indexes
    op.drop_index("ix_task_message_conversation_id", table_name="task_message")
    op.drop_index(
        "ix_task_conversation_student_ivy_service_id", table_name="task_conversation"
    )
    op.drop_index("uq_task_conversation_task", table_name="task_conversation")
    op.drop_index("uq_task_conversation_task_page", table_name="task_conversation")

    # Drop foreign key constraint
    op.drop_constraint(
        "fk_task_message_conversation_id", "task_message", type_="foreignkey"
    )

    # Drop tables
    op.drop_table("task_message")
    op.drop_table("task_conversation")

    bind = op.get_bind()
    MESSAGE_TYPE.drop(bind, checkfirst=True)
    MESSAGE_SENDER.drop(bind, checkfirst=True)
