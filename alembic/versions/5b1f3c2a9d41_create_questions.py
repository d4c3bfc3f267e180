"""create questions

Revision ID: 5b1f3c2a9d41
Revises: 
Create Date: 2025-11-03 10:12:41.118204

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5b1f3c2a9d41'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "questions",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("topic", sa.String(120), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Float(), nullable=False),
        sa.Column("time", sa.Float(), nullable=False, server_default=sa.text("10")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_questions")),
    )
    op.create_index(op.f("ix_questions_topic"), "questions", ["topic"])

def downgrade():
    op.drop_index(op.f("ix_questions_topic"), table_name="questions")
    op.drop_table("questions")
