"""create player and third party identity tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:02:11.204417

"""
from alembic import op
import sqlalchemy as sa



# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "player",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("screen_name", sa.String(length=30), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "third_party_identity",
        sa.Column(
            "provider",
            sa.Enum("Google", name="third_party_provider"),
            nullable=False,
        ),
        sa.Column("external_id", sa.Text(), nullable=False),
        sa.Column("player_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("provider", "external_id"),
    )
    op.create_index(
        op.f("ix_third_party_identity_player_id"),
        "third_party_identity",
        ["player_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_third_party_identity_player_id"), table_name="third_party_identity")
    op.drop_table("third_party_identity")
    op.drop_table("player")
    sa.Enum(name="third_party_provider").drop(op.get_bind(), checkfirst=True)
