# mypy: ignore-errors
"""
Migration Alembic initiale du refuge.

Crée les comptes (users, groups, user_groups), les animaux, les étiquettes et la table
d'association animal/étiquette.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Crée les tables et les index du schéma initial."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("username", sa.String(length=150), nullable=False, unique=True),
        sa.Column("first_name", sa.String(length=150), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(length=150), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("locked_until", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("name", sa.String(length=150), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
    )
    op.create_index("ix_groups_deleted_at", "groups", ["deleted_at"])

    op.create_table(
        "user_groups",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("is_group_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("idx_user_groups_user_admin", "user_groups", ["user_id", "is_group_admin"])
    op.create_index("idx_user_groups_group_id", "user_groups", ["group_id"])

    op.create_table(
        "animal_tags",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("color", sa.String(length=20), nullable=False, server_default=""),
        sa.UniqueConstraint("group_id", "name", name="uq_animal_tags_group_name"),
    )

    op.create_table(
        "animals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("species", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("breed", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("age", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("image_url", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="available"),
        sa.Column("arrival_date", sa.DateTime(), nullable=True),
        sa.Column("foster_start_date", sa.DateTime(), nullable=True),
        sa.Column("quarantine_start_date", sa.DateTime(), nullable=True),
        sa.Column("archived_date", sa.DateTime(), nullable=True),
        sa.Column("last_status_change", sa.DateTime(), nullable=True),
        sa.Column("return_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_returned", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_animals_deleted_at", "animals", ["deleted_at"])
    op.create_index("idx_animal_group_status", "animals", ["group_id", "status"])

    op.create_table(
        "animal_animal_tags",
        sa.Column("animal_id", sa.Integer(), sa.ForeignKey("animals.id"), primary_key=True),
        sa.Column(
            "animal_tag_id", sa.Integer(), sa.ForeignKey("animal_tags.id"), primary_key=True
        ),
    )


def downgrade() -> None:
    """Supprime les tables dans l'ordre inverse des dépendances."""
    op.drop_table("animal_animal_tags")
    op.drop_index("idx_animal_group_status", table_name="animals")
    op.drop_index("ix_animals_deleted_at", table_name="animals")
    op.drop_table("animals")
    op.drop_table("animal_tags")
    op.drop_index("idx_user_groups_group_id", table_name="user_groups")
    op.drop_index("idx_user_groups_user_admin", table_name="user_groups")
    op.drop_table("user_groups")
    op.drop_index("ix_groups_deleted_at", table_name="groups")
    op.drop_table("groups")
    op.drop_index("ix_users_deleted_at", table_name="users")
    op.drop_table("users")
