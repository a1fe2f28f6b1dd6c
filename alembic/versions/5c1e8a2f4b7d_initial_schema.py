"""initial schema: users, posts, post passengers, reports

Revision ID: 5c1e8a2f4b7d
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1e8a2f4b7d"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("phnum", sa.String(32), nullable=True),
        sa.Column("banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("fcm_token", sa.String(512), nullable=True),
        *timestamps(),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"])
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("departure_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("memo", sa.String(), nullable=True),
        sa.Column("driver_needed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("driver_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("driver_avail", sa.Integer(), nullable=True),
        sa.Column("uploader_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("total_seats", sa.Integer(), nullable=False),
        sa.Column("passenger_count", sa.Integer(), nullable=False, server_default="0"),
        *timestamps(),
    )
    op.create_index(op.f("ix_posts_id"), "posts", ["id"])
    op.create_index(op.f("ix_posts_departure_time"), "posts", ["departure_time"])
    op.create_index(op.f("ix_posts_origin"), "posts", ["origin"])
    op.create_index(op.f("ix_posts_destination"), "posts", ["destination"])
    op.create_index(op.f("ix_posts_driver_id"), "posts", ["driver_id"])
    op.create_index(op.f("ix_posts_uploader_id"), "posts", ["uploader_id"])

    op.create_table(
        "post_passengers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("posts.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        *timestamps(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_post_passenger"),
    )
    op.create_index(op.f("ix_post_passengers_id"), "post_passengers", ["id"])
    op.create_index(op.f("ix_post_passengers_post_id"), "post_passengers", ["post_id"])
    op.create_index(op.f("ix_post_passengers_user_id"), "post_passengers", ["user_id"])

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reporter_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reported_email", sa.String(255), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("body", sa.String(), nullable=False),
        *timestamps(),
    )
    op.create_index(op.f("ix_reports_id"), "reports", ["id"])
    op.create_index(op.f("ix_reports_reporter_id"), "reports", ["reporter_id"])
    op.create_index(op.f("ix_reports_reported_email"), "reports", ["reported_email"])


def downgrade() -> None:
    op.drop_table("reports")
    op.drop_table("post_passengers")
    op.drop_table("posts")
    op.drop_table("users")
