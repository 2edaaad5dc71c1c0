"""initial_travel_schema

Revision ID: 3f9a1c2d7e41
Revises:
Create Date: 2026-10-18 09:12:44.318204

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f9a1c2d7e41"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create images, spots, lists, users and posts"""

    op.create_table(
        "images",
        sa.Column("image_id", sa.Integer(), nullable=False),
        sa.Column("image_name", sa.String(length=255), nullable=False),
        sa.Column("blob_url", sa.String(length=500), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("created_date", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("image_id"),
    )

    op.create_table(
        "list",
        sa.Column("list_id", sa.Integer(), nullable=False),
        sa.Column("list_name", sa.String(length=45), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("list_id"),
    )

    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("firebase_uid", sa.String(length=128), nullable=True),
        sa.Column("display_name", sa.String(length=55), nullable=False),
        sa.Column("username", sa.String(length=21), nullable=False),
        sa.Column("user_email", sa.String(length=35), nullable=False),
        sa.Column("hash_password", sa.String(length=61), nullable=True),
        sa.Column("creation_date", sa.DateTime(), nullable=False),
        sa.Column("last_update_date", sa.DateTime(), nullable=False),
        sa.Column("biography", sa.String(length=450), nullable=True),
        sa.Column("profile_image_id", sa.Integer(), nullable=True),
        sa.Column("created_via", sa.String(length=20), nullable=True),
        sa.ForeignKeyConstraint(["profile_image_id"], ["images.image_id"]),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("user_email"),
    )
    op.create_index("ix_users_firebase_uid", "users", ["firebase_uid"], unique=True)

    op.create_table(
        "spot",
        sa.Column("spot_id", sa.Integer(), nullable=False),
        sa.Column("spot_name", sa.String(length=55), nullable=False),
        sa.Column("country", sa.String(length=30), nullable=False),
        sa.Column("city", sa.String(length=35), nullable=False),
        sa.Column("category", sa.String(length=30), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("created_date", sa.DateTime(), nullable=False),
        sa.Column("spot_image_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["spot_image_id"], ["images.image_id"]),
        sa.PrimaryKeyConstraint("spot_id"),
    )
    op.create_index("ix_spot_name_city_country", "spot", ["spot_name", "city", "country"])
    op.create_index("ix_spot_category", "spot", ["category"])
    op.create_index("ix_spot_created_date", "spot", ["created_date"])

    op.create_table(
        "list_has_spot",
        sa.Column("list_id", sa.Integer(), nullable=False),
        sa.Column("spot_id", sa.Integer(), nullable=False),
        sa.Column("created_date", sa.DateTime(), nullable=False),
        sa.Column("list_thumbnail_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["list_id"], ["list.list_id"]),
        sa.ForeignKeyConstraint(["spot_id"], ["spot.spot_id"]),
        sa.ForeignKeyConstraint(["list_thumbnail_id"], ["images.image_id"]),
        sa.PrimaryKeyConstraint("list_id", "spot_id"),
    )
    op.create_index("ix_list_has_spot_spot_id", "list_has_spot", ["spot_id"])

    op.create_table(
        "post",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_date", sa.DateTime(), nullable=False),
        sa.Column("type", sa.String(length=11), nullable=False),
        sa.CheckConstraint("type IN ('review', 'community', 'list')", name="ck_post_type"),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"]),
        sa.PrimaryKeyConstraint("post_id"),
    )
    op.create_index("ix_post_created_date", "post", ["created_date"])
    op.create_index("ix_post_user_id", "post", ["user_id"])

    op.create_table(
        "review_post",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("spot_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_post_rating"),
        sa.ForeignKeyConstraint(["post_id"], ["post.post_id"]),
        sa.ForeignKeyConstraint(["spot_id"], ["spot.spot_id"]),
        sa.PrimaryKeyConstraint("post_id"),
    )
    op.create_index("ix_review_post_spot_id", "review_post", ["spot_id"])

    for table_name in ("community_post", "list_post"):
        op.create_table(
            table_name,
            sa.Column("post_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=45), nullable=False),
            sa.Column("list_id", sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(["post_id"], ["post.post_id"]),
            sa.ForeignKeyConstraint(["list_id"], ["list.list_id"]),
            sa.PrimaryKeyConstraint("post_id"),
        )
        op.create_index(f"ix_{table_name}_list_id", table_name, ["list_id"])

    op.create_table(
        "post_images",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("image_id", sa.Integer(), nullable=False),
        sa.Column("image_order", sa.Integer(), nullable=False),
        sa.Column("is_thumbnail", sa.Boolean(), nullable=False),
        sa.Column("created_date", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.post_id"]),
        sa.ForeignKeyConstraint(["image_id"], ["images.image_id"]),
        sa.PrimaryKeyConstraint("post_id", "image_id"),
    )
    # At most one thumbnail per post
    op.create_index(
        "ix_post_images_unique_thumbnail",
        "post_images",
        ["post_id"],
        unique=True,
        postgresql_where=sa.text("is_thumbnail"),
        sqlite_where=sa.text("is_thumbnail = 1"),
    )


def downgrade():
    """Drop every table in reverse dependency order"""
    op.drop_table("post_images")
    op.drop_table("list_post")
    op.drop_table("community_post")
    op.drop_table("review_post")
    op.drop_table("post")
    op.drop_table("list_has_spot")
    op.drop_table("spot")
    op.drop_table("users")
    op.drop_table("list")
    op.drop_table("images")
