"""
Post models.

A post is a base row plus exactly one subtype row sharing its primary key:
- Post: base row (author, description, type)
- ReviewPost: rating of a spot
- CommunityPost: post backed by a private list of spots
- ListPost: post sharing a public list
- PostImage: ordered images attached to a post
"""

from datetime import datetime

from app.extensions import db

from .base import columns_dict

POST_TYPES = ("review", "community", "list")


class Post(db.Model):
    __tablename__ = "post"

    post_id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.String(500))
    user_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False)
    created_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    type = db.Column(db.String(11), nullable=False)

    user = db.relationship("User", uselist=False)
    review = db.relationship("ReviewPost", uselist=False, viewonly=True)
    community = db.relationship("CommunityPost", uselist=False, viewonly=True)
    list_post = db.relationship("ListPost", uselist=False, viewonly=True)
    images = db.relationship("PostImage", order_by="PostImage.image_order", viewonly=True)

    __table_args__ = (
        db.CheckConstraint("type IN ('review', 'community', 'list')", name="ck_post_type"),
        db.Index("ix_post_created_date", "created_date"),
        db.Index("ix_post_user_id", "user_id"),
    )

    @property
    def detail(self):
        """The subtype row matching this post's type, if present."""
        return {
            "review": self.review,
            "community": self.community,
            "list": self.list_post,
        }.get(self.type)

    def get_dict(self, detailed=False):
        data = columns_dict(self)
        detail = self.detail
        if detail is not None:
            data.update(detail.get_fields())
        if self.user:
            data["user"] = self.user.get_author_dict() if detailed else self.user.get_simple_dict()
        data["images"] = [post_image.get_dict() for post_image in self.images]
        return data


class ReviewPost(db.Model):
    __tablename__ = "review_post"

    post_id = db.Column(db.Integer, db.ForeignKey("post.post_id"), primary_key=True)
    spot_id = db.Column(db.Integer, db.ForeignKey("spot.spot_id"), nullable=False)
    rating = db.Column(db.Integer, nullable=False)

    spot = db.relationship("Spot", uselist=False)

    __table_args__ = (
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_post_rating"),
        db.Index("ix_review_post_spot_id", "spot_id"),
    )

    def get_fields(self):
        return {
            "spot_id": self.spot_id,
            "rating": self.rating,
            "spot": self.spot.get_simple_dict() if self.spot else None,
        }


class TitledPostMixin:
    def get_fields(self):
        return {
            "title": self.title,
            "list_id": self.list_id,
            "list": self.list.get_dict() if self.list else None,
        }


class CommunityPost(TitledPostMixin, db.Model):
    __tablename__ = "community_post"

    post_id = db.Column(db.Integer, db.ForeignKey("post.post_id"), primary_key=True)
    title = db.Column(db.String(45), nullable=False)
    list_id = db.Column(db.Integer, db.ForeignKey("list.list_id"), nullable=False, index=True)

    list = db.relationship("List", uselist=False)


class ListPost(TitledPostMixin, db.Model):
    __tablename__ = "list_post"

    post_id = db.Column(db.Integer, db.ForeignKey("post.post_id"), primary_key=True)
    title = db.Column(db.String(45), nullable=False)
    list_id = db.Column(db.Integer, db.ForeignKey("list.list_id"), nullable=False, index=True)

    list = db.relationship("List", uselist=False)


class PostImage(db.Model):
    __tablename__ = "post_images"

    post_id = db.Column(db.Integer, db.ForeignKey("post.post_id"), primary_key=True)
    image_id = db.Column(db.Integer, db.ForeignKey("images.image_id"), primary_key=True)
    image_order = db.Column(db.Integer, nullable=False)
    is_thumbnail = db.Column(db.Boolean, nullable=False, default=False)
    created_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    image = db.relationship("Image", uselist=False)

    __table_args__ = (
        # At most one thumbnail per post
        db.Index(
            "ix_post_images_unique_thumbnail",
            "post_id",
            unique=True,
            postgresql_where=db.text("is_thumbnail"),
            sqlite_where=db.text("is_thumbnail = 1"),
        ),
    )

    def get_dict(self):
        data = columns_dict(self)
        if self.image:
            data["blob_url"] = self.image.blob_url
            data["image_name"] = self.image.image_name
        return data
