"""
List models.

- List: a named collection of spots, public or private
- ListSpot: the list_has_spot association with its optional thumbnail
"""

from datetime import datetime

from app.extensions import db

from .base import columns_dict, isoformat


class List(db.Model):
    __tablename__ = "list"

    list_id = db.Column(db.Integer, primary_key=True)
    list_name = db.Column(db.String(45), nullable=False)
    is_public = db.Column(db.Boolean, nullable=False, default=True)

    def get_dict(self):
        return columns_dict(self)


class ListSpot(db.Model):
    __tablename__ = "list_has_spot"

    list_id = db.Column(db.Integer, db.ForeignKey("list.list_id"), primary_key=True)
    spot_id = db.Column(db.Integer, db.ForeignKey("spot.spot_id"), primary_key=True)
    created_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    list_thumbnail_id = db.Column(db.Integer, db.ForeignKey("images.image_id"), nullable=True)

    list = db.relationship("List", uselist=False)
    spot = db.relationship("Spot", uselist=False)
    thumbnail = db.relationship("Image", uselist=False)

    __table_args__ = (db.Index("ix_list_has_spot_spot_id", "spot_id"),)

    def get_dict(self):
        return columns_dict(self)

    def get_spot_entry(self, include_images=True):
        """Spot payload as it appears inside a list, with the association fields."""
        data = self.spot.get_dict(include_image=include_images)
        data["spot_created_date"] = data.pop("created_date")
        data["added_to_list_date"] = isoformat(self.created_date)
        data["list_thumbnail_id"] = self.list_thumbnail_id
        if include_images:
            data["thumbnail_url"] = self.thumbnail.blob_url if self.thumbnail else None
            data["thumbnail_name"] = self.thumbnail.image_name if self.thumbnail else None
        return data
