"""
Spot model.

A travel destination identified by name, city and country.
"""

from datetime import datetime

from app.extensions import db

from .base import columns_dict


class Spot(db.Model):
    __tablename__ = "spot"

    spot_id = db.Column(db.Integer, primary_key=True)
    spot_name = db.Column(db.String(55), nullable=False)
    country = db.Column(db.String(30), nullable=False)
    city = db.Column(db.String(35), nullable=False)
    category = db.Column(db.String(30), nullable=False)
    description = db.Column(db.String(500))
    created_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    spot_image_id = db.Column(db.Integer, db.ForeignKey("images.image_id"), nullable=True)

    image = db.relationship("Image", uselist=False)

    __table_args__ = (
        db.Index("ix_spot_name_city_country", "spot_name", "city", "country"),
        db.Index("ix_spot_category", "category"),
        db.Index("ix_spot_created_date", "created_date"),
    )

    def get_simple_dict(self):
        data = {}
        keys = [
            "spot_id",
            "spot_name",
            "city",
            "country",
            "category",
        ]
        for key in keys:
            data[key] = getattr(self, key)
        data["location"] = self.location
        return data

    def get_dict(self, include_image=True):
        data = columns_dict(self)
        data["location"] = self.location
        if include_image:
            data["spot_image_url"] = self.image.blob_url if self.image else None
            data["spot_image_name"] = self.image.image_name if self.image else None
        return data

    @property
    def location(self):
        return f"{self.city}, {self.country}"
