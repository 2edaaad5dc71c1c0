"""
User model.

Accounts are mirrored from the external identity provider and keyed by
its uid; passwords are never stored for synced users.
"""

from datetime import datetime

from app.extensions import db

from .base import columns_dict, isoformat


class User(db.Model):
    __tablename__ = "users"

    user_id = db.Column(db.Integer, primary_key=True)
    firebase_uid = db.Column(db.String(128), unique=True, index=True)
    display_name = db.Column(db.String(55), nullable=False)
    username = db.Column(db.String(21), unique=True, nullable=False)
    user_email = db.Column(db.String(35), unique=True, nullable=False)
    hash_password = db.Column(db.String(61), nullable=True)
    creation_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    last_update_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    biography = db.Column(db.String(450))
    profile_image_id = db.Column(db.Integer, db.ForeignKey("images.image_id"), nullable=True)
    created_via = db.Column(db.String(20), default="firebase")

    profile_image = db.relationship("Image", uselist=False)

    def get_simple_dict(self):
        return {
            "user_id": self.user_id,
            "username": self.username,
            "display_name": self.display_name,
        }

    def get_dict(self):
        # Skip sensitive fields
        data = columns_dict(self, exclude=("hash_password",))
        data["profile_image_url"] = self.profile_image.blob_url if self.profile_image else None
        return data

    def get_author_dict(self):
        data = self.get_simple_dict()
        data["biography"] = self.biography
        data["profile_image_url"] = self.profile_image.blob_url if self.profile_image else None
        data["member_since"] = isoformat(self.creation_date)
        return data
