"""
Image model.

Registered blobs stored in object storage and referenced by spots,
list entries, posts and user profiles.
"""

from datetime import datetime

from app.extensions import db

from .base import columns_dict


class Image(db.Model):
    __tablename__ = "images"

    image_id = db.Column(db.Integer, primary_key=True)
    image_name = db.Column(db.String(255), nullable=False)
    blob_url = db.Column(db.String(500), nullable=False)
    content_type = db.Column(db.String(100))
    file_size = db.Column(db.BigInteger)
    created_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def get_dict(self):
        return columns_dict(self)
