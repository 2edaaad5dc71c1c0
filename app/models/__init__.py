"""
Models package for the travel spots backend.

This package contains all database models organized by domain:
- base: Common serialization helpers
- image: Stored images (Image)
- spot: Travel destinations (Spot)
- spot_list: Lists of spots (List, ListSpot)
- user: Accounts mirrored from the identity provider (User)
- post: Posts and their subtypes (Post, ReviewPost, CommunityPost, ListPost, PostImage)
"""

from app.extensions import db

# Import all models to ensure they are registered with SQLAlchemy
from .image import Image
from .post import POST_TYPES, CommunityPost, ListPost, Post, PostImage, ReviewPost
from .spot import Spot
from .spot_list import List, ListSpot
from .user import User

# Export all models for easy importing
__all__ = [
    # Database instance
    "db",
    # Core models
    "Image",
    "Spot",
    "User",
    # List models
    "List",
    "ListSpot",
    # Post models
    "POST_TYPES",
    "Post",
    "ReviewPost",
    "CommunityPost",
    "ListPost",
    "PostImage",
]
