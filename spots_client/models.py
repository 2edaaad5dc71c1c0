"""
Client-side data types built from API payloads.

- Spot, SpotPage: spot listings
- SpotList, ListContents: lists and their spots
- Post, PostPage, PostCreationResult: posts
- Image, UploadResult: uploaded images
- UserSyncResult: outcome of an account sync
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse


def parse_datetime(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return isoparse(value)


@dataclass
class Spot:
    spot_id: int
    spot_name: str
    country: str
    city: str
    category: str
    description: Optional[str] = None
    created_date: Optional[datetime] = None
    spot_image_id: Optional[int] = None
    spot_image_url: Optional[str] = None
    added_to_list_date: Optional[datetime] = None
    statistics: Optional[Dict[str, Any]] = None

    @property
    def location(self):
        return f"{self.city}, {self.country}"

    @classmethod
    def from_dict(cls, data):
        return cls(
            spot_id=data["spot_id"],
            spot_name=data["spot_name"],
            country=data["country"],
            city=data["city"],
            category=data["category"],
            description=data.get("description"),
            created_date=parse_datetime(data.get("created_date") or data.get("spot_created_date")),
            spot_image_id=data.get("spot_image_id"),
            spot_image_url=data.get("spot_image_url"),
            added_to_list_date=parse_datetime(data.get("added_to_list_date")),
            statistics=data.get("statistics"),
        )


@dataclass
class SpotPage:
    spots: List[Spot]
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_dict(cls, data):
        pagination = data.get("pagination") or {}
        return cls(
            spots=[Spot.from_dict(spot) for spot in data.get("spots", [])],
            page=pagination.get("page", 1),
            limit=pagination.get("limit", 0),
            total=pagination.get("total", 0),
            total_pages=pagination.get("total_pages", 0),
            has_next=pagination.get("has_next", False),
            has_previous=pagination.get("has_previous", False),
        )


@dataclass
class SpotList:
    list_id: int
    list_name: str
    is_public: bool

    @classmethod
    def from_dict(cls, data):
        return cls(
            list_id=data["list_id"],
            list_name=data["list_name"],
            is_public=bool(data["is_public"]),
        )


@dataclass
class ListContents:
    list_id: int
    list_name: str
    is_public: bool
    total_spots: int
    spots: List[Spot] = field(default_factory=list)
    first_spot_added: Optional[datetime] = None
    last_spot_added: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        info = data["list_info"]
        return cls(
            list_id=info["list_id"],
            list_name=info["list_name"],
            is_public=bool(info["is_public"]),
            total_spots=info.get("total_spots", 0),
            spots=[Spot.from_dict(spot) for spot in data.get("spots", [])],
            first_spot_added=parse_datetime(info.get("first_spot_added")),
            last_spot_added=parse_datetime(info.get("last_spot_added")),
        )


@dataclass
class Post:
    post_id: int
    type: str
    user_id: int
    description: Optional[str] = None
    created_date: Optional[datetime] = None
    title: Optional[str] = None
    list_id: Optional[int] = None
    spot_id: Optional[int] = None
    rating: Optional[int] = None
    user: Optional[Dict[str, Any]] = None
    images: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        return cls(
            post_id=data["post_id"],
            type=data["type"],
            user_id=data["user_id"],
            description=data.get("description"),
            created_date=parse_datetime(data.get("created_date")),
            title=data.get("title"),
            list_id=data.get("list_id"),
            spot_id=data.get("spot_id"),
            rating=data.get("rating"),
            user=data.get("user"),
            images=data.get("images") or [],
        )


@dataclass
class PostPage:
    posts: List[Post]
    total: int
    page: int
    limit: int
    has_more: bool

    @classmethod
    def from_dict(cls, data):
        pagination = data.get("pagination") or {}
        return cls(
            posts=[Post.from_dict(post) for post in data.get("posts", [])],
            total=pagination.get("total", 0),
            page=pagination.get("page", 1),
            limit=pagination.get("limit", 0),
            has_more=pagination.get("hasMore", False),
        )


@dataclass
class PostCreationResult:
    post_id: int
    list_id: int
    type: str
    title: str
    description: Optional[str]
    user_id: int
    created_date: datetime
    spots_count: int


@dataclass
class Image:
    image_id: int
    image_name: str
    blob_url: str
    content_type: Optional[str] = None
    file_size: Optional[int] = None
    created_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            image_id=data["image_id"],
            image_name=data["image_name"],
            blob_url=data["blob_url"],
            content_type=data.get("content_type"),
            file_size=data.get("file_size"),
            created_date=parse_datetime(data.get("created_date")),
        )


@dataclass
class UploadResult:
    file_path: str
    image: Optional[Image] = None
    error: Optional[str] = None

    @property
    def is_successful(self):
        return self.image is not None and self.error is None


@dataclass
class UserSyncResult:
    success: bool
    user_id: Optional[int] = None
    action: Optional[str] = None
    user_data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            success=bool(data.get("success")),
            user_id=data.get("user_id"),
            action=data.get("action"),
            user_data=data.get("user_data"),
            error=data.get("error"),
        )
