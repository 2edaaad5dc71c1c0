"""Client service layer for the travel spots API."""

from spots_client.api import ApiClient
from spots_client.config import ClientConfig
from spots_client.exceptions import (
    ApiException,
    ConflictException,
    DataException,
    NetworkException,
    NotFoundException,
    PostCreationError,
    RequestTimeoutException,
    ServerException,
    ValidationException,
)
from spots_client.images import ImageUploadService
from spots_client.lists import ListsService
from spots_client.models import (
    Image,
    ListContents,
    Post,
    PostCreationResult,
    PostPage,
    Spot,
    SpotList,
    SpotPage,
    UploadResult,
    UserSyncResult,
)
from spots_client.posts import PostsService
from spots_client.spots import SpotsService
from spots_client.users import UserSyncService

__all__ = [
    "ApiClient",
    "ApiException",
    "ClientConfig",
    "ConflictException",
    "DataException",
    "Image",
    "ImageUploadService",
    "ListContents",
    "ListsService",
    "NetworkException",
    "NotFoundException",
    "Post",
    "PostCreationError",
    "PostCreationResult",
    "PostPage",
    "PostsService",
    "RequestTimeoutException",
    "ServerException",
    "Spot",
    "SpotList",
    "SpotPage",
    "SpotsService",
    "UploadResult",
    "UserSyncResult",
    "UserSyncService",
    "ValidationException",
]
