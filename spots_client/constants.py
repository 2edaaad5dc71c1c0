SPOTS_ENDPOINT = "/api/spots"
LISTS_ENDPOINT = "/api/lists"
POSTS_ENDPOINT = "/api/posts"
IMAGES_ENDPOINT = "/api/images"
USERS_SYNC_ENDPOINT = "/api/users/sync-firebase"

DEFAULT_BASE_URL = "http://localhost:7071"
DEFAULT_TIMEOUT = 30
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Column limits enforced by the backend
LIST_NAME_MAX_LENGTH = 45
POST_TITLE_MAX_LENGTH = 45
POST_DESCRIPTION_MAX_LENGTH = 500
SPOT_FIELD_LIMITS = {
    "spot_name": 55,
    "country": 30,
    "city": 35,
    "category": 30,
    "description": 500,
}

HIDDEN_LIST_SUFFIX = " - Spots"
ELLIPSIS = "..."
PUBLIC_LIST_TOKEN_BYTES = 3

MIN_SPOTS_PER_POST = 1
MAX_SPOTS_PER_POST = 10

SPOT_ORDER_BY_OPTIONS = ("created_date", "spot_name", "city", "category", "country")
LIST_ORDER_BY_OPTIONS = ("added_date", "spot_name", "city", "category")
ORDER_OPTIONS = ("asc", "desc")
POST_TYPES = ("review", "community", "list")

UPLOAD_MAX_WORKERS = 4
