import logging

from spots_client.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    ORDER_OPTIONS,
    SPOT_FIELD_LIMITS,
    SPOT_ORDER_BY_OPTIONS,
    SPOTS_ENDPOINT,
)
from spots_client.exceptions import ValidationException
from spots_client.models import Spot, SpotPage
from spots_client.validation import bool_param, is_positive_int, require_choice, require_positive_id

logger = logging.getLogger(__name__)


class SpotsService:
    """Spot listing, lookup and creation."""

    def __init__(self, api_client):
        self.api = api_client

    def get_spots(
        self,
        page=1,
        limit=DEFAULT_PAGE_SIZE,
        category=None,
        country=None,
        city=None,
        search=None,
        order_by="created_date",
        order="desc",
        include_images=True,
        include_stats=False,
    ):
        require_positive_id(page, "page")
        if not is_positive_int(limit) or limit > MAX_PAGE_SIZE:
            raise ValidationException(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        require_choice(order_by, "orderBy", SPOT_ORDER_BY_OPTIONS)
        require_choice(order, "order", ORDER_OPTIONS)

        params = {
            "page": page,
            "limit": limit,
            "orderBy": order_by,
            "order": order,
            "includeImages": bool_param(include_images),
            "includeStats": bool_param(include_stats),
        }
        for name, value in (("category", category), ("country", country), ("city", city), ("search", search)):
            if value:
                params[name] = value

        return SpotPage.from_dict(self.api.get(SPOTS_ENDPOINT, params=params))

    def get_spot(self, spot_id, include_stats=False):
        require_positive_id(spot_id, "spot ID")
        body = self.api.get(f"{SPOTS_ENDPOINT}/{spot_id}", params={"includeStats": bool_param(include_stats)})
        return Spot.from_dict(body["spot"])

    def get_trending_spots(self, limit=10):
        """Newest spots first."""
        return self.get_spots(limit=limit, order_by="created_date", order="desc").spots

    def get_spots_by_category(self, category, page=1, limit=DEFAULT_PAGE_SIZE):
        if not category or not category.strip():
            raise ValidationException("Category is required")
        return self.get_spots(page=page, limit=limit, category=category.strip())

    def search_spots(self, term, page=1, limit=DEFAULT_PAGE_SIZE):
        if not term or not term.strip():
            return []
        return self.get_spots(page=page, limit=limit, search=term.strip()).spots

    def create_spot(self, spot_name, country, city, category, description=None, spot_image_id=None):
        body = {
            "spot_name": (spot_name or "").strip(),
            "country": (country or "").strip(),
            "city": (city or "").strip(),
            "category": (category or "").strip(),
        }
        missing = [name for name, value in body.items() if not value]
        if missing:
            raise ValidationException(f"Missing required fields: {', '.join(missing)}")
        if description:
            body["description"] = description.strip()
        for name, max_length in SPOT_FIELD_LIMITS.items():
            if len(body.get(name) or "") > max_length:
                raise ValidationException(f"{name} must be {max_length} characters or less")
        if spot_image_id is not None:
            body["spot_image_id"] = require_positive_id(spot_image_id, "spot image ID")

        response = self.api.post(SPOTS_ENDPOINT, body)
        logger.info("Created spot %s", response.get("spot_id"))
        return Spot.from_dict(response["data"])
