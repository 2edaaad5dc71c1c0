import logging
import secrets

from spots_client.constants import (
    ELLIPSIS,
    HIDDEN_LIST_SUFFIX,
    LIST_NAME_MAX_LENGTH,
    LIST_ORDER_BY_OPTIONS,
    LISTS_ENDPOINT,
    ORDER_OPTIONS,
    PUBLIC_LIST_TOKEN_BYTES,
)
from spots_client.exceptions import ApiException, DataException, ValidationException
from spots_client.models import ListContents, SpotList
from spots_client.validation import bool_param, is_positive_int, require_choice, require_positive_id

logger = logging.getLogger(__name__)


def _fit_list_name(title, suffix):
    """Trim the title and truncate it with an ellipsis so title + suffix fits a list name."""
    available = LIST_NAME_MAX_LENGTH - len(suffix)
    name = title.strip()
    if len(name) > available:
        name = name[:available - len(ELLIPSIS)] + ELLIPSIS
    return name + suffix


class ListsService:
    """Lists and their spot associations."""

    def __init__(self, api_client):
        self.api = api_client

    @staticmethod
    def generate_hidden_list_name(title):
        """Name of the private list backing a community post."""
        return _fit_list_name(title, HIDDEN_LIST_SUFFIX)

    @staticmethod
    def generate_public_list_name(title):
        """Name of the public list backing a list post, with a random hex tag."""
        return _fit_list_name(title, f" #{secrets.token_hex(PUBLIC_LIST_TOKEN_BYTES)}")

    def create_list(self, list_name, is_public=True):
        name = (list_name or "").strip()
        if not name:
            raise ValidationException("List name cannot be empty")
        if len(name) > LIST_NAME_MAX_LENGTH:
            raise ValidationException(f"List name must be {LIST_NAME_MAX_LENGTH} characters or less")

        response = self.api.post(LISTS_ENDPOINT, {"list_name": name, "is_public": bool(is_public)})
        data = response.get("data")
        if not isinstance(data, dict) or "list_id" not in data:
            raise DataException("List response is missing the created list")
        created = SpotList.from_dict({"list_name": name, "is_public": bool(is_public), **data})
        logger.info("Created list %s (public=%s)", created.list_id, created.is_public)
        return created

    def create_hidden_list_for_post(self, title):
        return self.create_list(self.generate_hidden_list_name(title), is_public=False)

    def add_spot_to_list(self, list_id, spot_id, thumbnail_id=None):
        require_positive_id(list_id, "list ID")
        require_positive_id(spot_id, "spot ID")
        body = {"spot_id": spot_id}
        if thumbnail_id is not None:
            body["list_thumbnail_id"] = require_positive_id(thumbnail_id, "thumbnail ID")
        return self.api.post(f"{LISTS_ENDPOINT}/{list_id}/spots", body)

    def add_spots_to_list(self, list_id, spot_ids):
        """Add spots one at a time, in order; the first failure stops the rest."""
        require_positive_id(list_id, "list ID")
        if not spot_ids:
            raise ValidationException("At least one spot ID is required")
        if not all(is_positive_int(spot_id) for spot_id in spot_ids):
            raise ValidationException("All spot IDs must be positive integers")

        unique_spot_ids = list(dict.fromkeys(spot_ids))
        results = []
        for index, spot_id in enumerate(unique_spot_ids, start=1):
            try:
                results.append(self.add_spot_to_list(list_id, spot_id))
            except ApiException:
                logger.info(
                    "Adding spot %s to list %s failed (%d/%d)", spot_id, list_id, index, len(unique_spot_ids)
                )
                raise
        return results

    def remove_spot_from_list(self, list_id, spot_id):
        require_positive_id(list_id, "list ID")
        require_positive_id(spot_id, "spot ID")
        return self.api.delete(f"{LISTS_ENDPOINT}/{list_id}/spots/{spot_id}")

    def get_list_contents(self, list_id, order_by="added_date", order="desc", include_images=True):
        require_positive_id(list_id, "list ID")
        require_choice(order_by, "orderBy", LIST_ORDER_BY_OPTIONS)
        require_choice(order, "order", ORDER_OPTIONS)
        params = {
            "orderBy": order_by,
            "order": order,
            "includeImages": bool_param(include_images),
        }
        return ListContents.from_dict(self.api.get(f"{LISTS_ENDPOINT}/{list_id}/spots", params=params))

    def delete_list(self, list_id, force=False, dry_run=False):
        require_positive_id(list_id, "list ID")
        params = {}
        if force:
            params["force"] = "true"
        if dry_run:
            params["dryRun"] = "true"
        return self.api.delete(f"{LISTS_ENDPOINT}/{list_id}", params=params or None)
