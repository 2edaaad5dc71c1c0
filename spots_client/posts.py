"""
Post creation and lookup.

Community and list posts are backed by a list, so creating one takes several
requests: create the list, add each spot, then create the post. If adding
spots or creating the post fails, the list is force-deleted before the error
is raised as a PostCreationError.
"""

import logging

from spots_client.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_SPOTS_PER_POST,
    MIN_SPOTS_PER_POST,
    POST_DESCRIPTION_MAX_LENGTH,
    POST_TITLE_MAX_LENGTH,
    POST_TYPES,
    POSTS_ENDPOINT,
)
from spots_client.exceptions import ApiException, DataException, PostCreationError, ValidationException
from spots_client.models import Post, PostCreationResult, PostPage, parse_datetime
from spots_client.validation import bool_param, is_positive_int, require_choice, require_positive_id

logger = logging.getLogger(__name__)


def spot_id_of(spot):
    """Accept either a spot id or an object exposing ``spot_id``."""
    return getattr(spot, "spot_id", spot)


class PostsService:
    def __init__(self, api_client, lists_service):
        self.api = api_client
        self.lists = lists_service

    # Validation helpers return a list of messages; empty means valid.

    @staticmethod
    def validate_post_title(title):
        errors = []
        if not isinstance(title, str) or not title.strip():
            errors.append("Title is required")
        elif len(title.strip()) > POST_TITLE_MAX_LENGTH:
            errors.append(f"Title must be {POST_TITLE_MAX_LENGTH} characters or less")
        return errors

    @staticmethod
    def validate_post_description(description):
        if description and len(description.strip()) > POST_DESCRIPTION_MAX_LENGTH:
            return [f"Description must be {POST_DESCRIPTION_MAX_LENGTH} characters or less"]
        return []

    @staticmethod
    def validate_spot_selection(spots):
        spots = list(spots or [])
        errors = []
        if len(spots) < MIN_SPOTS_PER_POST:
            errors.append(f"Select at least {MIN_SPOTS_PER_POST} spot")
        if len(spots) > MAX_SPOTS_PER_POST:
            errors.append(f"You can select up to {MAX_SPOTS_PER_POST} spots")
        spot_ids = [spot_id_of(spot) for spot in spots]
        if not all(is_positive_int(spot_id) for spot_id in spot_ids):
            errors.append("All spot IDs must be positive integers")
        elif len(set(spot_ids)) != len(spot_ids):
            errors.append("Duplicate spots are not allowed")
        return errors

    def create_community_post(self, title, description, user_id, spots):
        """Create a community post backed by a new private list."""
        return self._create_list_backed_post("community", title, description, user_id, spots)

    def create_list_post(self, title, description, user_id, spots):
        """Create a list post backed by a new public list."""
        return self._create_list_backed_post("list", title, description, user_id, spots)

    def _create_list_backed_post(self, post_type, title, description, user_id, spots):
        errors = (
            self.validate_post_title(title)
            + self.validate_post_description(description)
            + self.validate_spot_selection(spots)
        )
        if not is_positive_int(user_id):
            errors.append("Valid user ID is required")
        if errors:
            raise PostCreationError("validate", "; ".join(errors))

        title = title.strip()
        description = (description or "").strip() or None
        spot_ids = [spot_id_of(spot) for spot in spots]

        try:
            if post_type == "community":
                spot_list = self.lists.create_hidden_list_for_post(title)
            else:
                spot_list = self.lists.create_list(self.lists.generate_public_list_name(title), is_public=True)
        except ApiException as e:
            raise PostCreationError("create_list", f"Could not create list: {e.message}", e.status_code) from e
        logger.info("Created list %s for %s post", spot_list.list_id, post_type)

        step = "add_spots"
        try:
            self.lists.add_spots_to_list(spot_list.list_id, spot_ids)
            step = "create_post"
            response = self.api.post(
                POSTS_ENDPOINT,
                {
                    "type": post_type,
                    "title": title,
                    "description": description,
                    "user_id": user_id,
                    "list_id": spot_list.list_id,
                },
            )
            post_id, created_date = self._created_post_fields(response)
        except ApiException as e:
            self._discard_list(spot_list.list_id)
            raise PostCreationError(step, f"Could not create {post_type} post: {e.message}", e.status_code) from e

        logger.info("Created %s post %s with %d spots", post_type, post_id, len(spot_ids))
        return PostCreationResult(
            post_id=post_id,
            list_id=spot_list.list_id,
            type=post_type,
            title=title,
            description=description,
            user_id=user_id,
            created_date=created_date,
            spots_count=len(spot_ids),
        )

    @staticmethod
    def _created_post_fields(response):
        data = response.get("data")
        if not isinstance(data, dict):
            data = {}
        post_id = response.get("post_id") or data.get("post_id")
        created_date = data.get("created_date") or response.get("created_date")
        if not post_id or not created_date:
            raise DataException("Post response is missing post_id or created_date")
        try:
            return post_id, parse_datetime(created_date)
        except (TypeError, ValueError, OverflowError) as e:
            raise DataException(f"Post response has an invalid created_date: {created_date!r}") from e

    def _discard_list(self, list_id):
        try:
            self.lists.delete_list(list_id, force=True)
            logger.info("Deleted list %s after failed post creation", list_id)
        except ApiException as e:
            logger.warning("Could not delete list %s after failed post creation: %s", list_id, e)

    def create_review_post(self, spot_id, rating, description, user_id):
        require_positive_id(spot_id, "spot ID")
        require_positive_id(user_id, "user ID")
        if not is_positive_int(rating) or rating > 5:
            raise ValidationException("Rating must be an integer between 1 and 5")
        errors = self.validate_post_description(description)
        if errors:
            raise ValidationException(errors[0])

        response = self.api.post(
            POSTS_ENDPOINT,
            {
                "type": "review",
                "spot_id": spot_id,
                "rating": rating,
                "description": (description or "").strip() or None,
                "user_id": user_id,
            },
        )
        return Post.from_dict(response["data"])

    def share_list(self, list_id, title, description, user_id):
        """Create a list post for a list that already exists."""
        require_positive_id(list_id, "list ID")
        require_positive_id(user_id, "user ID")
        errors = self.validate_post_title(title) + self.validate_post_description(description)
        if errors:
            raise ValidationException("; ".join(errors))

        response = self.api.post(
            POSTS_ENDPOINT,
            {
                "type": "list",
                "title": title.strip(),
                "description": (description or "").strip() or None,
                "user_id": user_id,
                "list_id": list_id,
            },
        )
        return Post.from_dict(response["data"])

    def get_posts(self, page=1, limit=DEFAULT_PAGE_SIZE, user_id=None, post_type=None):
        require_positive_id(page, "page")
        if not is_positive_int(limit) or limit > MAX_PAGE_SIZE:
            raise ValidationException(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        params = {"page": page, "limit": limit}
        if user_id is not None:
            params["userId"] = require_positive_id(user_id, "user ID")
        if post_type is not None:
            params["type"] = require_choice(post_type, "post type", POST_TYPES)
        return PostPage.from_dict(self.api.get(POSTS_ENDPOINT, params=params))

    def get_post(self, post_id):
        require_positive_id(post_id, "post ID")
        return Post.from_dict(self.api.get(f"{POSTS_ENDPOINT}/{post_id}")["post"])

    def delete_post(self, post_id, dry_run=False, soft_delete=False):
        require_positive_id(post_id, "post ID")
        params = {"dryRun": bool_param(dry_run), "softDelete": bool_param(soft_delete)}
        return self.api.delete(f"{POSTS_ENDPOINT}/{post_id}", params=params)
