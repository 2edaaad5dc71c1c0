import logging

from spots_client.constants import USERS_SYNC_ENDPOINT
from spots_client.exceptions import ApiException
from spots_client.models import UserSyncResult

logger = logging.getLogger(__name__)


class UserSyncService:
    """Mirrors the signed-in identity-provider account into a backend user."""

    def __init__(self, api_client):
        self.api = api_client
        self.current_user_id = None

    def sync_user(self, firebase_uid, email, display_name=None, photo_url=None, provider=None):
        if not firebase_uid or not email:
            return UserSyncResult(success=False, error="firebase_uid and email are required")

        body = {"firebase_uid": firebase_uid, "email": email}
        if display_name:
            body["display_name"] = display_name
        if photo_url:
            body["photo_url"] = photo_url
        if provider:
            body["provider"] = provider

        try:
            result = UserSyncResult.from_dict(self.api.post(USERS_SYNC_ENDPOINT, body))
        except ApiException as e:
            logger.warning("User sync failed: %s", e)
            return UserSyncResult(success=False, error=e.message)

        self.current_user_id = result.user_id
        logger.info("User %s %s", result.user_id, result.action)
        return result

    def clear(self):
        self.current_user_id = None
