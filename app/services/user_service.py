import re
import time
from datetime import datetime

from flask import current_app

from app.models import User
from app.utils.responses import error_response
from app.utils.transactions import transaction
from app.utils.validators import validate_email_format, validate_lengths, validate_required_fields

USERNAME_BASE_MAX_LENGTH = 15
USERNAME_MAX_ATTEMPTS = 9999
FIREBASE_UID_MIN_LENGTH = 10
DEFAULT_DISPLAY_NAME = "User"
DEFAULT_PROVIDER = "firebase"


class UserService:
    """Service class for mirroring identity-provider accounts into users."""

    FIELD_LIMITS = {
        "firebase_uid": 128,
        "email": 35,
        "display_name": 55,
        "provider": 20,
    }

    @staticmethod
    def sync_firebase_user(data):
        """Create or update the user keyed by firebase_uid."""
        is_valid, message = validate_required_fields(data, ("firebase_uid", "email"))
        if not is_valid:
            return error_response(message, 400)

        is_valid, message = validate_lengths(data, UserService.FIELD_LIMITS)
        if not is_valid:
            return error_response(message, 400)

        firebase_uid = data["firebase_uid"]
        email = data["email"]
        display_name = data.get("display_name")
        provider = data.get("provider") or DEFAULT_PROVIDER

        if len(firebase_uid) < FIREBASE_UID_MIN_LENGTH:
            return error_response("Invalid firebase_uid format", 400)
        if not validate_email_format(email):
            return error_response("Invalid email format", 400)

        user = User.query.filter_by(firebase_uid=firebase_uid).first()
        if user:
            with transaction("updating synced user"):
                user.display_name = display_name or user.display_name
                user.user_email = email
                user.last_update_date = datetime.utcnow()

            current_app.logger.info(f"Updated user {user.user_id} from identity provider")
            return {
                "success": True,
                "user_id": user.user_id,
                "action": "updated",
                "message": "User profile updated successfully",
                "user_data": {
                    "user_id": user.user_id,
                    "firebase_uid": firebase_uid,
                    "display_name": user.display_name,
                    "username": user.username,
                    "email": email,
                },
            }, 200

        with transaction("creating synced user") as session:
            user = User(
                firebase_uid=firebase_uid,
                display_name=display_name or DEFAULT_DISPLAY_NAME,
                username=UserService.generate_unique_username(display_name or email),
                user_email=email,
                created_via=provider,
            )
            session.add(user)

        current_app.logger.info(f"Created user {user.user_id} from identity provider")
        return {
            "success": True,
            "user_id": user.user_id,
            "action": "created",
            "message": "User created successfully",
            "user_data": {
                "user_id": user.user_id,
                "firebase_uid": firebase_uid,
                "display_name": user.display_name,
                "username": user.username,
                "email": email,
                "created_via": provider,
            },
        }, 201

    @staticmethod
    def username_base(display_name_or_email):
        """Lowercase alphanumeric stem of a display name or email."""
        base = display_name_or_email.split("@")[0].lower()
        base = re.sub(r"[^a-z0-9]", "", base)[:USERNAME_BASE_MAX_LENGTH]
        return base or "user"

    @staticmethod
    def generate_unique_username(display_name_or_email):
        """First free username among base, base1, base2, ..."""
        base = UserService.username_base(display_name_or_email)
        username = base
        counter = 1
        while User.query.filter_by(username=username).first() is not None:
            username = f"{base}{counter}"
            counter += 1
            if counter > USERNAME_MAX_ATTEMPTS:
                username = f"user{str(int(time.time() * 1000))[-6:]}"
                break
        return username
