import os
from dataclasses import dataclass

from dotenv import load_dotenv

from spots_client.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


@dataclass
class ClientConfig:
    """Connection settings for the backend API."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls):
        """Read SPOTS_API_BASE_URL and SPOTS_API_TIMEOUT, after loading a .env file."""
        load_dotenv()
        return cls(
            base_url=os.environ.get("SPOTS_API_BASE_URL", DEFAULT_BASE_URL),
            timeout=float(os.environ.get("SPOTS_API_TIMEOUT", DEFAULT_TIMEOUT)),
        )
