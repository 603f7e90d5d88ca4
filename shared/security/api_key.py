import secrets

from shared.config.settings import get_settings

API_KEY_HEADER = "X-Internal-API-Key"


def internal_api_headers() -> dict:
    """Headers attached to every service-to-service call."""
    return {API_KEY_HEADER: get_settings().internal_api_key}


def verify_api_key(provided_key: str) -> bool:
    """Verify an API key using constant-time comparison to prevent timing attacks."""
    if not provided_key:
        return False
    return secrets.compare_digest(str(provided_key), str(get_settings().internal_api_key))
