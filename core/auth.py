import logging

from django.utils import timezone

from .models import AccessToken

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer"


def get_authorization_header(request) -> str:
    """Return the raw ``Authorization`` header or an empty string."""
    return request.headers.get("Authorization", "").strip()


def parse_bearer(header: str) -> str | None:
    """Extract the credential from ``Bearer <key>``; ``None`` if malformed."""
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_PREFIX:
        return None
    return parts[1]


def authenticate_bearer(header: str):
    """Resolve an ``Authorization`` header to an active user, or ``None``."""
    key = parse_bearer(header)
    if not key:
        return None
    try:
        token = AccessToken.objects.select_related("user").get(key=key)
    except AccessToken.DoesNotExist:
        logger.info("Rejected unknown bearer credential")
        return None
    if not token.user.is_active:
        logger.info("Rejected bearer credential for inactive user %s", token.user_id)
        return None
    AccessToken.objects.filter(pk=token.pk).update(last_used_at=timezone.now())
    return token.user
