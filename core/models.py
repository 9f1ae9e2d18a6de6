import secrets

from django.conf import settings
from django.db import models
from django.utils import timezone

# ───────────────────────────────
#  API access tokens
# ───────────────────────────────


class AccessToken(models.Model):
    """Bearer credential identifying a user to the JSON endpoints."""

    key = models.CharField(max_length=40, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="access_tokens",
    )
    label = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.key:
            self.key = self.generate_key()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_key() -> str:
        return secrets.token_hex(20)

    def __str__(self):
        return f"{self.user} ({self.label or self.key[:8]})"
