class GenerationError(Exception):
    """Base error for the report objective proxy; ``status`` is the HTTP code returned."""

    status = 500


class AuthError(GenerationError):
    """Missing or invalid caller credential."""

    status = 401


class ValidationError(GenerationError):
    """Request body is missing required event details."""

    status = 400


class ConfigurationError(GenerationError):
    """Server-side Gemini credential is not configured."""

    status = 500


class UpstreamError(GenerationError):
    """Gemini returned an error or a response we could not use."""

    status = 500
