import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from core.auth import authenticate_bearer, get_authorization_header

from .client import GeminiClient, generate_objective
from .errors import AuthError, GenerationError, ValidationError
from .prompts import MISSING_DETAILS

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _with_cors(response):
    for name, value in CORS_HEADERS.items():
        response[name] = value
    return response


def _json(payload: dict, status: int = 200):
    return _with_cors(JsonResponse(payload, status=status))


def _parse_body(request) -> dict:
    try:
        body = json.loads(request.body or b"{}")
    except ValueError:
        raise ValidationError("Request body must be valid JSON.")
    if not isinstance(body, dict):
        raise ValidationError(MISSING_DETAILS)
    return body


@csrf_exempt
@require_http_methods(["POST", "OPTIONS"])
def generate_report_objective(request):
    """Turn title/objective/description into a formal report objective via Gemini."""
    if request.method == "OPTIONS":
        return _with_cors(HttpResponse(status=200))

    try:
        header = get_authorization_header(request)
        if not header:
            raise AuthError("Missing authorization header")
        user = authenticate_bearer(header)
        if user is None:
            raise AuthError("Unauthorized")

        with GeminiClient.from_settings() as client:
            client.ensure_configured()
            text = generate_objective(client, _parse_body(request))
    except GenerationError as exc:
        logger.error("AI report generation error (%s): %s", exc.status, exc)
        return _json({"error": str(exc)}, status=exc.status)

    logger.info("Generated report objective for user %s", user.id)
    return _json({"objective": text})
