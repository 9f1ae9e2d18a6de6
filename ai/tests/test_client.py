from unittest.mock import MagicMock, patch

import requests
from django.test import SimpleTestCase, override_settings

from ai.client import (
    DEFAULT_SAFETY_SETTINGS,
    GeminiClient,
    GenerationConfig,
    extract_text,
    generate_objective,
)
from ai.errors import ConfigurationError, UpstreamError, ValidationError
from ai.prompts import GenerationRequest, build_objective_prompt


def _response(status=200, payload=None, reason="OK", json_error=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.reason = reason
    if json_error:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    resp.text = "<html>upstream down</html>"
    return resp


class ExtractTextTests(SimpleTestCase):
    def test_first_candidate_first_part(self):
        data = {
            "candidates": [
                {"content": {"parts": [{"text": "first"}, {"text": "second"}]}},
                {"content": {"parts": [{"text": "other"}]}},
            ]
        }
        self.assertEqual(extract_text(data), "first")

    def test_missing_or_empty_text(self):
        for data in (
            {},
            {"candidates": []},
            {"candidates": [{}]},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
            None,
        ):
            with self.subTest(data=data):
                self.assertIsNone(extract_text(data))


class GenerationConfigTests(SimpleTestCase):
    @override_settings(
        GEMINI_API_KEY="abc", GEMINI_API_ENDPOINT="https://example.test/gen", AI_HTTP_TIMEOUT=5
    )
    def test_from_settings(self):
        config = GenerationConfig.from_settings()
        self.assertEqual(config.api_key, "abc")
        self.assertEqual(config.endpoint, "https://example.test/gen")
        self.assertEqual(config.timeout, 5)
        self.assertEqual(config.safety_settings, DEFAULT_SAFETY_SETTINGS)

    def test_default_safety_policy(self):
        categories = [s["category"] for s in DEFAULT_SAFETY_SETTINGS]
        self.assertEqual(
            categories,
            [
                "HARM_CATEGORY_HARASSMENT",
                "HARM_CATEGORY_HATE_SPEECH",
                "HARM_CATEGORY_SEXUALLY_EXPLICIT",
                "HARM_CATEGORY_DANGEROUS_CONTENT",
            ],
        )
        self.assertEqual({s["threshold"] for s in DEFAULT_SAFETY_SETTINGS}, {"BLOCK_ONLY_HIGH"})


class GeminiClientTests(SimpleTestCase):
    def setUp(self):
        self.session = MagicMock()
        self.client = GeminiClient(
            GenerationConfig(api_key="k", endpoint="https://example.test/gen", timeout=7),
            session=self.session,
        )

    def test_generate_posts_prompt(self):
        self.session.post.return_value = _response(
            payload={"candidates": [{"content": {"parts": [{"text": "Done."}]}}]}
        )
        self.assertEqual(self.client.generate("Hello"), "Done.")
        self.session.post.assert_called_once_with(
            "https://example.test/gen",
            params={"key": "k"},
            json={
                "contents": [{"parts": [{"text": "Hello"}]}],
                "safetySettings": DEFAULT_SAFETY_SETTINGS,
            },
            headers={"Content-Type": "application/json"},
            timeout=7,
        )

    def test_missing_key(self):
        client = GeminiClient(GenerationConfig(api_key=""), session=self.session)
        with self.assertRaises(ConfigurationError):
            client.generate("Hello")
        self.session.post.assert_not_called()

    def test_non_json_error_body(self):
        self.session.post.return_value = _response(
            status=502, reason="Bad Gateway", json_error=ValueError("no json")
        )
        with self.assertRaisesMessage(
            UpstreamError, "Gemini API request failed: 502 Bad Gateway - <html>upstream down</html>"
        ):
            self.client.generate("Hello")

    def test_unparseable_success_body(self):
        self.session.post.return_value = _response(json_error=ValueError("bad"))
        with self.assertRaisesMessage(UpstreamError, "Could not extract objective text"):
            self.client.generate("Hello")

    def test_timeout_is_upstream_error(self):
        self.session.post.side_effect = requests.Timeout("timed out")
        with self.assertRaises(UpstreamError) as ctx:
            self.client.generate("Hello")
        self.assertEqual(ctx.exception.status, 500)

    @patch("ai.client.requests.Session.close")
    def test_owned_session_is_closed(self, mock_close):
        with GeminiClient(GenerationConfig(api_key="k")):
            pass
        mock_close.assert_called_once_with()

    def test_injected_session_is_left_open(self):
        with self.client:
            pass
        self.session.close.assert_not_called()

    def test_generate_objective_validates_before_calling(self):
        with self.assertRaisesMessage(ValidationError, "Missing event details in request body."):
            generate_objective(self.client, {"title": "Expo", "objective": "o"})
        self.session.post.assert_not_called()


class PromptTests(SimpleTestCase):
    def test_prompt_contains_event_details(self):
        prompt = build_objective_prompt(
            GenerationRequest(title="Expo", objective="Showcase projects", description="Annual expo")
        )
        self.assertIn("Title: Expo", prompt)
        self.assertIn("Stated Objective: Showcase projects", prompt)
        self.assertIn("Description: Annual expo", prompt)
        self.assertIn("Do not use markdown", prompt)
        self.assertIn("single, well-written paragraph", prompt)

    def test_prompt_keeps_braces_in_user_text(self):
        prompt = build_objective_prompt(
            GenerationRequest(title="{json} night", objective="o", description="d")
        )
        self.assertIn("Title: {json} night", prompt)

    def test_request_rejects_blank_fields(self):
        with self.assertRaises(ValueError):
            GenerationRequest(title="T", objective=" ", description="D")

    def test_request_stringifies_truthy_values(self):
        request = GenerationRequest(title=2024, objective="Showcase", description=["expo", "day"])
        self.assertEqual(request.title, "2024")
        self.assertEqual(request.description, "['expo', 'day']")

    def test_request_treats_falsy_values_as_missing(self):
        for value in (0, None, ""):
            with self.assertRaises(ValueError):
                GenerationRequest(title=value, objective="o", description="d")
