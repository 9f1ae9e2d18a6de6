import json
from unittest.mock import MagicMock, patch

import requests
from django.contrib.auth.models import User
from django.test import TestCase, override_settings
from django.urls import reverse

from core.models import AccessToken

VALID_BODY = {
    "title": "AI Workshop",
    "objective": "Teach prompt design",
    "description": "A hands-on session for second-year students.",
}


def gemini_response(status=200, payload=None, reason="OK"):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.reason = reason
    resp.json.return_value = payload if payload is not None else {}
    resp.text = json.dumps(payload or {})
    return resp


def candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@override_settings(GEMINI_API_KEY="test-key", GEMINI_API_ENDPOINT="https://gemini.test/generate")
class GenerateReportObjectiveTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user("coordinator", "c@example.com", "p")
        self.token = AccessToken.objects.create(user=self.user)
        self.url = reverse("ai:generate_report_objective")

    def _post(self, body=None, auth=True, raw=None):
        headers = {}
        if auth:
            headers["HTTP_AUTHORIZATION"] = f"Bearer {self.token.key}"
        data = raw if raw is not None else json.dumps(VALID_BODY if body is None else body)
        return self.client.post(self.url, data=data, content_type="application/json", **headers)

    def test_preflight_returns_cors_headers(self):
        resp = self.client.options(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b"")
        self.assertEqual(resp["Access-Control-Allow-Origin"], "*")
        self.assertIn("authorization", resp["Access-Control-Allow-Headers"])

    def test_get_not_allowed(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 405)

    @patch("ai.client.requests.Session.post")
    def test_missing_credential_returns_401_without_upstream_call(self, mock_post):
        resp = self._post(auth=False)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Missing authorization header"})
        self.assertEqual(resp["Access-Control-Allow-Origin"], "*")
        mock_post.assert_not_called()

    @patch("ai.client.requests.Session.post")
    def test_unknown_credential_returns_401(self, mock_post):
        resp = self.client.post(
            self.url,
            data=json.dumps(VALID_BODY),
            content_type="application/json",
            HTTP_AUTHORIZATION="Bearer not-a-real-token",
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Unauthorized"})
        mock_post.assert_not_called()

    @patch("ai.client.requests.Session.post")
    def test_inactive_user_returns_401(self, mock_post):
        self.user.is_active = False
        self.user.save()
        resp = self._post()
        self.assertEqual(resp.status_code, 401)
        mock_post.assert_not_called()

    @patch("ai.client.requests.Session.post")
    def test_missing_fields_return_400(self, mock_post):
        for field in ("title", "objective", "description"):
            with self.subTest(field=field):
                body = {k: v for k, v in VALID_BODY.items() if k != field}
                resp = self._post(body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(
                    resp.json(), {"error": "Missing event details in request body."}
                )
        mock_post.assert_not_called()

    @patch("ai.client.requests.Session.post")
    def test_blank_field_returns_400(self, mock_post):
        resp = self._post({**VALID_BODY, "objective": "   "})
        self.assertEqual(resp.status_code, 400)
        mock_post.assert_not_called()

    @patch("ai.client.requests.Session.post")
    def test_invalid_json_returns_400(self, mock_post):
        resp = self._post(raw="{not json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())
        mock_post.assert_not_called()

    @override_settings(GEMINI_API_KEY="")
    @patch("ai.client.requests.Session.post")
    def test_missing_api_key_returns_500(self, mock_post):
        resp = self._post()
        self.assertEqual(resp.status_code, 500)
        self.assertIn("GEMINI_API_KEY is missing", resp.json()["error"])
        mock_post.assert_not_called()

    @patch("ai.client.requests.Session.post")
    def test_success_returns_generated_text(self, mock_post):
        mock_post.return_value = gemini_response(payload=candidate("X"))
        resp = self._post()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"objective": "X"})
        self.assertEqual(resp["Access-Control-Allow-Origin"], "*")

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://gemini.test/generate")
        self.assertEqual(kwargs["params"], {"key": "test-key"})
        body = kwargs["json"]
        prompt = body["contents"][0]["parts"][0]["text"]
        self.assertIn("Title: AI Workshop", prompt)
        self.assertIn("Stated Objective: Teach prompt design", prompt)
        self.assertEqual(len(body["safetySettings"]), 4)
        self.assertTrue(
            all(s["threshold"] == "BLOCK_ONLY_HIGH" for s in body["safetySettings"])
        )

    @patch("ai.client.requests.Session.post")
    def test_empty_candidates_returns_500(self, mock_post):
        mock_post.return_value = gemini_response(payload={"candidates": []})
        with self.assertLogs("ai.views", level="ERROR"):
            resp = self._post()
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {"error": "Could not extract objective text from Gemini API response."},
        )

    @patch("ai.client.requests.Session.post")
    def test_upstream_error_status_returns_500(self, mock_post):
        mock_post.return_value = gemini_response(
            status=403, payload={"error": {"message": "API key invalid"}}, reason="Forbidden"
        )
        resp = self._post()
        self.assertEqual(resp.status_code, 500)
        error = resp.json()["error"]
        self.assertTrue(error.startswith("Gemini API request failed: 403 Forbidden"))
        self.assertIn("API key invalid", error)

    @patch("ai.client.requests.Session.post", side_effect=requests.ConnectionError("boom"))
    def test_network_failure_returns_500(self, mock_post):
        resp = self._post()
        self.assertEqual(resp.status_code, 500)
        self.assertIn("boom", resp.json()["error"])

    @patch("ai.client.requests.Session.close")
    @patch("ai.client.requests.Session.post")
    def test_numeric_title_is_accepted_and_session_closed(self, mock_post, mock_close):
        mock_post.return_value = gemini_response(payload=candidate("Formal objective."))
        resp = self._post({**VALID_BODY, "title": 2024})
        self.assertEqual(resp.status_code, 200)
        prompt = mock_post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        self.assertIn("Title: 2024", prompt)
        mock_close.assert_called_once_with()

    @patch("ai.client.requests.Session.post")
    def test_token_use_is_recorded(self, mock_post):
        mock_post.return_value = gemini_response(payload=candidate("Formal objective."))
        self._post()
        self.token.refresh_from_db()
        self.assertIsNotNone(self.token.last_used_at)
