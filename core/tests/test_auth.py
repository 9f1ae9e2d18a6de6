from io import StringIO

from django.contrib.auth.models import User
from django.core.management import CommandError, call_command
from django.test import TestCase

from core.auth import authenticate_bearer, parse_bearer
from core.models import AccessToken


class AccessTokenTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user("hod", "hod@example.com", "p")
        self.token = AccessToken.objects.create(user=self.user, label="dashboard")

    def test_key_generated_on_save(self):
        self.assertEqual(len(self.token.key), 40)
        other = AccessToken.objects.create(user=self.user)
        self.assertNotEqual(self.token.key, other.key)

    def test_parse_bearer(self):
        self.assertEqual(parse_bearer("Bearer abc"), "abc")
        self.assertEqual(parse_bearer("bearer abc"), "abc")
        self.assertIsNone(parse_bearer("Token abc"))
        self.assertIsNone(parse_bearer("Bearer"))
        self.assertIsNone(parse_bearer(""))

    def test_authenticates_active_user(self):
        user = authenticate_bearer(f"Bearer {self.token.key}")
        self.assertEqual(user, self.user)
        self.token.refresh_from_db()
        self.assertIsNotNone(self.token.last_used_at)

    def test_rejects_unknown_key(self):
        self.assertIsNone(authenticate_bearer("Bearer deadbeef"))

    def test_rejects_malformed_header(self):
        self.assertIsNone(authenticate_bearer(self.token.key))

    def test_rejects_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        self.assertIsNone(authenticate_bearer(f"Bearer {self.token.key}"))


class IssueTokenCommandTests(TestCase):
    def test_issues_token(self):
        user = User.objects.create_user("principal", "p@example.com", "p")
        out = StringIO()
        call_command("issue_token", "principal", "--label", "mobile", stdout=out)
        token = AccessToken.objects.get(user=user)
        self.assertEqual(token.label, "mobile")
        self.assertIn(token.key, out.getvalue())

    def test_unknown_user(self):
        with self.assertRaises(CommandError):
            call_command("issue_token", "ghost", stdout=StringIO())

    def test_inactive_user(self):
        User.objects.create_user("dean", "d@example.com", "p", is_active=False)
        with self.assertRaises(CommandError):
            call_command("issue_token", "dean", stdout=StringIO())
