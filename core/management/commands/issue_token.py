from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from core.models import AccessToken


class Command(BaseCommand):
    help = "Issue a bearer access token for an existing user"

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("--label", default="", help="Optional note shown in the admin")

    def handle(self, *args, **options):
        try:
            user = User.objects.get(username=options["username"])
        except User.DoesNotExist:
            raise CommandError(f"User '{options['username']}' does not exist")
        if not user.is_active:
            raise CommandError(f"User '{user.username}' is inactive")

        token = AccessToken.objects.create(user=user, label=options["label"])
        self.stdout.write(self.style.SUCCESS(f"Issued token for {user.username}"))
        self.stdout.write(token.key)
