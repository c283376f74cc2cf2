from django.core.management.base import BaseCommand, CommandError

from apps.accounts.services import promote_to_admin
from apps.common.errors import NotFound


class Command(BaseCommand):
    help = "Grant the admin role to an existing account (out-of-band promotion)."

    def add_arguments(self, parser):
        parser.add_argument("email", help="Email the account was registered with")

    def handle(self, *args, **options):
        try:
            user = promote_to_admin(options["email"])
        except NotFound as e:
            raise CommandError(f"No account registered with {options['email']}") from e
        self.stdout.write(self.style.SUCCESS(f"{user.email} (#{user.code}) is now admin"))
