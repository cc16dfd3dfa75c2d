# users/management/commands/purge_expired_tokens.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from users.services.token_service import purge_expired_tokens


class Command(BaseCommand):
    help = "Delete expired refresh sessions and password reset tokens."

    def handle(self, *args, **options):
        counts = purge_expired_tokens()
        self.stdout.write(
            self.style.SUCCESS(
                "Purged {reset_tokens} reset token(s) and "
                "{refresh_sessions} refresh session(s).".format(**counts)
            )
        )
