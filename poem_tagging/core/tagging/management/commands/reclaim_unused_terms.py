"""
Django management command to delete vocabulary terms no record uses
"""
import logging

from django.core.management import CommandError
from django.core.management.base import BaseCommand

from poem_tagging.core.tagging import api
from poem_tagging.core.tagging.exceptions import BatchValidationError, TagCleanupError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Django management command to delete unused terms of the tags vocabulary.
    """
    help = 'Delete terms of the tags vocabulary that no record references.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--count',
            type=int,
            default=None,
            help='Maximum number of terms to delete. Defaults to the value used last time.',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report how many terms are unused.',
        )

    def handle(self, *args, **options):
        try:
            unused = api.count_unused()
        except TagCleanupError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(f"{unused} unused terms")
        if options['dry_run']:
            return

        count = options['count']
        if count is None:
            count = api.get_run_setting(api.LAST_RECLAIM_COUNT, 1000)
        try:
            outcome, run = api.reclaim_with_run(count)
        except BatchValidationError as exc:
            raise CommandError(str(exc)) from exc
        api.set_run_setting(api.LAST_RECLAIM_COUNT, count)

        self.stdout.write(run.log)
        message = f"Removed {outcome.summary.removed} unused terms"
        if not outcome.ok:
            logger.error("Reclaiming terms stopped early (run %s): %s", run.id, outcome.error)
            raise CommandError(f"{message}\nFailed: {outcome.error}")
        self.stdout.write(self.style.SUCCESS(message))
