"""
Django management command to split '#'-joined tags and deduplicate them
"""
import logging

from django.core.management import CommandError
from django.core.management.base import BaseCommand

from poem_tagging.core.tagging import api
from poem_tagging.core.tagging.exceptions import BatchValidationError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """
    Django management command to clean the tags of a range of records.

    Offset and count default to the values used last time.
    """
    help = "Split tags that were joined with '#' and remove duplicate tags, for a range of records."

    def add_arguments(self, parser):
        parser.add_argument(
            '--start',
            type=int,
            default=None,
            help='Offset of the first record to process (records are ordered by id).',
        )
        parser.add_argument(
            '--count',
            type=int,
            default=None,
            help='How many records to process.',
        )

    def handle(self, *args, **options):
        start = options['start']
        if start is None:
            start = api.get_run_setting(api.LAST_FIX_START, 0)
        count = options['count']
        if count is None:
            count = api.get_run_setting(api.LAST_FIX_COUNT, 1000)

        try:
            outcome, run = api.fix_batch_with_run(start, count)
        except BatchValidationError as exc:
            raise CommandError(str(exc)) from exc
        api.set_run_setting(api.LAST_FIX_START, start)
        api.set_run_setting(api.LAST_FIX_COUNT, count)

        self.stdout.write(run.log)
        summary = outcome.summary
        message = (
            f"Processed {summary.processed} records "
            f"({summary.with_tags} with tags, {summary.without_tags} without tags). "
            f"Next start offset: {start + summary.processed}"
        )
        if not outcome.ok:
            logger.error("Fixing tags stopped early (run %s): %s", run.id, outcome.error)
            raise CommandError(f"{message}\nFailed: {outcome.error}")
        self.stdout.write(self.style.SUCCESS(message))
