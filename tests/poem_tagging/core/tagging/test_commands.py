"""
Test the tag cleanup management commands
"""
from __future__ import annotations

from io import StringIO
from unittest.mock import patch

from django.core.management import CommandError, call_command
from django.db import DatabaseError
from django.test import TestCase

import poem_tagging.core.tagging.api as tagging_api
from poem_tagging.core.tagging.models import CleanupRun, Term, Vocabulary

from .test_models import TestTagCleanupMixin
from .utils import create_record, tag_names


class TestFixPoemTagsCommand(TestTagCleanupMixin, TestCase):
    """
    Test the fix_poem_tags command
    """

    def call(self, *args) -> str:
        out = StringIO()
        call_command("fix_poem_tags", *args, stdout=out)
        return out.getvalue()

    def test_fix(self) -> None:
        output = self.call("--start", "0", "--count", "10")
        assert "Processed 3 records (2 with tags, 1 without tags). Next start offset: 3" in output
        assert "Started at" in output
        assert tag_names(self.ode.id) == ["love", "family"]
        assert CleanupRun.objects.count() == 1

    def test_remembers_parameters(self) -> None:
        self.call("--start", "1", "--count", "1")
        assert tagging_api.get_run_setting(tagging_api.LAST_FIX_START) == 1
        assert tagging_api.get_run_setting(tagging_api.LAST_FIX_COUNT) == 1

        output = self.call()
        assert "Processed 1 records (1 with tags, 0 without tags). Next start offset: 2" in output
        # Record 1 is before the remembered offset
        assert tag_names(self.ode.id) == ["#love #family"]

    def test_invalid_count(self) -> None:
        with self.assertRaises(CommandError) as exc:
            self.call("--count", "0")
        assert "Invalid 'count'" in str(exc.exception)
        assert not CleanupRun.objects.exists()

    def test_failure(self) -> None:
        record = create_record(self.vocabulary, "#joy")
        with patch("poem_tagging.core.tagging.stores.Term.objects.create", side_effect=DatabaseError("disk full")):
            with self.assertRaises(CommandError) as exc:
                self.call("--start", "0", "--count", "10")
        message = str(exc.exception)
        assert "Processed 3 records" in message
        assert f"Could not create term 'joy' while cleaning record {record.id}: disk full" in message


class TestReclaimUnusedTermsCommand(TestTagCleanupMixin, TestCase):
    """
    Test the reclaim_unused_terms command
    """

    def call(self, *args) -> str:
        out = StringIO()
        call_command("reclaim_unused_terms", *args, stdout=out)
        return out.getvalue()

    def test_dry_run(self) -> None:
        output = self.call("--dry-run")
        assert "3 unused terms" in output
        assert tagging_api.count_unused() == 3
        assert not CleanupRun.objects.exists()

    def test_reclaim(self) -> None:
        output = self.call("--count", "2")
        assert "Removed 2 unused terms" in output
        assert tagging_api.count_unused() == 1
        assert tagging_api.get_run_setting(tagging_api.LAST_RECLAIM_COUNT) == 2

    def test_reclaim_uses_remembered_count(self) -> None:
        tagging_api.set_run_setting(tagging_api.LAST_RECLAIM_COUNT, 1)
        self.call()
        assert tagging_api.count_unused() == 2

    def test_missing_vocabulary(self) -> None:
        Vocabulary.objects.filter(name="tags").delete()
        with self.assertRaises(CommandError) as exc:
            self.call()
        assert "Vocabulary 'tags' does not exist" in str(exc.exception)

    def test_invalid_count(self) -> None:
        with self.assertRaises(CommandError):
            self.call("--count", "-3")
        assert Term.objects.count() == 7
