"""
Test the tag cleanup celery tasks
"""
from types import SimpleNamespace
from unittest.mock import patch

from django.test.testcases import TestCase

import poem_tagging.core.tagging.tasks as tagging_tasks
from poem_tagging.core.tagging.data import FixSummary, Outcome

from .test_models import TestTagCleanupMixin
from .utils import tag_names


class TestCleanupCeleryTasks(TestTagCleanupMixin, TestCase):
    """
    Test tag cleanup celery tasks
    """

    def test_fix_batch_task_delegates(self):
        with patch('poem_tagging.core.tagging.api.fix_batch_with_run') as mock_fix:
            mock_fix.return_value = (Outcome(FixSummary(processed=2, with_tags=2)), SimpleNamespace(id=9))

            result = tagging_tasks.fix_batch_task(10, 2)

            mock_fix.assert_called_once_with(10, 2)
        assert result == {
            "with_tags": 2, "without_tags": 0, "processed": 2, "ok": True, "error": None, "run_id": 9,
        }

    def test_fix_batch_task(self):
        result = tagging_tasks.fix_batch_task(0, 10)
        assert result["processed"] == 3
        assert result["ok"]
        assert tag_names(self.ode.id) == ["love", "family"]

    def test_reclaim_task(self):
        result = tagging_tasks.reclaim_task(10)
        assert result["removed"] == 3
        assert result["error"] is None
        assert isinstance(result["run_id"], int)

    def test_task_apply(self):
        result = tagging_tasks.reclaim_task.apply(args=[1]).get()
        assert result["removed"] == 1
