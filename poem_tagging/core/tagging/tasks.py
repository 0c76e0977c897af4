"""
Tag cleanup celery tasks
"""
from __future__ import annotations

from celery import shared_task  # type: ignore[import]

import poem_tagging.core.tagging.api as tagging_api


@shared_task
def fix_batch_task(start_offset: int, count: int) -> dict:
    """
    Runs fix_batch on a celery task
    """
    outcome, run = tagging_api.fix_batch_with_run(start_offset, count)
    return {**outcome.as_dict(), "run_id": run.id}


@shared_task
def reclaim_task(max_to_remove: int) -> dict:
    """
    Runs reclaim on a celery task
    """
    outcome, run = tagging_api.reclaim_with_run(max_to_remove)
    return {**outcome.as_dict(), "run_id": run.id}
