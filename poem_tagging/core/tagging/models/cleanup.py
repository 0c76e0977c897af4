"""
Models used to record and configure tag cleanup runs.
"""
from __future__ import annotations

from datetime import datetime

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext as _
from django.utils.translation import gettext_lazy

from poem_tagging.lib.fields import case_sensitive_char_field


class CleanupRunKind(models.TextChoices):
    """
    Enumerates the operations a CleanupRun can record.
    """
    FIX_TAGS = "fix_tags", gettext_lazy("Fix tags")
    RECLAIM_TERMS = "reclaim_terms", gettext_lazy("Reclaim unused terms")


class CleanupRunState(models.TextChoices):
    """
    Enumerates the states that a CleanupRun can be in.
    """
    RUNNING = "running", gettext_lazy("Running")
    SUCCESS = "success", gettext_lazy("Success")
    ERROR = "error", gettext_lazy("Error")


class CleanupRun(models.Model):
    """
    Stores the progress log and final counts of a single cleanup run.
    """

    id = models.BigAutoField(primary_key=True)

    kind = models.CharField(
        max_length=20,
        choices=CleanupRunKind.choices,
        help_text=gettext_lazy("Operation performed by this run"),
    )

    status = models.CharField(
        max_length=20,
        choices=CleanupRunState.choices,
        help_text=gettext_lazy("Run status"),
    )

    log = models.TextField(
        blank=True, default="", help_text=gettext_lazy("Progress messages")
    )

    # Counters. Which ones are meaningful depends on `kind`.
    processed = models.PositiveIntegerField(default=0)
    with_tags = models.PositiveIntegerField(default=0)
    without_tags = models.PositiveIntegerField(default=0)
    removed = models.PositiveIntegerField(default=0)

    started = models.DateTimeField(default=timezone.now)
    finished = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        indexes = [
            models.Index(fields=["kind", "-started"], name="pt_cleanuprun_kind_idx"),
        ]

    def __str__(self):
        return f"<{self.__class__.__name__}> ({self.id}) {self.kind}: {self.status}"

    @classmethod
    def create(cls, kind: CleanupRunKind | str) -> CleanupRun:
        """
        Creates and logs a new CleanupRun.
        """
        run = cls(kind=kind, status=CleanupRunState.RUNNING.value)
        run.add_log(
            _("Started at {time}").format(time=run.started.strftime("%Y-%m-%d %H:%M:%S")),
            save=False,
        )
        run.save()
        return run

    def add_log(self, message: str, save=True):
        """
        Appends a log message to the run.
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.log += f"[{timestamp}] {message}\n"
        if save:
            self.save()

    def record_counts(self, **counts: int):
        """
        Copies summary counters onto the run without saving.
        """
        for name, value in counts.items():
            setattr(self, name, value)

    def end_success(self):
        """
        Completes the run with a log message, and moves its status to SUCCESS.
        """
        self._finish(CleanupRunState.SUCCESS)

    def log_exception(self, exception: Exception):
        """
        Logs an exception and moves the run status to ERROR.
        """
        self.add_log(str(exception), save=False)
        self._finish(CleanupRunState.ERROR)

    def _finish(self, status: CleanupRunState):
        self.finished = timezone.now()
        self.add_log(
            _("Stopped at {time}").format(time=self.finished.strftime("%Y-%m-%d %H:%M:%S")),
            save=False,
        )
        self.status = status.value
        self.save()


class CleanupSetting(models.Model):
    """
    A persisted key/value pair, e.g. the last start offset used to fix tags.

    These only pre-fill the next invocation; nothing depends on them for
    correctness.
    """

    id = models.BigAutoField(primary_key=True)
    name = case_sensitive_char_field(max_length=128, unique=True)
    value = models.JSONField(null=True, blank=True, default=None)

    def __str__(self):
        return f"<{self.__class__.__name__}> {self.name}={self.value!r}"
