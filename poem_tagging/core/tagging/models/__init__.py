"""
Core models for poem tagging
"""
from .base import Record, TagReference, Term, Vocabulary
from .cleanup import CleanupRun, CleanupRunKind, CleanupRunState, CleanupSetting
