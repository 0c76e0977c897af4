"""
Tagging app admin
"""
from __future__ import annotations

from django.contrib import admin

from .models import CleanupRun, Record, TagReference, Term, Vocabulary

admin.site.register(Vocabulary)


@admin.register(Term)
class TermAdmin(admin.ModelAdmin):
    """
    Admin definition for Term model
    """
    search_fields = ["name"]
    list_display = ["__str__", "vocabulary"]
    list_filter = ["vocabulary"]


class TagReferenceInline(admin.TabularInline):
    model = TagReference
    autocomplete_fields = ["term"]
    ordering = ["position", "id"]
    extra = 0


@admin.register(Record)
class RecordAdmin(admin.ModelAdmin):
    """
    Admin definition for Record model
    """
    inlines = [TagReferenceInline]
    search_fields = ["title"]
    list_display = ["__str__", "record_type"]
    list_filter = ["record_type"]


@admin.register(CleanupRun)
class CleanupRunAdmin(admin.ModelAdmin):
    """
    Admin definition for CleanupRun model
    """
    list_display = ["__str__", "started", "finished", "processed", "removed"]
    list_filter = ["kind", "status"]
    readonly_fields = [
        "kind", "status", "log", "processed", "with_tags", "without_tags", "removed", "started", "finished",
    ]

    def has_add_permission(self, request):
        """
        Runs are only created by the cleanup commands and tasks.
        """
        return False
