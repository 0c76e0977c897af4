"""
poem tagging Django application initialization.
"""

from django.apps import AppConfig


class TaggingConfig(AppConfig):
    """
    Configuration for the poem tagging Django application.
    """

    name = "poem_tagging.core.tagging"
    verbose_name = "Poem Tagging"
    default_auto_field = "django.db.models.BigAutoField"
    label = "pt_tagging"
