"""Numbering app configuration."""

from django.apps import AppConfig


class NumberingConfig(AppConfig):
    """Configuration for the numbering app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "numbering"
    verbose_name = "Document Numbering"
