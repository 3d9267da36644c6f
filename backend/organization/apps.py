"""Organization app configuration."""

from django.apps import AppConfig


class OrganizationConfig(AppConfig):
    """Configuration for the organization app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "organization"
    verbose_name = "Companies & Sites"
