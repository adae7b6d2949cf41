from django.apps import AppConfig


class LinkfinderConfig(AppConfig):
    """Configuration for the linkfinder Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'linkfinder'
