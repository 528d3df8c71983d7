from django.apps import AppConfig


class NavlinksConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "navlinks"
    verbose_name = "Navigation links"
