"""
Settings for the navigation helpers.

Each value can be overridden in the Django settings module; anything missing
falls back to the built-in defaults below.
"""

from django.conf import settings

DEFAULTS = {
    "NAVLINKS_AUTHORIZATION_METHOD": "is_authenticated",
    "NAVLINKS_AUTHORIZED_CSS": "authorized_nav_link",
    "NAVLINKS_TEMPLATE": "navlinks/navigation.html",
    "NAVLINKS_ACTIVE_CSS": "active",
}


def get_setting(name):
    """Return the configured value for *name* or its built-in default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown navlinks setting: {name}")
    return getattr(settings, name, DEFAULTS[name])


def navigator_defaults():
    """Keyword defaults passed to ``NavigatorOptions.from_mapping``."""
    return {
        "default_authorization_method": get_setting("NAVLINKS_AUTHORIZATION_METHOD"),
        "default_authorized_css": get_setting("NAVLINKS_AUTHORIZED_CSS"),
    }
