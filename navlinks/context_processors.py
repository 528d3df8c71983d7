"""
Context processors for navlinks.

Exposes the request's subtitle map so templates can show the subtitle of the
section being viewed.
"""


def navigation(request):
    """
    Add the request-scoped subtitle map to the template context.

    Returns a dictionary with a ``navigation_subtitles`` key. The map is
    empty until a ``{% navigation %}`` tag with subtitles has rendered.
    """
    return {
        "navigation_subtitles": getattr(request, "nav_subtitles", {}),
    }
