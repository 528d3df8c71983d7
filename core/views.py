"""Demo pages that render the navigation tag."""

from django.http import Http404
from django.shortcuts import render

PAGES = ("home", "about", "contact_me", "reports")


def get_base_template(request):
    """Return partial base for HTMX requests, full base otherwise."""
    if request.htmx:
        return "partials/partial_base.html"
    return "base.html"


def page(request, section="home"):
    if section not in PAGES:
        raise Http404(f"No page named {section!r}")
    return render(
        request,
        "pages/page.html",
        {"base_template": get_base_template(request), "section": section},
    )
