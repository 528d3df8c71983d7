import inspect
import logging
import re

from django import template
from django.template.base import FilterExpression, kwarg_re
from django.urls import NoReverseMatch, reverse

from navlinks.conf import get_setting, navigator_defaults
from navlinks.navigator import (
    OPTION_KEYS,
    Navigator,
    NavigatorOptions,
    SectionId,
    humanize_section,
)

logger = logging.getLogger(__name__)

register = template.Library()

_SECTION_TOKEN_RE = re.compile(r"^[A-Za-z_][\w-]*$")

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)

# Keywords consumed by the tag itself rather than passed to the Navigator.
TAG_KEYWORDS = ("namespace", "sections")


def path_matches(path, base):
    """
    Return True when the request *path* matches *base*.

    Supported forms for *base*:
      - Single path: "/users/"
      - Comma-separated list: "/users/,/assets/"
      - Regex: "r/REGEX" (e.g. r/^/assets/.*$/)

    A path ending in a slash matches by prefix, except the root "/" which
    only matches itself. Any other path matches exactly or as a path
    segment prefix, so "/foo" does not match "/foo-old/".
    """
    path = path or ""

    if isinstance(base, str) and base.startswith("r/"):
        try:
            return re.search(base[2:], path) is not None
        except re.error:
            logger.debug("Invalid active path regex %r", base)
            return False

    for part in (p.strip() for p in str(base).split(",")):
        if not part:
            continue
        if part == "/":
            if path == "/":
                return True
        elif part.endswith("/"):
            if path.startswith(part):
                return True
        elif path == part or path.startswith(part + "/"):
            return True

    return False


def section_url(section, namespace=None):
    """Reverse the URL named after *section*, falling back to ``/<section>/``."""
    name = f"{namespace}:{section}" if namespace else str(section)
    try:
        return reverse(name)
    except NoReverseMatch:
        return f"/{section}/"


def _takes_section(predicate):
    """True unless *predicate* accepts no positional arguments."""
    try:
        parameters = inspect.signature(predicate).parameters.values()
    except (TypeError, ValueError):
        return True
    return any(p.kind in _POSITIONAL_KINDS for p in parameters)


def is_authorized(navigator, section, user):
    """Ask *user* whether a protected *section* may be shown."""
    if not navigator.requires_authorization(section):
        return True
    if user is None:
        return False

    method = navigator.authorization_method()
    predicate = getattr(user, method, None)
    if predicate is None:
        logger.debug("User %r has no authorization method %r", user, method)
        return False
    if not callable(predicate):
        return bool(predicate)
    if _takes_section(predicate):
        return bool(predicate(section))
    return bool(predicate())


class NavigationNode(template.Node):
    def __init__(self, entries, options, target_var=None):
        self.entries = entries
        self.options = options
        self.target_var = target_var

    def _resolve_sections(self, context):
        if "sections" in self.options:
            return self.options["sections"].resolve(context)
        return [
            entry.resolve(context) if isinstance(entry, FilterExpression) else entry
            for entry in self.entries
        ]

    def render(self, context):
        request = context.get("request")
        resolved = {
            name: expr.resolve(context)
            for name, expr in self.options.items()
            if name not in TAG_KEYWORDS
        }
        navigator = Navigator(
            self._resolve_sections(context),
            NavigatorOptions.from_mapping(resolved, **navigator_defaults()),
            subtitles=getattr(request, "nav_subtitles", None),
        )

        if self.target_var:
            context[self.target_var] = navigator
            return ""

        namespace = None
        if "namespace" in self.options:
            namespace = self.options["namespace"].resolve(context)

        user = getattr(request, "user", None) or context.get("user")
        path = getattr(request, "path", "")

        links = []
        for item in navigator.links():
            if not is_authorized(navigator, item.section, user):
                logger.debug("Hiding unauthorized navigation section %s", item.section)
                continue
            link = item.as_dict()
            link["href"] = section_url(item.section, namespace)
            link["active"] = bool(request) and path_matches(path, link["href"])
            links.append(link)

        nav_template = context.template.engine.get_template(
            get_setting("NAVLINKS_TEMPLATE")
        )
        return nav_template.render(
            context.new(
                {
                    "navigator": navigator,
                    "links": links,
                    "active_css": get_setting("NAVLINKS_ACTIVE_CSS"),
                }
            )
        )


@register.tag
def navigation(parser, token):
    """
    Render a navigation list.

    Usage::

        {% navigation home "Start here" about "Who we are" hover_text=True %}
        {% navigation home about reports authorize="reports" with="is_staff" %}
        {% navigation sections=menu namespace="site" %}
        {% navigation home about as nav %}

    Bare identifiers are sections; quoted strings, ``_("...")`` and
    variables with filters are the subtitle for the preceding section.
    Keywords are navigator options plus ``namespace`` (URL namespace used
    to reverse each section) and ``sections`` (a variable holding the whole
    section list).
    """
    bits = token.split_contents()
    tag_name = bits.pop(0)

    target_var = None
    if len(bits) >= 2 and bits[-2] == "as":
        target_var = bits[-1]
        bits = bits[:-2]

    entries = []
    options = {}
    for bit in bits:
        name, value = kwarg_re.match(bit).groups()
        if name:
            if name not in OPTION_KEYS and name not in TAG_KEYWORDS:
                raise template.TemplateSyntaxError(
                    f"'{tag_name}' received unknown keyword argument '{name}'"
                )
            if name in options:
                raise template.TemplateSyntaxError(
                    f"'{tag_name}' received multiple values for keyword argument '{name}'"
                )
            options[name] = parser.compile_filter(value)
            continue

        if options:
            raise template.TemplateSyntaxError(
                f"'{tag_name}' sections must come before keyword arguments"
            )
        if _SECTION_TOKEN_RE.match(bit):
            entries.append(SectionId(bit))
        else:
            entries.append(parser.compile_filter(bit))

    if "sections" in options and entries:
        raise template.TemplateSyntaxError(
            f"'{tag_name}' takes either inline sections or sections=, not both"
        )
    if "sections" not in options and not entries:
        raise template.TemplateSyntaxError(f"'{tag_name}' requires at least one section")

    return NavigationNode(entries, options, target_var)


@register.simple_tag(takes_context=True)
def active_path(context, base):
    """Return the active CSS class when the current request path matches *base*."""
    request = context.get("request")
    if not request:
        return ""
    if path_matches(request.path, base):
        return get_setting("NAVLINKS_ACTIVE_CSS")
    return ""


@register.filter
def section_title(section):
    """``{{ "contact_me"|section_title }}`` renders ``Contact Me``."""
    return humanize_section(section)


@register.filter
def subtitle(subtitles, section):
    """Look up a section's subtitle in a subtitle map."""
    if not subtitles:
        return ""
    return subtitles.get(section, "")
