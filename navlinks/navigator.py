"""
Section validation and display derivations for navigation link lists.

A navigation list is written as an ordered run of section identifiers,
optionally interleaved with a human-readable subtitle after each one::

    Navigator([SectionId("home"), SectionId("about")], {})
    Navigator(
        [SectionId("home"), "Start here", SectionId("about"), "Who we are"],
        {"hover_text": True, "authorize": [ALL], "with": "is_staff"},
    )

``Navigator`` validates that shape once, at construction, and then answers
the read-only questions a renderer needs: which sections to link, what text
and hover text to show, which links need authorization and which CSS class
marks them. Rendering itself lives in ``navlinks.templatetags``.
"""

import logging
import re
from dataclasses import dataclass, field

from django.utils.functional import Promise

from .conf import navigator_defaults
from .exceptions import InvalidArrayCount, InvalidSections, InvalidType

logger = logging.getLogger(__name__)

DEFAULT_AUTHORIZATION_METHOD = "is_authenticated"
DEFAULT_AUTHORIZED_CSS = "authorized_nav_link"

OPTION_KEYS = ("hover_text", "link_text", "authorize", "with", "authorized_css")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][\w-]*$")
_WORD_SEPARATOR_RE = re.compile(r"[_\s]+")


class SectionId(str):
    """
    Opaque identifier for one navigable section.

    Compares, hashes and renders like its string value, so subtitle lookups
    by plain string keep working, but it is a distinct type: a ``SectionId``
    is never mistaken for display text.
    """

    __slots__ = ()

    def __repr__(self):
        return f"SectionId({str.__repr__(self)})"

    @classmethod
    def coerce(cls, value):
        """Return *value* as a ``SectionId``, accepting plain identifier strings."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and _IDENTIFIER_RE.match(value):
            return cls(value)
        raise InvalidType(f"{value!r} is not a valid section identifier.")


# Passing ``authorize=[ALL]`` requires authorization for every section.
ALL = SectionId("all")


def is_section(value):
    return isinstance(value, SectionId)


def is_subtitle(value):
    """True for display text: plain strings and lazy translations."""
    return isinstance(value, (str, Promise)) and not isinstance(value, SectionId)


def humanize_section(section):
    """Turn ``contact_me`` into ``"Contact Me"``."""
    text = str(section).lstrip("_")
    if text.endswith("_id"):
        text = text[: -len("_id")]
    words = _WORD_SEPARATOR_RE.split(text)
    return " ".join(word.capitalize() for word in words if word)


def _flatten(values):
    for value in values:
        if isinstance(value, (list, tuple)):
            yield from _flatten(value)
        else:
            yield value


def _as_section(value):
    """Promote identifier-like strings; anything else is kept as given."""
    if is_subtitle(value) and _IDENTIFIER_RE.match(str(value)):
        return SectionId(value)
    return value


def _coerce_authorize(value):
    if not value:
        return ()
    if isinstance(value, SectionId):
        return (value,)
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",") if part.strip()]
    elif not isinstance(value, (list, tuple)):
        value = [value]
    return tuple(_as_section(item) for item in _flatten(value))


@dataclass(frozen=True)
class NavigatorOptions:
    """Display and authorization options for one navigation list."""

    hover_text: bool = False
    link_text: bool = False
    authorize: tuple = field(default_factory=tuple)
    authorize_given: bool = False
    with_method: str = None
    authorized_css: str = None
    default_authorization_method: str = DEFAULT_AUTHORIZATION_METHOD
    default_authorized_css: str = DEFAULT_AUTHORIZED_CSS

    @classmethod
    def from_mapping(cls, options=None, **defaults):
        """
        Build options from a plain mapping such as template tag keywords.

        Recognised keys are ``hover_text``, ``link_text``, ``authorize``,
        ``with`` and ``authorized_css``; anything else is logged and ignored.
        *defaults* override ``default_authorization_method`` and
        ``default_authorized_css``.
        """
        options = dict(options or {})
        unknown = sorted(set(options) - set(OPTION_KEYS))
        if unknown:
            logger.warning(
                "Ignoring unrecognised navigation option(s): %s", ", ".join(unknown)
            )

        with_method = options.get("with")
        return cls(
            hover_text=bool(options.get("hover_text", False)),
            link_text=bool(options.get("link_text", False)),
            authorize=_coerce_authorize(options.get("authorize")),
            authorize_given="authorize" in options,
            with_method=str(with_method) if with_method is not None else None,
            authorized_css=options.get("authorized_css"),
            **defaults,
        )


@dataclass(frozen=True)
class NavItem:
    """One renderable link derived from a validated section list."""

    section: SectionId
    text: str
    subtitle: str = ""  # inline subtitle, empty unless subtitles render inline
    title: str = ""  # hover text
    css_class: str = ""
    requires_authorization: bool = False

    def as_dict(self):
        return {
            "section": self.section,
            "text": self.text,
            "subtitle": self.subtitle,
            "title": self.title,
            "css_class": self.css_class,
            "requires_authorization": self.requires_authorization,
        }


class Navigator:
    """
    Validated view over one navigation section list.

    Construction fails fast with ``InvalidSections``, ``InvalidArrayCount``
    or ``InvalidType``; every query on a constructed instance is total.

    Subtitles are written into *subtitles*, a mapping owned by the caller
    (for example ``request.nav_subtitles``). When omitted, the navigator
    keeps its own dict. Existing entries for the same section are
    overwritten.

    Options given as a mapping pick up their defaults from the
    ``NAVLINKS_*`` settings.
    """

    def __init__(self, sections, options=None, *, subtitles=None):
        self._validate_sections(sections)

        if not isinstance(options, NavigatorOptions):
            options = NavigatorOptions.from_mapping(options, **navigator_defaults())
        self.options = options
        self._sections = list(sections)

        self.subtitles = {} if subtitles is None else subtitles
        if self.has_subtitles():
            self._fill_subtitles()

        self._methods_to_authorize = self._resolve_methods_to_authorize()
        self._authorized_css = self._resolve_authorized_css()

    def __repr__(self):
        return f"<Navigator sections={self.sections()!r}>"

    # ------------------------------------------------------------------
    # Sections and subtitles
    # ------------------------------------------------------------------

    def has_subtitles(self):
        """Subtitles are assumed absent only when every entry is a section."""
        return not all(is_section(entry) for entry in self._sections)

    def sections(self):
        """Return the section identifiers, with any subtitles removed."""
        if not self.has_subtitles():
            return list(self._sections)
        return [
            entry
            for index, entry in enumerate(self._sections)
            if index % 2 == 0 and is_section(entry)
        ]

    def subtitle_for(self, section):
        return self.subtitles.get(section, "")

    # ------------------------------------------------------------------
    # Display modes
    # ------------------------------------------------------------------

    def wants_subtitles(self):
        """Subtitles render inline unless hover or link text is requested."""
        return (
            self.has_subtitles()
            and not self.wants_hover_text()
            and not self.wants_link_text()
        )

    def wants_hover_text(self):
        return self.has_subtitles() and self.options.hover_text

    def wants_link_text(self):
        return self.has_subtitles() and self.options.link_text

    def text_for(self, section):
        return humanize_section(section)

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def authorization_method(self):
        """
        Name of the predicate that decides whether a protected link shows.

        ``with`` only takes effect alongside ``authorize``; on its own the
        default name is returned.
        """
        if self.options.authorize_given and self.options.with_method is not None:
            return self.options.with_method
        return self.options.default_authorization_method

    def methods_to_authorize(self):
        """Sections needing authorization (every section for ``[ALL]``)."""
        return list(self._methods_to_authorize)

    def requires_authorization(self, section):
        return section in self._methods_to_authorize

    def authorized_css(self):
        """CSS class for authorized links, or ``""`` when none need it."""
        return self._authorized_css

    def links(self):
        """Return one ``NavItem`` per section, in order."""
        inline = self.wants_subtitles()
        hover = self.wants_hover_text()
        link_text = self.wants_link_text()

        items = []
        for section in self.sections():
            subtitle = str(self.subtitle_for(section)) if self.has_subtitles() else ""
            protected = self.requires_authorization(section)
            items.append(
                NavItem(
                    section=section,
                    text=subtitle if link_text else self.text_for(section),
                    subtitle=subtitle if inline else "",
                    title=subtitle if hover else "",
                    css_class=self._authorized_css if protected else "",
                    requires_authorization=protected,
                )
            )
        return items

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _validate_sections(self, sections):
        if not isinstance(sections, (list, tuple)):
            raise _rejected(InvalidSections, sections)

        has_subtitles = not all(is_section(entry) for entry in sections)
        if has_subtitles and len(sections) % 2 != 0:
            raise _rejected(InvalidArrayCount, sections)

        if not _valid_types(sections, has_subtitles):
            raise _rejected(InvalidType, sections)

    def _fill_subtitles(self):
        pairs = zip(self._sections[0::2], self._sections[1::2])
        for section, subtitle in pairs:
            self.subtitles[section] = subtitle

    def _resolve_methods_to_authorize(self):
        methods = list(self.options.authorize)
        if methods == [ALL]:
            return self.sections()
        return methods

    def _resolve_authorized_css(self):
        if not self._methods_to_authorize:
            return ""
        if self.options.authorized_css is not None:
            return self.options.authorized_css
        return self.options.default_authorized_css


def _valid_types(sections, has_subtitles):
    first_is_text = bool(sections) and is_subtitle(sections[0])
    if first_is_text or all(is_subtitle(entry) for entry in sections):
        return False
    if has_subtitles:
        for index, entry in enumerate(sections):
            expected = is_section if index % 2 == 0 else is_subtitle
            if not expected(entry):
                return False
    return True


def _rejected(error_class, sections):
    logger.debug("Rejected navigation sections %r: %s", sections, error_class.message)
    return error_class()


__all__ = [
    "ALL",
    "DEFAULT_AUTHORIZATION_METHOD",
    "DEFAULT_AUTHORIZED_CSS",
    "NavItem",
    "Navigator",
    "NavigatorOptions",
    "SectionId",
    "humanize_section",
]
