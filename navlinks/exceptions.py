"""
Validation errors raised while building a ``Navigator``.

Every error is raised at construction time; once a ``Navigator`` exists its
queries never fail.
"""


class NavigationError(ValueError):
    """Base class for navigation section validation failures."""

    message = "Invalid navigation sections."

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidSections(NavigationError):
    message = "Navigation sections must be passed as a list or tuple."


class InvalidArrayCount(NavigationError):
    message = (
        "Navigation sections with subtitles must pair every section with "
        "exactly one subtitle."
    )


class InvalidType(NavigationError):
    message = (
        "Navigation sections must be section identifiers, not display "
        "strings (subtitles follow the section they describe)."
    )
