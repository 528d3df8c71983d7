class NavigationSubtitlesMiddleware:
    """
    Gives every request its own subtitle map at ``request.nav_subtitles``.

    The ``{% navigation %}`` tag writes section subtitles into this map, so
    the rest of the page can look them up without sharing state across
    requests or threads.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.nav_subtitles = {}
        return self.get_response(request)
