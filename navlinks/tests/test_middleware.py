"""
Tests for request-level navigation wiring.

Covers:
- NavigationSubtitlesMiddleware: attaches a fresh subtitle map per request
- navigation context processor: exposes the map to templates
- Settings: the development SECRET_KEY is only used with DEBUG on
- Demo pages: subtitles, authorization and HTMX partial rendering end to end
"""

import importlib
import os
from unittest.mock import Mock, patch

from django.contrib.auth.models import User as DjangoUser
from django.test import Client, RequestFactory, SimpleTestCase, TestCase, override_settings
from django.urls import reverse

import core.settings
from navlinks.context_processors import navigation
from navlinks.middleware import NavigationSubtitlesMiddleware

# Use simple static file storage during tests to avoid manifest errors
SIMPLE_STORAGES = {
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}


# ======================================================================
# NavigationSubtitlesMiddleware / context processor
# ======================================================================


class NavigationSubtitlesMiddlewareTests(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_each_request_gets_its_own_map(self):
        seen = []

        def get_response(request):
            seen.append(request.nav_subtitles)
            request.nav_subtitles["home"] = "Start here"
            return Mock(status_code=200)

        middleware = NavigationSubtitlesMiddleware(get_response)
        middleware(self.factory.get("/"))
        middleware(self.factory.get("/"))

        self.assertEqual(len(seen), 2)
        self.assertIsNot(seen[0], seen[1])
        self.assertEqual(seen[1], {"home": "Start here"})

    def test_response_is_passed_through(self):
        response = Mock(status_code=204)
        middleware = NavigationSubtitlesMiddleware(lambda request: response)
        self.assertIs(middleware(self.factory.get("/")), response)

    def test_context_processor_exposes_request_map(self):
        request = self.factory.get("/")
        request.nav_subtitles = {"home": "Start here"}
        context = navigation(request)
        self.assertIs(context["navigation_subtitles"], request.nav_subtitles)

    def test_context_processor_without_middleware(self):
        self.assertEqual(navigation(self.factory.get("/")), {"navigation_subtitles": {}})


# ======================================================================
# Settings
# ======================================================================


class SecretKeySettingsTests(SimpleTestCase):
    """The insecure development key must never leak outside DEBUG."""

    def _reload(self, **env):
        with patch.dict(os.environ, env, clear=True), patch("dotenv.load_dotenv"):
            return importlib.reload(core.settings)

    def tearDown(self):
        importlib.reload(core.settings)

    def test_no_fallback_key_without_debug(self):
        self.assertEqual(self._reload(DEBUG="false").SECRET_KEY, "")

    def test_fallback_key_with_debug(self):
        self.assertTrue(self._reload(DEBUG="true").SECRET_KEY.startswith("insecure-"))

    def test_environment_key_wins(self):
        self.assertEqual(self._reload(SECRET_KEY="from-env").SECRET_KEY, "from-env")


# ======================================================================
# Demo pages
# ======================================================================


@override_settings(STORAGES=SIMPLE_STORAGES, SECRET_KEY="navlinks-test-key")
class NavigationPageTests(TestCase):
    """Render the demo pages through the full middleware stack."""

    def setUp(self):
        self.client = Client()
        self.user = DjangoUser.objects.create_user(username="tester", password="pass")

    def test_page_renders_navigation_with_hover_text(self):
        resp = self.client.get(reverse("about"))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, '<a href="/about/" title="Who we are">About</a>')
        self.assertContains(resp, '<a href="/contact-me/" title="Say hello">Contact Me</a>')

    def test_current_section_is_active(self):
        resp = self.client.get(reverse("contact_me"))
        self.assertContains(resp, '<li class="active">\n    <a href="/contact-me/"')

    def test_page_shows_subtitle_from_request_map(self):
        resp = self.client.get(reverse("about"))
        self.assertContains(resp, '<p class="lead">Who we are</p>')
        self.assertEqual(resp.wsgi_request.nav_subtitles["about"], "Who we are")

    def test_protected_link_hidden_when_logged_out(self):
        resp = self.client.get(reverse("home"))
        self.assertNotContains(resp, 'href="/reports/"')

    def test_protected_link_shown_when_logged_in(self):
        self.client.force_login(self.user)
        resp = self.client.get(reverse("home"))
        self.assertContains(
            resp, '<a href="/reports/" title="Monthly numbers" class="authorized_nav_link">Reports</a>'
        )

    def test_htmx_request_gets_partial(self):
        resp = self.client.get(reverse("about"), HTTP_HX_REQUEST="true")
        self.assertEqual(resp.status_code, 200)
        self.assertNotContains(resp, "<!DOCTYPE html>")
        self.assertContains(resp, '<nav hx-swap-oob="true">')

    def test_full_request_gets_base(self):
        resp = self.client.get(reverse("about"))
        self.assertContains(resp, "<!DOCTYPE html>")
        self.assertContains(resp, "<title>About</title>")
