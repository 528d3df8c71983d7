from django.urls import path

from . import views

urlpatterns = [
    path("", views.page, {"section": "home"}, name="home"),
    path("about/", views.page, {"section": "about"}, name="about"),
    path("contact-me/", views.page, {"section": "contact_me"}, name="contact_me"),
    path("reports/", views.page, {"section": "reports"}, name="reports"),
]
