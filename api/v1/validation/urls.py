"""
URL configuration for the public validation endpoint.
"""

from django.urls import path

from api.v1.validation import views

urlpatterns = [
    path("validate", views.ValidateLicenseView.as_view(), name="validate-license"),
]
