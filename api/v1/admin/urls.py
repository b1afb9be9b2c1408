"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("licenses", views.LicenseCollectionView.as_view(), name="licenses"),
    path("licenses/<str:key>", views.LicenseDetailView.as_view(), name="license-detail"),
    path("licenses/<str:key>/renew", views.RenewLicenseView.as_view(), name="renew-license"),
    path(
        "licenses/<str:key>/identities",
        views.PatchIdentitiesView.as_view(),
        name="license-identities",
    ),
    path("licenses/<str:key>/sub-users", views.SubUsersView.as_view(), name="license-sub-users"),
    path(
        "licenses/<str:key>/blacklist",
        views.BlacklistLicenseIdentifiersView.as_view(),
        name="blacklist-license-identifiers",
    ),
    path("blacklist", views.BlacklistView.as_view(), name="blacklist"),
    path(
        "blacklist/users/<str:discord_id>",
        views.BlacklistUserView.as_view(),
        name="blacklist-user",
    ),
    path("stats", views.DashboardStatsView.as_view(), name="stats"),
    path("users/<str:discord_id>/ip-usage", views.IpUsageView.as_view(), name="user-ip-usage"),
    path("bot/log-usage", views.LogCommandUsageView.as_view(), name="log-bot-usage"),
]
