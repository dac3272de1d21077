"""
URL configuration for the folio project.

The content pipeline is an internal service layer; the only routed
surface is the admin site.
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import path

admin.site.site_header = "Administration"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Content Management"

urlpatterns = [
    path("admin/", admin.site.urls),
]
