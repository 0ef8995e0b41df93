"""
URL configuration for RoomHub.

Only the Django admin is routed here; the booking engine is a library called
by an external HTTP layer.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
]
