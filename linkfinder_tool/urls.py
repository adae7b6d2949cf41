"""Root URL configuration for linkfinder_tool."""

from django.urls import include, path

urlpatterns = [
    path('', include('linkfinder.urls')),
]
