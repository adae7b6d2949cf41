"""URL configuration for the linkfinder app.

This module defines the URL patterns for the app's views. It also
specifies the ``app_name`` to allow namespacing from the project URL
configuration.
"""

from django.urls import path

from . import views

app_name = 'linkfinder'

urlpatterns = [
    path('', views.analyze, name='analyze'),
    path('keywords/toggle/', views.toggle_keyword, name='toggle_keyword'),
    path('reset/', views.reset, name='reset'),
]
