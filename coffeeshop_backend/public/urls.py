# public/urls.py
"""
PUBLIC API URLS

Base path (mounted in backend/urls.py):
    /api/public/

- GET  /api/public/gateway/?action=...   read actions
- POST /api/public/gateway/              write actions
"""

from __future__ import annotations

from django.urls import path

from public.views.gateway import GatewayView

app_name = "public"

urlpatterns = [
    path("gateway/", GatewayView.as_view(), name="gateway"),
]
