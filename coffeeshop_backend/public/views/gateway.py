# public/views/gateway.py
"""
BACKEND GATEWAY ENDPOINT

GET  /api/public/gateway/?action=getProducts|getOrders|getCategories|getSalesSummary[&period=]
POST /api/public/gateway/   {"action": "...", ...}

Rules:
- AllowAny (single-shop storefront, no auth model)
- POST body is parsed here, whatever the content type (browser clients send
  text/plain to skip the CORS preflight)
- Every response is JSON: a listing, a success envelope or an error envelope

Security hardening:
- Throttled per scope (public_catalog for reads, public_write for writes)
"""

from __future__ import annotations

import json

from django.conf import settings
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    OpenApiTypes,
    extend_schema,
)
from rest_framework.exceptions import Throttled
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from public.services.exceptions import MalformedRequestError
from public.services.gateway import dispatch, error_envelope
from public.services.shop_store import get_shop_store


class PublicWriteThrottle(AnonRateThrottle):
    scope = "public_write"


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


def _throttling_enabled() -> bool:
    gw = getattr(settings, "GATEWAY", {}) or {}
    return bool(gw.get("THROTTLING_ENABLED", True))


class GatewayView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_throttles(self):
        if not _throttling_enabled():
            return []
        if self.request.method == "GET":
            return [PublicCatalogThrottle()]
        return [PublicWriteThrottle()]

    def handle_exception(self, exc):
        if isinstance(exc, Throttled):
            return Response(
                {
                    "status": "error",
                    "code": "throttled",
                    "message": "Too many requests, please retry later",
                    "retryable": True,
                },
                status=429,
            )
        return super().handle_exception(exc)

    @extend_schema(
        tags=["Gateway"],
        parameters=[
            OpenApiParameter(name="action", type=str, required=True),
            OpenApiParameter(name="period", type=str, required=False),
        ],
        responses={
            200: OpenApiResponse(description="Listing (JSON array) or summary object"),
            400: OpenApiResponse(description="Unknown action / invalid payload"),
        },
        description="Read actions. Products and categories are served from a short-lived cache.",
    )
    def get(self, request):
        payload = {"period": request.query_params.get("period")}
        status_code, body = dispatch(
            get_shop_store(),
            request.query_params.get("action"),
            payload,
            method="GET",
        )
        return Response(body, status=status_code)

    @extend_schema(
        tags=["Gateway"],
        request=OpenApiTypes.OBJECT,
        responses={
            200: OpenApiResponse(description="Success envelope"),
            400: OpenApiResponse(description="Malformed body / unknown action / validation"),
            404: OpenApiResponse(description="No record with that id"),
            409: OpenApiResponse(description="Invalid transition / duplicate id"),
            503: OpenApiResponse(description="Server busy, retry"),
        },
        description="Write actions. All writes are serialized through one lock.",
    )
    def post(self, request):
        try:
            payload = json.loads(request.body.decode("utf-8") or "")
        except (UnicodeDecodeError, ValueError) as exc:
            err = MalformedRequestError(
                "Invalid JSON payload in request body.", details=str(exc)
            )
            return Response(error_envelope(err), status=err.http_status)

        if not isinstance(payload, dict):
            err = MalformedRequestError("Request body must be a JSON object.")
            return Response(error_envelope(err), status=err.http_status)

        status_code, body = dispatch(
            get_shop_store(), payload.get("action"), payload, method="POST"
        )
        return Response(body, status=status_code)
