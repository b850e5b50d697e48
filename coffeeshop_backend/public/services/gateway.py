# public/services/gateway.py

"""
BACKEND GATEWAY (single dispatch boundary)

Request kinds are a closed enum. Reads come in over GET, writes over POST;
each kind has exactly one handler and the table is checked at import.

Nothing escapes dispatch(): domain errors are translated to GatewayError
subclasses and every GatewayError becomes the uniform error envelope.

Wire shape (POST body):
    {"action": "...", "data": {...}, "id": "...", "status": "...", "slipImage": ...}
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable

from django.core.exceptions import ImproperlyConfigured
from rest_framework.exceptions import ValidationError as DRFValidationError

from products.services.catalog import CatalogError
from products.services.pricing import PricingError
from public.services.exceptions import (
    ConflictError,
    GatewayError,
    NotFoundError,
    PayloadValidationError,
    UnknownActionError,
)
from public.services.shop_store import ShopStore
from sales.services.order_lifecycle import (
    InvalidPaymentAmendmentError,
    InvalidStatusTransitionError,
    OrderLifecycleError,
)
from sales.services.order_service import (
    DuplicateOrderError,
    OrderNotFoundError,
)
from sales.services.summary import SummaryPeriodError

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    GET_PRODUCTS = "getProducts"
    GET_ORDERS = "getOrders"
    GET_CATEGORIES = "getCategories"
    GET_SALES_SUMMARY = "getSalesSummary"

    SAVE_PRODUCT = "saveProduct"
    DELETE_PRODUCT = "deleteProduct"
    SAVE_CATEGORY = "saveCategory"
    DELETE_CATEGORY = "deleteCategory"
    CREATE_ORDER = "createOrder"
    UPDATE_ORDER_STATUS = "updateOrderStatus"
    UPDATE_ORDER_PAYMENT = "updateOrderPayment"
    UPDATE_PAYMENT_STATUS = "updatePaymentStatus"


READ_ACTIONS = frozenset(
    {
        Action.GET_PRODUCTS,
        Action.GET_ORDERS,
        Action.GET_CATEGORIES,
        Action.GET_SALES_SUMMARY,
    }
)
WRITE_ACTIONS = frozenset(set(Action) - READ_ACTIONS)


# ============================================================
# PAYLOAD HELPERS
# ============================================================


def _object(payload: dict, key: str) -> dict:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise PayloadValidationError(f"'{key}' must be an object")
    return value


def _text(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None or isinstance(value, (dict, list, bool)):
        raise PayloadValidationError(f"'{key}' is required")
    value = str(value).strip()
    if not value:
        raise PayloadValidationError(f"'{key}' is required")
    return value


def _success(**fields) -> dict:
    return {"status": "success", **fields}


# ============================================================
# HANDLERS
# ============================================================

Handler = Callable[[ShopStore, dict], Any]


def _get_products(store: ShopStore, payload: dict):
    return store.products()


def _get_orders(store: ShopStore, payload: dict):
    return store.orders()


def _get_categories(store: ShopStore, payload: dict):
    return store.categories()


def _get_sales_summary(store: ShopStore, payload: dict):
    return store.sales_summary(str(payload.get("period") or "day"))


def _save_product(store: ShopStore, payload: dict):
    return _success(product=store.save_product(_object(payload, "data")))


def _delete_product(store: ShopStore, payload: dict):
    product_id = _text(payload, "id")
    store.delete_product(product_id)
    return _success(id=product_id)


def _save_category(store: ShopStore, payload: dict):
    return _success(category=store.save_category(_object(payload, "data")))


def _delete_category(store: ShopStore, payload: dict):
    category_id = _text(payload, "id")
    store.delete_category(category_id)
    return _success(id=category_id)


def _create_order(store: ShopStore, payload: dict):
    return _success(
        **store.create_order(_object(payload, "data"), payload.get("slipImage"))
    )


def _update_order_status(store: ShopStore, payload: dict):
    return _success(
        **store.update_order_status(_text(payload, "id"), _text(payload, "status"))
    )


def _update_payment_status(store: ShopStore, payload: dict):
    return _success(
        **store.update_payment_status(_text(payload, "id"), _text(payload, "status"))
    )


def _update_order_payment(store: ShopStore, payload: dict):
    return _success(
        **store.update_order_payment(_text(payload, "id"), payload.get("slipImage"))
    )


HANDLERS: dict[Action, Handler] = {
    Action.GET_PRODUCTS: _get_products,
    Action.GET_ORDERS: _get_orders,
    Action.GET_CATEGORIES: _get_categories,
    Action.GET_SALES_SUMMARY: _get_sales_summary,
    Action.SAVE_PRODUCT: _save_product,
    Action.DELETE_PRODUCT: _delete_product,
    Action.SAVE_CATEGORY: _save_category,
    Action.DELETE_CATEGORY: _delete_category,
    Action.CREATE_ORDER: _create_order,
    Action.UPDATE_ORDER_STATUS: _update_order_status,
    Action.UPDATE_PAYMENT_STATUS: _update_payment_status,
    Action.UPDATE_ORDER_PAYMENT: _update_order_payment,
}


_unhandled = set(Action) - set(HANDLERS)
if _unhandled:
    raise ImproperlyConfigured(
        f"Gateway actions without a handler: {sorted(a.value for a in _unhandled)}"
    )


# ============================================================
# ERROR TRANSLATION
# ============================================================


def _translate(exc: Exception) -> GatewayError:
    if isinstance(exc, (OrderNotFoundError, CatalogError)):
        return NotFoundError(str(exc))
    if isinstance(
        exc,
        (InvalidStatusTransitionError, InvalidPaymentAmendmentError, DuplicateOrderError),
    ):
        return ConflictError(str(exc))
    if isinstance(exc, DRFValidationError):
        return PayloadValidationError("Payload failed validation", details=exc.detail)
    # unknown order or payment status, bad summary period, unpriced variant
    return PayloadValidationError(str(exc))


DOMAIN_ERRORS = (
    CatalogError,
    OrderLifecycleError,
    OrderNotFoundError,
    DuplicateOrderError,
    DRFValidationError,
    SummaryPeriodError,
    PricingError,
)


def error_envelope(err: GatewayError) -> dict:
    body = {
        "status": "error",
        "code": err.code,
        "message": err.message,
        "retryable": err.retryable,
    }
    if err.details is not None:
        body["errorDetails"] = err.details
    return body


def parse_action(raw, *, method: str) -> Action:
    try:
        action = Action(raw)
    except ValueError:
        raise UnknownActionError(f"Invalid {method} action specified: {raw}")

    allowed = READ_ACTIONS if method == "GET" else WRITE_ACTIONS
    if action not in allowed:
        raise UnknownActionError(f"Invalid {method} action specified: {raw}")
    return action


def dispatch(store: ShopStore, raw_action, payload: dict, *, method: str) -> tuple[int, Any]:
    """
    Returns (http_status, body). Never raises.
    """
    try:
        action = parse_action(raw_action, method=method)
        logger.info("Gateway action received", extra={"action": action.value})

        try:
            return 200, HANDLERS[action](store, payload)
        except DOMAIN_ERRORS as exc:
            raise _translate(exc) from exc

    except GatewayError as err:
        if isinstance(err, NotFoundError):
            logger.warning(
                "Gateway target not found",
                extra={"action": raw_action, "error": err.message},
            )
        return err.http_status, error_envelope(err)

    except Exception:
        logger.exception("Gateway action failed", extra={"action": raw_action})
        return 500, {
            "status": "error",
            "code": "internal_error",
            "message": "Internal server error",
            "retryable": False,
        }
