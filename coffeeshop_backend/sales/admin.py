# sales/admin.py

"""
Staff console for orders.

Status, payment status, payment method and slip are read-only on the form.
They change only through the list actions, which call the shop store, so the
lifecycle rules and the mutation lock apply exactly as on the gateway.
Orders are never added or deleted here.
"""

from django.contrib import admin, messages

from public.admin import StoreWriteAdmin
from public.services.shop_store import get_shop_store
from sales.choices import OrderStatus, PaymentStatus
from sales.models import Order
from sales.services.order_lifecycle import OrderLifecycleError
from sales.services.order_service import OrderServiceError


# ======================================================
# ORDER ADMIN
# ======================================================


@admin.register(Order)
class OrderAdmin(StoreWriteAdmin):
    list_display = (
        "id",
        "customer_name",
        "user_type",
        "total_amount",
        "payment_method",
        "payment_status",
        "status",
        "created_at",
    )
    readonly_fields = (
        "id",
        "items",
        "total_amount",
        "status",
        "payment_status",
        "payment_method",
        "slip_url",
        "timestamp",
        "created_at",
    )
    search_fields = ("id", "customer_name", "delivery_location")
    list_filter = ("status", "payment_status", "payment_method", "user_type")
    actions = [
        "mark_preparing",
        "mark_delivering",
        "mark_completed",
        "mark_cancelled",
        "mark_paid",
        "mark_payment_pending",
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def _apply(self, request, queryset, update, status):
        changed = 0
        for order in queryset:
            try:
                result = update(order.pk, status)
            except (OrderLifecycleError, OrderServiceError) as exc:
                self.message_user(request, f"{order.pk}: {exc}", level=messages.WARNING)
                continue
            changed += int(result["changed"])
        self.message_user(request, f"{changed} order(s) updated.")

    def _set_status(self, request, queryset, status):
        self._apply(request, queryset, get_shop_store().update_order_status, status)

    def _set_payment(self, request, queryset, status):
        self._apply(request, queryset, get_shop_store().update_payment_status, status)

    @admin.action(description="Mark as preparing")
    def mark_preparing(self, request, queryset):
        self._set_status(request, queryset, OrderStatus.PREPARING)

    @admin.action(description="Mark as delivering")
    def mark_delivering(self, request, queryset):
        self._set_status(request, queryset, OrderStatus.DELIVERING)

    @admin.action(description="Mark as completed")
    def mark_completed(self, request, queryset):
        self._set_status(request, queryset, OrderStatus.COMPLETED)

    @admin.action(description="Cancel")
    def mark_cancelled(self, request, queryset):
        self._set_status(request, queryset, OrderStatus.CANCELLED)

    @admin.action(description="Mark payment as paid")
    def mark_paid(self, request, queryset):
        self._set_payment(request, queryset, PaymentStatus.PAID)

    @admin.action(description="Mark payment as pending")
    def mark_payment_pending(self, request, queryset):
        self._set_payment(request, queryset, PaymentStatus.PENDING)
