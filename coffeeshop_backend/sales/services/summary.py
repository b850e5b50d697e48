# sales/services/summary.py

"""
SALES SUMMARY (READ-ONLY)

Dashboard numbers over the orders placed in the current day / month / year
(server time zone), or over all orders.

Notes:
- Revenue figures sum totalAmount over every order in the window; the
  cancelled count is reported separately so callers can net it out.
- pending + preparing are grouped as "processing" in the status distribution.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.utils import timezone

from backend.encoding import json_number
from products.choices import CustomerClass
from sales.choices import OrderStatus, PaymentStatus
from sales.models import Order

PERIODS = ("day", "month", "year", "all")


class SummaryPeriodError(ValueError):
    pass


def _period_start(period: str, now: datetime):
    local = timezone.localtime(now)
    if period == "day":
        start = local.date()
    elif period == "month":
        start = local.date().replace(day=1)
    elif period == "year":
        start = local.date().replace(month=1, day=1)
    else:
        return None
    return timezone.make_aware(datetime.combine(start, time.min), local.tzinfo)


def _money(x) -> int | float:
    return json_number(x if x is not None else Decimal("0"))


def summarize_orders(*, period: str = "day", now: datetime | None = None) -> dict:
    if period not in PERIODS:
        raise SummaryPeriodError(
            f"Unknown period '{period}' (expected one of: {', '.join(PERIODS)})"
        )

    now = now or timezone.now()
    qs = Order.objects.all()

    start = _period_start(period, now)
    if start is not None:
        qs = qs.filter(timestamp__gte=int(start.timestamp() * 1000))

    paid = Q(payment_status=PaymentStatus.PAID)
    pending = Q(payment_status=PaymentStatus.PENDING)

    agg = qs.aggregate(
        total_revenue=Sum("total_amount"),
        paid_revenue=Sum("total_amount", filter=paid),
        pending_revenue=Sum("total_amount", filter=pending),
        total_count=Count("id"),
        paid_count=Count("id", filter=paid),
        pending_count=Count("id", filter=pending),
        cancelled_count=Count("id", filter=Q(status=OrderStatus.CANCELLED)),
    )

    by_class = {
        row["user_type"]: row["revenue"]
        for row in qs.order_by().values("user_type").annotate(revenue=Sum("total_amount"))
    }

    status_counts = {
        row["status"]: row["n"]
        for row in qs.order_by().values("status").annotate(n=Count("id"))
    }

    return {
        "period": period,
        "totalRevenue": _money(agg["total_revenue"]),
        "paidRevenue": _money(agg["paid_revenue"]),
        "pendingRevenue": _money(agg["pending_revenue"]),
        "totalCount": agg["total_count"],
        "paidCount": agg["paid_count"],
        "pendingCount": agg["pending_count"],
        "cancelledCount": agg["cancelled_count"],
        "revenueByUserType": {
            c.value: _money(by_class.get(c.value)) for c in CustomerClass
        },
        "statusDistribution": {
            "completed": status_counts.get(OrderStatus.COMPLETED, 0),
            "processing": status_counts.get(OrderStatus.PENDING, 0)
            + status_counts.get(OrderStatus.PREPARING, 0),
            "delivering": status_counts.get(OrderStatus.DELIVERING, 0),
            "cancelled": status_counts.get(OrderStatus.CANCELLED, 0),
        },
    }
