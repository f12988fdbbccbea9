"""Order helpers shared by the order commands."""

import re

ORDER_STATUSES = (
    "pending",
    "processing",
    "completed",
    "on-hold",
    "cancelled",
    "refunded",
    "failed",
)

CUSTOM_ORDER_NUMBER_KEY = "_alg_wc_custom_order_number"

_STATUS_ALIASES = {
    "pendingpayment": "pending",
    "pending_payment": "pending",
}


def normalize_status(status: object) -> str:
    """Return the WooCommerce status slug for a free-form status value."""
    raw = re.sub(r"\s+", "_", str(status or "").strip().lower())
    return _STATUS_ALIASES.get(raw, raw)


def status_label(status: object) -> str:
    """Return a human-readable status label."""
    value = normalize_status(status)
    if value == "pending":
        return "Pending payment"
    return value.replace("_", " ").title()


def is_numeric_id(value: str) -> bool:
    return value.isdigit() and int(value) > 0


def meta_value(order: dict[str, object], key: str) -> object | None:
    """Return the value of a ``meta_data`` entry, if present."""
    meta = order.get("meta_data")
    if not isinstance(meta, list):
        return None
    for item in meta:
        if isinstance(item, dict) and item.get("key") == key:
            return item.get("value")
    return None


def customer_name(order: dict[str, object]) -> str:
    billing = order.get("billing") or {}
    if not isinstance(billing, dict):
        return ""
    first = str(billing.get("first_name") or "")
    last = str(billing.get("last_name") or "")
    return f"{first} {last}".strip()


def billing_email(order: dict[str, object]) -> str:
    billing = order.get("billing") or {}
    if not isinstance(billing, dict):
        return ""
    return str(billing.get("email") or "")


def stripe_meta_lines(order: dict[str, object], limit: int = 8) -> list[str]:
    """Return up to ``limit`` Stripe-related meta entries as bullet lines."""
    meta = order.get("meta_data")
    if not isinstance(meta, list):
        return []
    lines: list[str] = []
    for item in meta:
        if not isinstance(item, dict):
            continue
        key = item.get("key")
        if isinstance(key, str) and "stripe" in key.lower():
            value = item.get("value")
            lines.append(f"• {key}: {'' if value is None else value}")
        if len(lines) >= limit:
            break
    return lines
