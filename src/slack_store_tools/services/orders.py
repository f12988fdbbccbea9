"""Order lookup commands and the order status workflow."""

import logging
from dataclasses import dataclass

import httpx

from slack_store_tools.adapters.woo_client import WooClient
from slack_store_tools.domain.errors import ValidationFailure
from slack_store_tools.domain.interactions import (
    ActionReference,
    ActionRequest,
    CommandRequest,
)
from slack_store_tools.domain.orders import (
    CUSTOM_ORDER_NUMBER_KEY,
    ORDER_STATUSES,
    billing_email,
    customer_name,
    is_numeric_id,
    meta_value,
    normalize_status,
    status_label,
    stripe_meta_lines,
)
from slack_store_tools.services import blocks
from slack_store_tools.services.guards import require_reference
from slack_store_tools.services.notifications import Notifier

_logger = logging.getLogger(__name__)

EDIT_ORDER_STATUS_ACTION = "edit_order_status"
SEARCH_PAGES = 3
SEARCH_PAGE_SIZE = 100
MAX_STATUS_BUTTONS = 5


@dataclass
class OrderLookupService:
    """Read-only order commands."""

    woo_client: WooClient
    notifier: Notifier
    admin_edit_url: str

    async def find_by_custom_number(self, command: CommandRequest) -> None:
        """Search recent orders for a custom order number."""
        number = command.argument
        try:
            order = await self._search_custom_number(number)
        except httpx.HTTPError:
            _logger.exception("Order search failed", extra={"number": number})
            await self.notifier.send(
                command.channel_id, "❌ Failed to retrieve order due to an error."
            )
            return
        if order is None:
            await self.notifier.send(
                command.channel_id,
                f"❌ No order found with custom number: {number}",
            )
            return
        await self.notifier.send(
            command.channel_id,
            f"📦 Order found for *{number}*",
            blocks=[blocks.section(_order_summary(order))],
        )

    async def find_by_id(self, command: CommandRequest) -> None:
        """Show an order by WooCommerce id."""
        order_id = command.argument
        if not is_numeric_id(order_id):
            raise ValidationFailure("❌ Please enter a valid numeric Order ID.")
        order = await self._fetch_order(
            command,
            order_id,
            not_found=f"❌ No order found with WooCommerce ID: {order_id}",
            failure=f"❌ Failed to retrieve WooCommerce order {order_id}.",
        )
        if order is None:
            return
        await self.notifier.send(
            command.channel_id,
            f"📦 Order found with WooCommerce ID *{order_id}*",
            blocks=[blocks.section(_order_summary(order))],
        )

    async def find_custom_number(self, command: CommandRequest) -> None:
        """Show the custom order number stored on a WooCommerce order."""
        order_id = command.argument
        if not is_numeric_id(order_id):
            raise ValidationFailure(
                "❌ Please enter a valid numeric WooCommerce Order ID."
            )
        failure = (
            f"❌ Could not find order ID *{order_id}* or failed to retrieve order."
        )
        order = await self._fetch_order(
            command, order_id, not_found=failure, failure=failure
        )
        if order is None:
            return
        custom_number = meta_value(order, CUSTOM_ORDER_NUMBER_KEY)
        if custom_number is None:
            await self.notifier.send(
                command.channel_id,
                f"⚠️ No custom order number found on Woo order ID *{order_id}*.",
            )
            return
        lines = [
            f"*Woo Order ID:* {order_id}",
            f"*Custom Order Number:* *{custom_number}*",
        ]
        if name := customer_name(order):
            lines.append(f"*Customer:* {name}")
        if email := billing_email(order):
            lines.append(f"*Email:* {email}")
        await self.notifier.send(
            command.channel_id,
            f"✅ Custom order number found for Woo order ID *{order_id}*",
            blocks=[blocks.section("\n".join(lines))],
        )

    async def post_edit_link(self, command: CommandRequest) -> None:
        """Post the admin edit link for an order."""
        order_id = command.argument
        edit_url = f"{self.admin_edit_url}{order_id}"
        await self.notifier.send(
            command.channel_id,
            f"✏️ Edit order <{edit_url}|#{order_id}>",
            unfurl_links=False,
        )

    async def _search_custom_number(self, number: str) -> dict[str, object] | None:
        for page in range(1, SEARCH_PAGES + 1):
            orders = await self.woo_client.get(
                "/orders",
                {
                    "per_page": SEARCH_PAGE_SIZE,
                    "page": page,
                    "orderby": "date",
                    "order": "desc",
                },
            )
            if not isinstance(orders, list) or not orders:
                return None
            for order in orders:
                if not isinstance(order, dict):
                    continue
                value = meta_value(order, CUSTOM_ORDER_NUMBER_KEY)
                if value is not None and str(value) == number:
                    return order
        return None

    async def _fetch_order(
        self,
        command: CommandRequest,
        order_id: str,
        not_found: str,
        failure: str,
    ) -> dict[str, object] | None:
        try:
            order = await self.woo_client.get(f"/orders/{order_id}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == httpx.codes.NOT_FOUND:
                await self.notifier.send(command.channel_id, not_found)
                return None
            _logger.exception("Order fetch failed", extra={"order_id": order_id})
            await self.notifier.send(command.channel_id, failure)
            return None
        except httpx.HTTPError:
            _logger.exception("Order fetch failed", extra={"order_id": order_id})
            await self.notifier.send(command.channel_id, failure)
            return None
        return order if isinstance(order, dict) else None


@dataclass
class OrderStatusWorkflow:
    """Show an order's status and apply a status chosen by button."""

    woo_client: WooClient
    notifier: Notifier

    async def start(self, command: CommandRequest) -> None:
        """Post order details with one button per target status."""
        order_id = command.argument
        if not is_numeric_id(order_id):
            raise ValidationFailure("❌ Please enter a valid numeric Order ID.")
        try:
            order = await self.woo_client.get(f"/orders/{order_id}")
        except httpx.HTTPError:
            _logger.exception("Order fetch failed", extra={"order_id": order_id})
            await self.notifier.send(
                command.channel_id,
                f"❌ Could not find order ID *{order_id}* or failed to retrieve "
                "order details.",
            )
            return

        status = normalize_status(order.get("status"))
        stripe_lines = stripe_meta_lines(order) or ["• No Stripe meta found"]
        message_blocks = [
            blocks.section(_status_summary(order, status)),
            blocks.section("*Stripe Data:*\n" + "\n".join(stripe_lines)),
            *status_buttons(command.user_id, str(order.get("id")), status),
        ]
        await self.notifier.send(
            command.channel_id,
            f"Order {order.get('id')} status and payment details",
            blocks=message_blocks,
        )

    async def apply(self, action: ActionRequest) -> None:
        """Change the order status, skipping the write if already there."""
        reference = require_reference(action)
        if (
            reference is None
            or not is_numeric_id(reference.object_id)
            or not reference.target_state
        ):
            raise ValidationFailure("❌ Invalid status update request.")
        order_id = reference.object_id
        target = normalize_status(reference.target_state)

        try:
            order = await self.woo_client.get(f"/orders/{order_id}")
            current = normalize_status(order.get("status"))
            if current == target:
                await self.notifier.send(
                    action.channel_id,
                    f"ℹ️ Order *{order_id}* is already in *{target}* status.",
                )
                return
            await self.woo_client.put(f"/orders/{order_id}", {"status": target})
        except httpx.HTTPError:
            _logger.exception(
                "Order status update failed",
                extra={"order_id": order_id, "target": target},
            )
            await self.notifier.send(
                action.channel_id, "❌ Failed to update order status."
            )
            return
        await self.notifier.send(
            action.channel_id,
            f"✅ Order *{order_id}* status changed from *{current or 'unknown'}* "
            f"to *{target}*.",
        )


def status_buttons(
    user_id: str, order_id: str, current_status: str
) -> list[dict[str, object]]:
    """Build one actions block per candidate status.

    Every button shares the same action id; the target status travels in
    the button value. Slack requires action ids to be unique per block, so
    each button gets its own block.
    """
    current = normalize_status(current_status)
    candidates = [status for status in ORDER_STATUSES if status != current]
    return [
        blocks.actions(
            blocks.button(
                f"Set {status_label(status)}",
                EDIT_ORDER_STATUS_ACTION,
                ActionReference(user_id, order_id, status).encode(),
                style="primary" if status == "completed" else None,
            ),
            block_id=f"order_status_{status.replace('-', '_')}",
        )
        for status in candidates[:MAX_STATUS_BUTTONS]
    ]


def _order_summary(order: dict[str, object]) -> str:
    return (
        f"*Order ID:* {order.get('id')}\n"
        f"*Customer:* {customer_name(order)}\n"
        f"*Email:* {billing_email(order)}\n"
        f"*User ID:* {order.get('customer_id')}"
    )


def _status_summary(order: dict[str, object], status: str) -> str:
    payment = order.get("payment_method_title") or order.get("payment_method")
    return (
        f"*Order ID:* {order.get('id')}\n"
        f"*Status:* {status_label(status)}\n"
        f"*Customer:* {customer_name(order) or 'N/A'}\n"
        f"*Email:* {billing_email(order) or 'N/A'}\n"
        f"*Total:* {order.get('currency') or ''} {order.get('total') or '0.00'}\n"
        f"*Payment Method:* {payment or 'N/A'}\n"
        f"*Transaction ID:* {order.get('transaction_id') or 'N/A'}"
    )
