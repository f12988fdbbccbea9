"""Product workflows: draft a product and change a price."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import httpx

from slack_store_tools.adapters.woo_client import WooClient
from slack_store_tools.domain.errors import SessionMissing, ValidationFailure
from slack_store_tools.domain.interactions import ActionRequest, CommandRequest
from slack_store_tools.services import blocks
from slack_store_tools.services.guards import SESSION_EXPIRED_MESSAGE, require_session
from slack_store_tools.services.notifications import Notifier
from slack_store_tools.services.sessions import SessionStore

_logger = logging.getLogger(__name__)

DRAFT_WORKFLOW = "draft_product"
PRICE_WORKFLOW = "price_update"

NEW_PRICE_BLOCK = "new_price_input"
NEW_PRICE_ACTION = "new_price"


@dataclass
class ProductWorkflows:
    """Two-phase product workflows backed by the session store."""

    woo_client: WooClient
    session_store: SessionStore
    notifier: Notifier

    async def start_draft(self, command: CommandRequest) -> None:
        """Look up a product by SKU and ask whether to draft it."""
        sku = command.argument
        try:
            product = await self._find_by_sku(sku)
        except httpx.HTTPError:
            _logger.exception("Product lookup failed", extra={"sku": sku})
            await self.notifier.send(
                command.channel_id, "❌ Error retrieving product."
            )
            return
        if product is None:
            await self.notifier.send(
                command.channel_id, f"❌ No product found with SKU: {sku}"
            )
            return

        self.session_store.set(
            command.user_id,
            {
                "workflow": DRAFT_WORKFLOW,
                "productId": product.get("id"),
                "productName": product.get("name"),
            },
        )
        name = product.get("name")
        price = product.get("price")
        await self.notifier.send(
            command.channel_id,
            f"Is this the correct product to draft?\n*{name}* (${price})",
            blocks=[
                blocks.section(f"*Product:* {name}\n*Price:* ${price}"),
                blocks.confirm_cancel(
                    command.user_id,
                    "confirm_draft",
                    "cancel_draft",
                    confirm_label="✅ Yes",
                    cancel_label="❌ No",
                ),
            ],
        )

    async def confirm_draft(self, action: ActionRequest) -> None:
        """Set the staged product to draft status."""
        session = require_session(
            self.session_store, action, DRAFT_WORKFLOW, ("productId", "productName")
        )
        product_id = session["productId"]
        try:
            await self.woo_client.put(f"/products/{product_id}", {"status": "draft"})
        except httpx.HTTPError:
            _logger.exception(
                "Drafting product failed", extra={"product_id": product_id}
            )
            await self.notifier.send(action.channel_id, "❌ Failed to remove product.")
            return
        self.session_store.delete(action.user_id)
        await self.notifier.send(
            action.channel_id,
            f"✅ *{session['productName']}* has been removed successfully.",
        )

    async def cancel_draft(self, action: ActionRequest) -> None:
        require_session(self.session_store, action, DRAFT_WORKFLOW, ())
        self.session_store.delete(action.user_id)
        await self.notifier.send(action.channel_id, "❌ Removal canceled.")

    async def start_price_update(self, command: CommandRequest) -> None:
        """Look up the current price for a SKU and prompt for a new one."""
        sku = command.argument
        try:
            product = await self._find_by_sku(sku)
            if product is None:
                await self.notifier.send(
                    command.channel_id, f"❌ No product found with SKU: {sku}"
                )
                return
            variation = None
            if product.get("type") == "variable":
                variation = await self._find_variation(product, sku)
                if variation is None:
                    await self.notifier.send(
                        command.channel_id,
                        f"❌ No matching variation found with SKU: {sku}",
                    )
                    return
        except httpx.HTTPError:
            _logger.exception("Price lookup failed", extra={"sku": sku})
            await self.notifier.send(command.channel_id, "❌ Failed to find product.")
            return

        current_price = (variation or product).get("price")
        self.session_store.set(
            command.user_id,
            {
                "workflow": PRICE_WORKFLOW,
                "sku": sku,
                "productId": product.get("id"),
                "variationId": variation.get("id") if variation else None,
                "isVariation": variation is not None,
                "originalPrice": current_price,
            },
        )
        await self.notifier.send(
            command.channel_id,
            f"Current price for *{sku}* is ${current_price}.",
            blocks=[
                blocks.section(f"*SKU:* {sku}\n*Current Price:* ${current_price}"),
                blocks.text_input(NEW_PRICE_BLOCK, NEW_PRICE_ACTION, "Enter new price"),
                blocks.confirm_cancel(command.user_id, "confirm_price", "cancel_price"),
            ],
        )

    async def confirm_price_update(self, action: ActionRequest) -> None:
        """Apply the entered price to the staged product or variation."""
        session = require_session(
            self.session_store,
            action,
            PRICE_WORKFLOW,
            ("sku", "productId", "isVariation"),
        )
        raw_price = action.input_value(NEW_PRICE_BLOCK, NEW_PRICE_ACTION)
        new_price = parse_price(raw_price or action.first_input_value())
        if new_price is None:
            raise ValidationFailure("❌ Invalid price entered.")

        product_id = session["productId"]
        if session["isVariation"]:
            variation_id = session.get("variationId")
            if variation_id is None:
                raise SessionMissing(SESSION_EXPIRED_MESSAGE)
            path = f"/products/{product_id}/variations/{variation_id}"
        else:
            path = f"/products/{product_id}"

        try:
            await self.woo_client.put(path, {"regular_price": format_price(new_price)})
        except httpx.HTTPError:
            _logger.exception("Price update failed", extra={"path": path})
            await self.notifier.send(action.channel_id, "❌ Price update failed.")
            return
        self.session_store.delete(action.user_id)
        await self.notifier.send(
            action.channel_id,
            f"✅ Price for *{session['sku']}* updated to ${new_price:.2f}.",
        )

    async def cancel_price_update(self, action: ActionRequest) -> None:
        require_session(self.session_store, action, PRICE_WORKFLOW, ())
        self.session_store.delete(action.user_id)
        await self.notifier.send(action.channel_id, "❌ Price update canceled.")

    async def _find_by_sku(self, sku: str) -> dict[str, object] | None:
        products = await self.woo_client.get("/products", {"sku": sku})
        if isinstance(products, list) and products:
            return products[0]
        return None

    async def _find_variation(
        self, product: dict[str, object], sku: str
    ) -> dict[str, object] | None:
        variations = await self.woo_client.get(
            f"/products/{product.get('id')}/variations"
        )
        if not isinstance(variations, list):
            return None
        for variation in variations:
            if isinstance(variation, dict) and variation.get("sku") == sku:
                return variation
        return None


def parse_price(text: str | None) -> Decimal | None:
    """Parse a non-negative price, allowing a leading dollar sign."""
    cleaned = (text or "").strip().lstrip("$").strip()
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


def format_price(value: Decimal) -> str:
    """Format a price the way WooCommerce stores it (no trailing zeros)."""
    text = format(value.normalize(), "f")
    return text if text != "-0" else "0"
