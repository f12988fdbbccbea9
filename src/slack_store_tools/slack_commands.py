"""Slack slash command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SlackCommandSpec:
    """Declarative slash command definition.

    ``acknowledgement`` is returned in the webhook response before any
    upstream work starts; ``missing_argument`` is returned instead when the
    command text is empty (or, with ``numeric``, not a positive integer).
    """

    command: str
    route: str
    description: str
    acknowledgement: str
    missing_argument: str | None = None
    numeric: bool = False


class SlashCommand(Enum):
    """Enum of slash commands (single source of truth)."""

    DRAFT_PRODUCT = SlackCommandSpec(
        "draftproduct",
        "/slack/command",
        "Set a product to draft by SKU",
        "🔍 Looking up SKU *{argument}*...",
        missing_argument="❌ Please provide a SKU.",
    )
    PRICE_UPDATE = SlackCommandSpec(
        "priceupdate",
        "/slack/priceupdate",
        "Change a product or variation price by SKU",
        "🔍 Looking up current price for *{argument}*...",
        missing_argument="❌ Please provide a SKU.",
    )
    CUSTOMER_META = SlackCommandSpec(
        "customermeta",
        "/slack/customermeta",
        "Edit customer code and class by email",
        "🔍 Looking up customer metadata...",
        missing_argument="❌ Please provide an email address.",
    )
    EDIT_ORDER_STATUS = SlackCommandSpec(
        "editorderstatus",
        "/slack/editorderstatus",
        "Show an order and change its status",
        "🔍 Loading order *{argument}*...",
    )
    ORDER_PDF = SlackCommandSpec(
        "orderpdf",
        "/slack/orderpdf",
        "Render a logged order email to PDF",
        "🔎 Searching email logs...",
        missing_argument="❌ Please provide a subject search (ex: `New Order #4105`).",
    )
    FIND_ORDER = SlackCommandSpec(
        "findorder",
        "/slack/findorder",
        "Find an order by custom order number",
        "🔍 Searching for order *{argument}*...",
        missing_argument="❌ Please provide an order number.",
    )
    FIND_ID_ORDER = SlackCommandSpec(
        "findidorder",
        "/slack/findidorder",
        "Find an order by WooCommerce ID",
        "🔍 Searching for WooCommerce order ID *{argument}*...",
    )
    FIND_CUSTOM_ID = SlackCommandSpec(
        "findcustomid",
        "/slack/findcustomid",
        "Find the custom order number for a WooCommerce ID",
        "🔍 Looking up custom order number for Woo order ID *{argument}*...",
    )
    EDIT_ORDER = SlackCommandSpec(
        "editorder",
        "/slack/editorder",
        "Link to the admin edit page for an order",
        "✏️ Preparing edit link for order *{argument}*...",
        missing_argument="❌ Please enter a valid numeric Order ID.",
        numeric=True,
    )

