"""Customer metadata workflow."""

import logging
from dataclasses import dataclass

import httpx

from slack_store_tools.adapters.woo_client import WooClient
from slack_store_tools.domain.interactions import ActionRequest, CommandRequest
from slack_store_tools.services import blocks
from slack_store_tools.services.guards import require_session
from slack_store_tools.services.notifications import Notifier
from slack_store_tools.services.sessions import SessionStore

_logger = logging.getLogger(__name__)

CUSTOMER_META_WORKFLOW = "customer_meta"

CUSTOMER_CODE_KEY = "customer_code"
CUSTOMER_CLASS_KEY = "customer_class"
CUSTOMER_CODE_BLOCK = "customer_code_block"
CUSTOMER_CLASS_BLOCK = "customer_class_block"


@dataclass
class CustomerMetaWorkflow:
    """Read and edit the customer code/class stored in customer meta."""

    woo_client: WooClient
    session_store: SessionStore
    notifier: Notifier

    async def start(self, command: CommandRequest) -> None:
        """Load a customer by email and show editable meta fields."""
        email = command.argument
        try:
            customers = await self.woo_client.get(
                "/customers", {"email": email, "per_page": 1}
            )
        except httpx.HTTPError:
            _logger.exception("Customer lookup failed", extra={"email": email})
            await self.notifier.send(
                command.channel_id, "❌ Failed to retrieve customer metadata."
            )
            return
        if not isinstance(customers, list) or not customers:
            await self.notifier.send(
                command.channel_id,
                f"❌ No WooCommerce customer found with email: {email}",
            )
            return

        customer = customers[0]
        customer_id = customer.get("id")
        meta = _meta_map(customer)
        customer_code = str(meta.get(CUSTOMER_CODE_KEY) or "")
        customer_class = str(meta.get(CUSTOMER_CLASS_KEY) or "")

        self.session_store.set(
            command.user_id,
            {
                "workflow": CUSTOMER_META_WORKFLOW,
                "customerId": customer_id,
                "email": email,
            },
        )
        await self.notifier.send(
            command.channel_id,
            f"Customer metadata loaded for {email}",
            blocks=[
                blocks.section(
                    f"*Customer ID:* {customer_id}\n"
                    f"*Customer Code:* {customer_code or '_empty_'}\n"
                    f"*Customer Class:* {customer_class or '_empty_'}"
                ),
                blocks.text_input(
                    CUSTOMER_CODE_BLOCK,
                    CUSTOMER_CODE_KEY,
                    "Customer Code",
                    initial_value=customer_code,
                ),
                blocks.text_input(
                    CUSTOMER_CLASS_BLOCK,
                    CUSTOMER_CLASS_KEY,
                    "Customer Class",
                    initial_value=customer_class,
                ),
                blocks.confirm_cancel(
                    command.user_id,
                    "save_customer_meta",
                    "cancel_customer_meta",
                    confirm_label="💾 Save",
                ),
            ],
        )

    async def save(self, action: ActionRequest) -> None:
        """Write the entered meta values to the staged customer."""
        session = require_session(
            self.session_store, action, CUSTOMER_META_WORKFLOW, ("customerId",)
        )
        customer_code = action.input_value(CUSTOMER_CODE_BLOCK, CUSTOMER_CODE_KEY) or ""
        customer_class = (
            action.input_value(CUSTOMER_CLASS_BLOCK, CUSTOMER_CLASS_KEY) or ""
        )
        customer_id = session["customerId"]
        try:
            await self.woo_client.put(
                f"/customers/{customer_id}",
                {
                    "meta_data": [
                        {"key": CUSTOMER_CODE_KEY, "value": customer_code},
                        {"key": CUSTOMER_CLASS_KEY, "value": customer_class},
                    ]
                },
            )
        except httpx.HTTPError:
            _logger.exception(
                "Saving customer meta failed", extra={"customer_id": customer_id}
            )
            await self.notifier.send(
                action.channel_id, "❌ Failed to save customer metadata."
            )
            return
        self.session_store.delete(action.user_id)
        await self.notifier.send(
            action.channel_id,
            "✅ Customer metadata updated:\n"
            f"*Customer Code:* {customer_code or '_empty_'}\n"
            f"*Customer Class:* {customer_class or '_empty_'}",
        )

    async def cancel(self, action: ActionRequest) -> None:
        require_session(self.session_store, action, CUSTOMER_META_WORKFLOW, ())
        self.session_store.delete(action.user_id)
        await self.notifier.send(
            action.channel_id, "❌ Customer meta update canceled."
        )


def _meta_map(customer: dict[str, object]) -> dict[str, object]:
    meta = customer.get("meta_data")
    if not isinstance(meta, list):
        return {}
    return {
        str(item["key"]): item.get("value")
        for item in meta
        if isinstance(item, dict) and item.get("key")
    }
