"""Route slash commands and button actions to workflow handlers."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from slack_store_tools.domain.errors import ActorMismatch, WorkflowError
from slack_store_tools.domain.interactions import ActionRequest, CommandRequest
from slack_store_tools.domain.orders import is_numeric_id
from slack_store_tools.services.customers import CustomerMetaWorkflow
from slack_store_tools.services.mail_pdf import GENERATE_PDF_ACTION, OrderPdfWorkflow
from slack_store_tools.services.notifications import Notifier
from slack_store_tools.services.orders import (
    EDIT_ORDER_STATUS_ACTION,
    OrderLookupService,
    OrderStatusWorkflow,
)
from slack_store_tools.services.products import ProductWorkflows
from slack_store_tools.slack_commands import SlashCommand

_logger = logging.getLogger(__name__)

UNSUPPORTED_ACTION_MESSAGE = "⚠️ Unsupported action."
UNEXPECTED_ERROR_MESSAGE = "❌ Something went wrong. Please try the command again."

CommandHandler = Callable[[CommandRequest], Awaitable[None]]
ActionHandler = Callable[[ActionRequest], Awaitable[None]]


@dataclass(frozen=True)
class Acknowledgement:
    """Immediate webhook response for a slash command."""

    text: str
    accepted: bool


@dataclass
class WorkflowDispatcher:
    """Select the handler for a command or action and contain its failures.

    Handlers run after the webhook has been acknowledged, so every outcome,
    including errors, reaches the user as a Slack notice.
    """

    products: ProductWorkflows
    customers: CustomerMetaWorkflow
    order_lookup: OrderLookupService
    order_status: OrderStatusWorkflow
    order_pdf: OrderPdfWorkflow
    notifier: Notifier

    def command_handlers(self) -> dict[SlashCommand, CommandHandler]:
        return {
            SlashCommand.DRAFT_PRODUCT: self.products.start_draft,
            SlashCommand.PRICE_UPDATE: self.products.start_price_update,
            SlashCommand.CUSTOMER_META: self.customers.start,
            SlashCommand.EDIT_ORDER_STATUS: self.order_status.start,
            SlashCommand.ORDER_PDF: self.order_pdf.search,
            SlashCommand.FIND_ORDER: self.order_lookup.find_by_custom_number,
            SlashCommand.FIND_ID_ORDER: self.order_lookup.find_by_id,
            SlashCommand.FIND_CUSTOM_ID: self.order_lookup.find_custom_number,
            SlashCommand.EDIT_ORDER: self.order_lookup.post_edit_link,
        }

    def action_handlers(self) -> dict[str, ActionHandler]:
        return {
            "confirm_draft": self.products.confirm_draft,
            "cancel_draft": self.products.cancel_draft,
            "confirm_price": self.products.confirm_price_update,
            "cancel_price": self.products.cancel_price_update,
            "save_customer_meta": self.customers.save,
            "cancel_customer_meta": self.customers.cancel,
            EDIT_ORDER_STATUS_ACTION: self.order_status.apply,
            GENERATE_PDF_ACTION: self.order_pdf.generate,
        }

    def acknowledge(
        self, command: SlashCommand, request: CommandRequest
    ) -> Acknowledgement:
        """Validate the command text and build the immediate response."""
        spec = command.value
        argument = request.argument
        if spec.missing_argument is not None:
            invalid = not argument or (spec.numeric and not is_numeric_id(argument))
            if invalid:
                return Acknowledgement(text=spec.missing_argument, accepted=False)
        return Acknowledgement(
            text=spec.acknowledgement.format(argument=argument), accepted=True
        )

    async def run_command(
        self, command: SlashCommand, request: CommandRequest
    ) -> None:
        """Run the initiating half of a workflow."""
        handler = self.command_handlers()[command]
        await self._run(
            handler,
            request,
            request.channel_id,
            {"command": command.value.command, "user_id": request.user_id},
        )

    async def run_action(self, request: ActionRequest) -> None:
        """Run the handler registered for a button's action id."""
        handler = self.action_handlers().get(request.action_id)
        if handler is None:
            _logger.warning(
                "Unsupported Slack action", extra={"action_id": request.action_id}
            )
            await self.notifier.send(request.channel_id, UNSUPPORTED_ACTION_MESSAGE)
            return
        await self._run(
            handler,
            request,
            request.channel_id,
            {"action_id": request.action_id, "user_id": request.user_id},
        )

    async def _run(
        self,
        handler: Callable[[object], Awaitable[None]],
        request: CommandRequest | ActionRequest,
        channel_id: str,
        context: dict[str, str],
    ) -> None:
        try:
            await handler(request)
        except ActorMismatch as exc:
            _logger.warning("Rejected action from non-issuing user", extra=context)
            await self.notifier.send(channel_id, exc.user_message)
        except WorkflowError as exc:
            _logger.info("Workflow stopped: %s", exc.user_message, extra=context)
            await self.notifier.send(channel_id, exc.user_message)
        except Exception:
            _logger.exception("Workflow handler failed", extra=context)
            await self.notifier.send(channel_id, UNEXPECTED_ERROR_MESSAGE)
