from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, MarkdownViewer

from api.client import ApiError, ApiUnavailable
from sales.checkout import CheckoutRejected, submit_sale
from utils.logger import get_logger
from utils.pure import format_money, generate_markdown_table
from views.modal_dialog import DialogModal

_logger = get_logger(__name__)


class CheckoutModal(ModalScreen[Optional[str]]):
    """
    Order summary plus customer details.
    Dismisses with the customer name once the sale is recorded, None otherwise.
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            yield Label("Customer Name")
            yield Input(placeholder="Jane Doe", id="input-customer")
            yield Label("Customer Email")
            yield Input(placeholder="jane@example.com", id="input-customer-email")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Complete Sale", id="btn-submit", variant="primary")

    async def on_mount(self):
        state = self.app.state
        totals = state.cart.compute_totals(state.discount)
        headers = ["Product Name", "Unit Price", "Quantity", "Total Price"]
        rows = [
            [
                item.product_name,
                format_money(item.unit_price),
                item.quantity,
                format_money(item.line_total),
            ]
            for item in state.cart
        ]
        md = "### Order Summary\n\n"
        md += generate_markdown_table(headers, rows, ["l", "c", "c", "c"])
        md += f"\n\n**Subtotal:** {format_money(totals.subtotal)}"
        md += f"\n\n**Discount ({state.discount:g}%):** -{format_money(totals.discount_amount)}"
        md += f"\n\n**Total:** {format_money(totals.total)}"
        await self.query_one(MarkdownViewer).document.update(md)
        self.query_one("#input-customer").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        name = self.query_one("#input-customer", Input).value
        email = self.query_one("#input-customer-email", Input).value
        if not name.strip() or not email.strip():
            self.notify("Please enter customer details", severity="error")
            return

        if not await self.app.push_screen_wait(
            DialogModal(
                "Complete this sale? This cannot be undone.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        state = self.app.state
        try:
            await submit_sale(state.http, state.cart, name, email, state.discount)
        except CheckoutRejected as e:
            self.notify(str(e), severity="error")
            return
        except ApiError as e:
            _logger.error(f"Checkout error: {e}")
            self.notify(e.message or "Checkout failed", severity="error")
            return
        except ApiUnavailable:
            self.notify("Failed to connect to server", severity="error")
            return

        state.discount = 0.0
        self.notify("Sale complete! Invoice has been sent to the customer's email.")
        self.dismiss(name.strip())

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)
