from typing import Dict, List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label, LoadingIndicator, Rule

from api import endpoints
from api.client import ApiError, ApiUnavailable
from sales.models import CartSignal, Product
from utils.logger import get_logger
from utils.messages import CartChangedMessage, SaleCompletedMessage, UserLoginMessage
from utils.pure import filter_products, format_money, stock_status
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import DialogModal

_logger = get_logger(__name__)

SIGNAL_TEXT = {
    CartSignal.STOCK_EXCEEDED: "Cannot add more than available stock",
    CartSignal.OUT_OF_STOCK: "Product is out of stock",
    CartSignal.NOT_IN_CART: "Product is not in the cart",
}


class SalesScreen(BaseScreen):
    """
    POS panel: product list on the left, the sale being rung up on the right.
    """

    def __init__(self) -> None:
        super().__init__()
        self.configure(header_sub_title="Sales Panel")
        self._products: Dict[str, Product] = {}
        self._selected_pid: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="div-sales"):
            with Vertical(id="div-products"):
                yield Input(placeholder="Search products...", id="input-search")
                yield LoadingIndicator(id="loading-products")
                yield DataTable(id="table-products", cursor_type="row")
            with Vertical(id="div-cart"):
                yield Label("Cart", id="label-cart")
                yield DataTable(id="table-cart", cursor_type="row")
                with Horizontal(id="div-qty-btns"):
                    yield Button("-", id="btn-dec")
                    yield Button("+", id="btn-inc")
                    yield Button("Remove", id="btn-remove", variant="warning")
                yield Label("Discount (%)")
                yield Input(value="0", id="input-discount", type="number")
                yield Rule(line_style="dashed")
                yield Label("", id="label-totals")
                with Horizontal(id="div-sale-btns"):
                    yield Button("Clear Cart", id="btn-clear-cart")
                    yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        self.query_one("#table-products", DataTable).add_columns(
            "Product", "Price", "Stock", "Status"
        )
        self.query_one("#table-cart", DataTable).add_columns(
            "Item", "Unit", "Qty", "Line Total"
        )
        self.load_products()
        self.render_cart()

    # ---------------------------
    # Products
    # ---------------------------

    @on(UserLoginMessage)
    @on(SaleCompletedMessage)
    @work(exclusive=True, group="products")
    async def load_products(self) -> None:
        loading = self.query_one("#loading-products", LoadingIndicator)
        loading.display = True
        try:
            products = await endpoints.list_products(self.app.state.http)
        except (ApiError, ApiUnavailable) as e:
            _logger.error(f"Error fetching products: {e}")
            self.notify("Failed to load products", severity="error")
            return
        finally:
            loading.display = False

        self._products = {p.id: p for p in products}
        self.render_products()
        await self.refresh_user()

    @on(Input.Changed, "#input-search")
    def render_products(self) -> None:
        query = self.query_one("#input-search", Input).value
        rows: List[Product] = filter_products(self._products.values(), query)

        table = self.query_one("#table-products", DataTable)
        table.clear()
        for product in rows:
            label, _ = stock_status(product)
            table.add_row(
                product.name,
                format_money(product.price),
                str(product.inventory),
                label,
                key=product.id,
            )

    @on(DataTable.RowSelected, "#table-products")
    def handle_product_selected(self, event: DataTable.RowSelected) -> None:
        product = self._products.get(event.row_key.value)
        if product is None:
            return
        signal = self.app.state.cart.add_item(product)
        if self.report(signal):
            self.notify(f"{product.name} added")

    # ---------------------------
    # Cart
    # ---------------------------

    def report(self, signal: CartSignal) -> bool:
        """Toast a rejected cart mutation. True if the cart changed."""
        if signal.rejected:
            self.notify(SIGNAL_TEXT[signal], severity="warning")
            return False
        self.post_message(CartChangedMessage())
        return True

    @on(DataTable.RowHighlighted, "#table-cart")
    def handle_cart_highlight(self, event: DataTable.RowHighlighted) -> None:
        self._selected_pid = event.row_key.value

    @on(Button.Pressed, "#btn-inc")
    @on(Button.Pressed, "#btn-dec")
    def handle_qty_change(self, event: Button.Pressed) -> None:
        item = self.app.state.cart.get(self._selected_pid) if self._selected_pid else None
        if item is None:
            self.notify("Select an item in the cart first.", severity="warning")
            return
        step = 1 if event.button.id == "btn-inc" else -1
        self.report(self.app.state.cart.set_quantity(item.product_id, item.quantity + step))

    @on(Button.Pressed, "#btn-remove")
    def handle_remove_item(self) -> None:
        if self._selected_pid and self.app.state.cart.remove_item(self._selected_pid):
            self.post_message(CartChangedMessage())
            self.notify("Item removed from cart.")

    @on(Input.Changed, "#input-discount")
    def handle_discount_change(self, event: Input.Changed) -> None:
        self.app.state.set_discount(event.value)
        self.render_totals()

    @on(UserLoginMessage)
    def handle_user_login(self) -> None:
        # a new operator starts from an empty sale
        self.query_one("#input-discount", Input).value = "0"
        self.render_cart()

    @on(CartChangedMessage)
    def render_cart(self) -> None:
        table = self.query_one("#table-cart", DataTable)
        table.clear()
        for item in self.app.state.cart:
            table.add_row(
                item.product_name,
                format_money(item.unit_price),
                f"{item.quantity}/{item.max_stock}",
                format_money(item.line_total),
                key=item.product_id,
            )
        if self._selected_pid not in self.app.state.cart:
            self._selected_pid = None
        self.query_one("#label-cart").update(f"Cart ({len(self.app.state.cart)})")
        self.render_totals()

    def render_totals(self) -> None:
        state = self.app.state
        totals = state.cart.compute_totals(state.discount)
        self.query_one("#label-totals", Label).update(
            f"Subtotal: {format_money(totals.subtotal)}\n"
            f"Discount ({state.discount:g}%): -{format_money(totals.discount_amount)}\n"
            f"Total: {format_money(totals.total)}"
        )

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if self.app.state.cart.is_empty:
            self.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            self.app.state.cart.clear()
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        if self.app.state.cart.is_empty:
            self.notify("Cart is empty", severity="error")
            return

        customer = await self.app.push_screen_wait(CheckoutModal())
        if not customer:
            return
        self.query_one("#input-discount", Input).value = "0"
        self.post_message(CartChangedMessage())
        self.post_message(SaleCompletedMessage(customer))
