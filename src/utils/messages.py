from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user asks to log out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired once the session store holds a token, so screens can refresh
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired by the sales screen whenever a cart mutation went through.
    Triggers a redraw of the cart table and totals.
    """

    bubble = True


class SaleCompletedMessage(Message):
    """
    Fired after the backend accepted a sale.
    The product list is reloaded so stock counts are current.
    """

    bubble = True

    def __init__(self, customer: str) -> None:
        super().__init__()
        self.customer = customer
