from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from api.client import create_client
from auth.storage import MemoryStorage, SqliteStorage
from auth.store import SessionStore
from utils import config
from utils.logger import get_logger
from utils.messages import QuitRequestedMessage, UserLoginMessage, UserLogoutMessage
from utils.state import AppState
from views.scr_login import LoginScreen
from views.scr_sales import SalesScreen

_logger = get_logger(__name__)


def build_state() -> AppState:
    http = create_client(config.API_URL, config.HTTP_TIMEOUT)
    session = SessionStore(
        http,
        durable=SqliteStorage(config.STATE_DB_PATH),
        ephemeral=MemoryStorage(),
    )
    return AppState(http=http, session=session)


class SalesDeskApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "sales": SalesScreen,
    }

    state: AppState

    def __init__(self, state: AppState = None):
        super().__init__()
        self.state = state or build_state()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow(restore=True)

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.end_session()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.state.aclose()
        self.exit()

    @work(exclusive=True)
    async def main_flow(self, restore: bool = False):
        if restore:
            # header must be in place before the first screen fires a request
            await self.state.session.restore()
        if not self.state.session.is_authenticated:
            await self.push_screen_wait(LoginScreen())

        if self.current_mode != "sales":
            await self.switch_mode("sales")
        else:
            self.screen.post_message(UserLoginMessage())


def run():
    _logger.info(f"Starting SalesDesk against {config.API_URL}")
    SalesDeskApp().run()


if __name__ == "__main__":
    run()
