from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, Markdown

from auth.models import User
from utils.messages import UserLogoutMessage
from utils.pure import generate_markdown_table
from views.modal_dialog import DialogModal, QuitDialogModal
from views.modal_profile import ProfileModal


class Sidebar(Container):
    shown_user: Optional[User] = None

    def compose(self) -> ComposeResult:
        yield Label("User Info", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Edit Profile", id="btn-profile")
        yield Button("Log out", id="btn-logout", variant="error")

    async def on_mount(self):
        await self.show_user()

    async def show_user(self) -> None:
        if self.app.state.session.select_user() is None:
            # token-only sessions get their user from the profile refresh
            self.wait_for_profile()
        await self.render_user()

    @work(exclusive=True, group="sidebar-profile")
    async def wait_for_profile(self) -> None:
        await self.app.state.session.wait_for_refresh()
        await self.render_user(pending=False)

    async def render_user(self, pending: bool = True) -> None:
        user = self.app.state.session.select_user()
        self.shown_user = user
        if user is None:
            text = "_Loading profile..._" if pending else "_Profile unavailable_"
            await self.query_one(Markdown).update(text)
            return

        table_rows = [
            ["Username", user.username or "-"],
            ["Email", user.email or "-"],
            ["Mobile", user.mobile or "-"],
            ["Sign-in", "Google" if user.auth_provider == "google" else "Password"],
        ]
        md_table_str = generate_markdown_table(None, table_rows, ["l", "l"])
        await self.query_one(Markdown).update(md_table_str)

    @on(Button.Pressed, "#btn-profile")
    @work()
    async def handle_edit_profile(self):
        if self.app.state.session.select_user() is None:
            self.notify("Profile is still loading.", severity="warning")
            return
        if await self.app.push_screen_wait(ProfileModal()):
            await self.render_user()

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return

        self.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "Sales",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = "SalesDesk"
        self.sub_title = header_sub_title
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def refresh_user(self) -> None:
        for sidebar in self.query(Sidebar):
            await sidebar.show_user()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
