from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Checkbox, Input, Label, TabbedContent, TabPane

from api import endpoints
from api.client import ApiError, ApiUnavailable, AuthFailure
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal


class LoginScreen(BaseScreen):
    """
    Dismissed once the session store holds a token.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Username")
                    yield Input(placeholder="jane", id="input-login-user")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    yield Checkbox("Remember me", value=True, id="chk-remember")
                    with Horizontal(id="div-login-btns"):
                        yield Button("Quit", id="btn-quit")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Username")
                    yield Input(placeholder="jane", id="input-reg-user")
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-reg-email")
                    yield Label("Mobile")
                    yield Input(placeholder="optional", id="input-reg-mobile")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd"
                    )
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-user").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()
        if event.key == "enter" and self.focused == self.query_one("#input-reg-pwd"):
            self.handle_registration_submit()

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        username = self.query_one("#input-login-user", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value.strip()
        remember = self.query_one("#chk-remember", Checkbox).value

        if not username or not pwd:
            self.notify("Username or password cannot be empty!", severity="error")
            return

        try:
            result = await endpoints.login(self.app.state.http, username, pwd)
        except AuthFailure:
            self.notify("Invalid username or password.", severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return
        except (ApiError, ApiUnavailable):
            self.notify("Failed to connect to server.", severity="error")
            return

        if not result or not result.get("token"):
            self.notify("Unexpected response from server.", severity="error")
            return

        await self.app.state.session.login({**result, "rememberMe": remember})
        self.notify("Login successful.")
        self.dismiss()

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        username = self.query_one("#input-reg-user", Input).value.strip()
        email = self.query_one("#input-reg-email", Input).value.strip()
        mobile = self.query_one("#input-reg-mobile", Input).value.strip()
        pwd = self.query_one("#input-reg-pwd", Input).value.strip()

        if not username or not email or not pwd:
            self.notify("Make sure all inputs are filled.", severity="error")
            return

        try:
            result = await endpoints.register(
                self.app.state.http, username, email, pwd, mobile
            )
        except ApiError as e:
            self.notify(e.message or "Registration failed.", severity="error")
            return
        except ApiUnavailable:
            self.notify("Failed to connect to server.", severity="error")
            return

        if not result or not result.get("token"):
            self.notify("Unexpected response from server.", severity="error")
            return

        await self.app.state.session.login(result)
        self.notify("Registration successful!")
        self.dismiss()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
