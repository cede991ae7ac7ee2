from pathlib import Path

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from api.client import ApiError, ApiUnavailable
from auth.profile import ProfileRejected, save_profile
from utils.logger import get_logger

_logger = get_logger(__name__)


class ProfileModal(ModalScreen[bool]):
    """
    Edit form for the signed-in user. Dismisses with True once saved.
    """

    def compose(self) -> ComposeResult:
        user = self.app.state.session.select_user()
        with Vertical():
            yield Label("Edit Profile", id="label-profile")
            yield Label("Username")
            yield Input(value=user.username if user else "", id="input-username")
            yield Label("Email")
            yield Input(value=user.email if user else "", id="input-email")
            yield Label("Mobile")
            yield Input(value=user.mobile if user else "", id="input-mobile")
            yield Label("Avatar image (optional path)")
            yield Input(placeholder="~/Pictures/me.png", id="input-image")
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self):
        self.query_one("#input-username").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True)
    async def handle_save(self):
        image = None
        image_name = "avatar.png"
        image_path = self.query_one("#input-image", Input).value.strip()
        if image_path:
            path = Path(image_path).expanduser()
            try:
                image = path.read_bytes()
            except OSError as e:
                self.notify(f"Cannot read image: {e.strerror}", severity="error")
                return
            image_name = path.name

        state = self.app.state
        try:
            await save_profile(
                state.http,
                state.session,
                self.query_one("#input-username", Input).value,
                self.query_one("#input-email", Input).value,
                self.query_one("#input-mobile", Input).value,
                image=image,
                image_name=image_name,
            )
        except ProfileRejected as e:
            self.notify(str(e), severity="error")
            return
        except ApiError as e:
            _logger.error(f"Profile update error: {e}")
            self.notify("Failed to update profile", severity="error")
            return
        except ApiUnavailable:
            self.notify("Failed to connect to server", severity="error")
            return

        self.notify("Profile updated successfully!")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self):
        self.dismiss(False)
