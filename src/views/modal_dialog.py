from typing import Literal

from typing_extensions import override

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from utils.messages import QuitRequestedMessage

Tone = Literal["positive", "warning", "error"]

# tone -> (confirm variant, cancel variant)
_VARIANTS = {
    "positive": ("success", "default"),
    "warning": ("warning", "default"),
    "error": ("error", "primary"),
}


class DialogModal(ModalScreen[bool]):
    """
    Confirm/cancel prompt. Dismisses with True when confirmed.
    """

    def __init__(
        self,
        caption: str,
        primary_text: str = "Yes",
        secondary_text: str = "No",
        tone: Tone = "warning",
    ):
        super().__init__()
        self.caption = caption
        self.primary_text = primary_text
        self.secondary_text = secondary_text
        self.tone = tone

    def compose(self) -> ComposeResult:
        confirm, cancel = _VARIANTS[self.tone]
        with Container(id="div-dialog"):
            yield Label(self.caption, id="caption")
            with Horizontal(id="dialog"):
                yield Button(self.secondary_text, variant=cancel, id="btn-secondary")
                yield Button(self.primary_text, variant=confirm, id="btn-primary")

    def on_mount(self):
        # destructive prompts start on the safe answer
        button = "#btn-secondary" if self.tone == "error" else "#btn-primary"
        self.query_one(button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-primary")


class QuitDialogModal(DialogModal):
    def __init__(self):
        super().__init__("Are you sure you want to quit?", tone="error")

    @override
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-primary":
            self.app.post_message(QuitRequestedMessage())
        super().on_button_pressed(event)
