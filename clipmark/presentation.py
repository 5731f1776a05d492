"""mpv key bindings and on-screen messages

Responsibilities:
- Bind the clip mode keys on a python-mpv player
- Feed key presses and the playback position into the session
- Show the status OSD and export results
- Marshal export completion back onto mpv's event thread

The player is any object with python-mpv's ``MPV`` interface. Key
handlers and message handlers run on mpv's event thread, which is the
only thread that touches the session.
"""

import itertools
import logging
import threading
from concurrent.futures import Future
from typing import Dict, Optional, Tuple

from .config import Settings
from .coordinator import ExportCoordinator
from .outcomes import (
    ExportOutcome, ExportSuccess, LaunchFailed,
    ProcessFailed, ValidationFailed,
)
from .session import Direction, DisplayAction, SessionState

logger = logging.getLogger(__name__)

EXPORT_DONE_MESSAGE = "clipmark-export-done"
PERSISTENT_MS = 99999 * 1000  # Stays up until replaced
KEY_SYMBOLS = {"LEFT": "←", "RIGHT": "→", "UP": "↑", "DOWN": "↓"}


def _ms(seconds: float) -> int:
    return int(seconds * 1000)


def describe_outcome(outcome: ExportOutcome, settings: Settings) -> Tuple[str, float]:
    """User-facing message and display time in seconds for an export outcome."""
    if isinstance(outcome, ExportSuccess):
        return f"Export finished:\n{outcome.output_path}", 5
    if isinstance(outcome, ValidationFailed):
        return outcome.reason, 3
    if isinstance(outcome, LaunchFailed):
        return (
            "Export failed: ffmpeg could not be started.\n"
            "Install ffmpeg or set CLIPMARK_FFMPEG to its path.",
            8,
        )
    if isinstance(outcome, ProcessFailed):
        if settings.export.diagnostic_log is not None:
            return f"Export failed (see {settings.export.diagnostic_log})", 5
        return "Export failed (see log)", 5
    return "Export failed", 5


class MpvPresenter:
    """Connects a SessionState and an ExportCoordinator to an mpv player."""

    def __init__(
        self,
        player,
        state: SessionState,
        coordinator: ExportCoordinator,
        settings: Settings,
    ):
        self.player = player
        self.state = state
        self.coordinator = coordinator
        self.settings = settings
        self._pending: Dict[str, ExportOutcome] = {}
        self._pending_lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._mode_keys_bound = False

        # Each mode action has a matching on_<action> handler
        self._mode_handlers = {
            key: getattr(self, f"on_{action}")
            for action, key in settings.keys.mode_keys().items()
        }

    # Binding management

    @staticmethod
    def _key_handler(action):
        def handler(state="p-", name=None, char=None):
            # d = key down, p = press without separate up event
            if state[0] in ("d", "p"):
                action()
        return handler

    def attach(self) -> None:
        """Bind the toggle key and the export completion message."""
        self.player.register_key_binding(self.settings.keys.toggle, self._key_handler(self.on_toggle))
        self.player.register_message_handler(EXPORT_DONE_MESSAGE, self._handle_export_done)
        keys = self.settings.keys
        self._show(
            f"Clip script loaded: {keys.toggle} toggle. {keys.set_start}=start "
            f"{keys.set_end}=end {self._cycle_hint()}=encoder {keys.export}=export",
            4,
        )

    def detach(self) -> None:
        self._unbind_mode_keys()
        self.player.unregister_key_binding(self.settings.keys.toggle)

    def _bind_mode_keys(self) -> None:
        if self._mode_keys_bound:
            return
        for key, action in self._mode_handlers.items():
            # force mode so the keys override mpv's defaults (seeking on LEFT/RIGHT)
            self.player.register_key_binding(key, self._key_handler(action), mode="force")
        self._mode_keys_bound = True

    def _unbind_mode_keys(self) -> None:
        if not self._mode_keys_bound:
            return
        for key in self._mode_handlers:
            self.player.unregister_key_binding(key)
        self._mode_keys_bound = False

    # Player access

    def _now(self) -> float:
        position = self.player.time_pos
        return float(position) if position is not None else 0.0

    def _current_path(self) -> Optional[str]:
        return self.player.path

    def _show(self, text: str, seconds: float) -> None:
        self.player.show_text(text, _ms(seconds))

    def _notify(self, text: str, seconds: float) -> None:
        if self.state.active:
            # Keep the persistent status visible under the message
            self.player.show_text(f"{text}\n\n{self.status_text()}", PERSISTENT_MS)
        else:
            self._show(text, seconds)

    def _cycle_hint(self) -> str:
        keys = self.settings.keys
        previous = KEY_SYMBOLS.get(keys.previous_profile, keys.previous_profile)
        following = KEY_SYMBOLS.get(keys.next_profile, keys.next_profile)
        return f"{previous}/{following}"

    def status_text(self) -> str:
        keys = self.settings.keys
        return (
            f"{self.state.status_text()}\n"
            f"{self._cycle_hint()} = encoder  {keys.export} = export\n"
            f"{keys.toggle} to toggle off"
        )

    def _apply(self, action: DisplayAction) -> None:
        if action is DisplayAction.REFRESH:
            self.player.show_text(self.status_text(), PERSISTENT_MS)
        elif action is DisplayAction.CLEAR:
            self.player.show_text("", 1)

    # Key handlers

    def on_toggle(self) -> None:
        action = self.state.toggle(self._current_path())
        if self.state.active:
            self._bind_mode_keys()
        else:
            self._unbind_mode_keys()
        self._apply(action)

    def on_set_start(self) -> None:
        self._apply(self.state.set_start(self._now()))

    def on_set_end(self) -> None:
        self._apply(self.state.set_end(self._now()))

    def on_previous_profile(self) -> None:
        self._apply(self.state.cycle_profile(Direction.PREVIOUS))

    def on_next_profile(self) -> None:
        self._apply(self.state.cycle_profile(Direction.NEXT))

    def on_export(self) -> None:
        future = self.coordinator.export(self.state, self._current_path)
        if future is None:
            return
        if future.done():
            self._show_outcome(self._outcome_of(future))
            return
        self._notify("Exporting clip...", 4)
        future.add_done_callback(self._post_outcome)

    # Completion

    @staticmethod
    def _outcome_of(future: Future) -> ExportOutcome:
        error = future.exception()
        if error is not None:
            logger.error("Export worker crashed: %s", error, exc_info=error)
            return LaunchFailed(str(error))
        return future.result()

    def _post_outcome(self, future: Future) -> None:
        """Runs on the export worker; hands the outcome to the event thread."""
        outcome = self._outcome_of(future)
        with self._pending_lock:
            token = str(next(self._tokens))
            self._pending[token] = outcome
        try:
            self.player.command("script-message", EXPORT_DONE_MESSAGE, token)
        except SystemError as e:
            # mpv.ShutdownError: the player closed while the export ran
            logger.debug("Player gone before export result could be shown: %s", e)

    def _handle_export_done(self, token: str, *args) -> None:
        with self._pending_lock:
            outcome = self._pending.pop(token, None)
        if outcome is None:
            logger.debug("No pending export for token %s", token)
            return
        self._show_outcome(outcome)

    def _show_outcome(self, outcome: ExportOutcome) -> None:
        self._notify(*describe_outcome(outcome, self.settings))
