"""Navigation state machine driven by the page address (URL fragment)."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from .animator import AnimationSample, PathAnimator
from .config import AppConfig, Destination
from .scheduler import TickSource
from .slug import resolve, to_slug

logger = logging.getLogger(__name__)

INVALID_DESTINATION_MESSAGE = "Invalid destination in URL. Please select from the list."
SELECT_DESTINATION_MESSAGE = "Please select a destination."
UNKNOWN_DESTINATION_MESSAGE = "Selected destination not found in routes."
NO_PHOTO_MESSAGE = "No specific photo available for this building."
DESTINATION_NOT_FOUND_MESSAGE = "Destination not found."

Viewport = Callable[[], Tuple[float, float]]


class Mode(enum.Enum):
    HOME = "home"
    NAVIGATING = "navigate"


@dataclass(frozen=True)
class PhotoModal:
    open: bool = False
    url: str = ""
    is_video: bool = False


@dataclass(frozen=True)
class NavigationState:
    mode: Mode = Mode.HOME
    destination: Optional[Destination] = None
    steps: Tuple[str, ...] = ()
    message: str = ""
    marker_visible: bool = False
    modal: PhotoModal = field(default_factory=PhotoModal)


def _strip_hash(fragment: str) -> str:
    return fragment[1:] if fragment.startswith("#") else fragment


class Location:
    """The addressable part of the page: a fragment that observers watch.

    Like ``hashchange``, listeners only hear about assignments that change the
    fragment.
    """

    def __init__(self, fragment: str = "") -> None:
        self._fragment = _strip_hash(fragment)
        self._listeners: List[Callable[[str], None]] = []

    @property
    def fragment(self) -> str:
        return self._fragment

    def assign(self, fragment: str) -> None:
        fragment = _strip_hash(fragment)
        if fragment == self._fragment:
            return
        self._fragment = fragment
        for listener in list(self._listeners):
            listener(fragment)

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[str], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


class Navigator:
    """Owns the navigation state and the single active animation run.

    State only changes in reaction to the location fragment. Selecting a
    destination or going home writes a new fragment and lets the resulting
    change event drive the transition.
    """

    def __init__(
        self,
        config: AppConfig,
        tick_source: TickSource,
        location: Optional[Location] = None,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self.config = config
        self.location = location if location is not None else Location()
        self.animator = PathAnimator(tick_source, config.duration_ms)
        self._viewport = viewport
        self._state = NavigationState()
        self._marker: Optional[AnimationSample] = None
        self._state_listeners: List[Callable[[NavigationState], None]] = []
        self._sample_listeners: List[Callable[[AnimationSample], None]] = []
        self._started = False

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def marker(self) -> Optional[AnimationSample]:
        """Latest marker sample of the active run, if the marker is shown."""

        return self._marker if self._state.marker_visible else None

    def subscribe(self, listener: Callable[[NavigationState], None]) -> None:
        self._state_listeners.append(listener)

    def subscribe_samples(self, listener: Callable[[AnimationSample], None]) -> None:
        self._sample_listeners.append(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> NavigationState:
        """Evaluate the current fragment and begin listening for changes."""

        if not self._started:
            self.location.add_listener(self._on_address_change)
            self._started = True
        self._on_address_change(self.location.fragment)
        return self._state

    def stop(self) -> None:
        """Stop listening and cancel any animation, as when the view unmounts."""

        if self._started:
            self.location.remove_listener(self._on_address_change)
            self._started = False
        self.animator.cancel()
        self._marker = None

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def select_destination(self, name: str) -> None:
        if not name:
            self._publish(replace(self._state, message=SELECT_DESTINATION_MESSAGE))
            return
        destination = self.config.find(name)
        if destination is None:
            self._publish(replace(self._state, message=UNKNOWN_DESTINATION_MESSAGE))
            return
        self._assign(to_slug(destination.name))

    def go_home(self) -> None:
        self._assign("")

    def open_photo(self) -> None:
        destination = self._state.destination
        if self._state.mode is not Mode.NAVIGATING or destination is None:
            self._publish(replace(self._state, message=DESTINATION_NOT_FOUND_MESSAGE))
            return
        if not destination.photo_url:
            self._publish(replace(self._state, message=NO_PHOTO_MESSAGE))
            return
        modal = PhotoModal(open=True, url=destination.photo_url, is_video=destination.is_photo_video)
        self._publish(replace(self._state, modal=modal))

    def close_photo(self) -> None:
        self._publish(replace(self._state, modal=PhotoModal()))

    def resize(self) -> None:
        """Re-sample the viewport, e.g. after the window was resized."""

        destination = self._state.destination
        visible = destination is not None and self._marker_allowed(destination)
        if visible != self._state.marker_visible:
            self._publish(replace(self._state, marker_visible=visible))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _assign(self, token: str) -> None:
        # An unchanged fragment fires no change event; the action still clears the message.
        if self.location.fragment == token:
            if self._state.message:
                self._publish(replace(self._state, message=""))
            return
        self.location.assign(token)

    def _on_address_change(self, token: str) -> None:
        if not token:
            self._go_home_state("")
            return

        destination = resolve(token, self.config.destinations)
        if destination is None:
            logger.debug("Unknown destination token %r", token)
            self._go_home_state(INVALID_DESTINATION_MESSAGE)
            return

        logger.debug(
            "Navigating to %s, path exists: %s", destination.name, bool(destination.waypoints)
        )
        self.animator.cancel()
        self._marker = None
        self._publish(
            NavigationState(
                mode=Mode.NAVIGATING,
                destination=destination,
                steps=tuple(destination.steps),
                message="",
                marker_visible=self._marker_allowed(destination),
            )
        )
        self.animator.start(destination.waypoints, self._on_sample)

    def _go_home_state(self, message: str) -> None:
        self.animator.cancel()
        self._marker = None
        self._publish(NavigationState(mode=Mode.HOME, message=message))

    def _marker_allowed(self, destination: Destination) -> bool:
        if not destination.waypoints:
            return False
        if self._viewport is None:
            return True
        width, height = self._viewport()
        return width > 0 and height > 0

    def _on_sample(self, sample: AnimationSample) -> None:
        self._marker = sample
        for listener in list(self._sample_listeners):
            listener(sample)

    def _publish(self, state: NavigationState) -> None:
        self._state = state
        for listener in list(self._state_listeners):
            listener(state)
