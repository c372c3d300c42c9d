"""
Detail-Panel State Machine

The bottom panel listing a selected day's events.

    HIDDEN   --select date-------------------------> VISIBLE
    VISIBLE  --drag start (downward only)----------> DRAGGING(0)
    DRAGGING --drag move, dy > 0-------------------> DRAGGING(dy)
    DRAGGING --release, dy > 100 or vy > 0.5-------> HIDDEN
    DRAGGING --release, otherwise------------------> VISIBLE (snap back)
    VISIBLE | DRAGGING --close / same date again---> HIDDEN

The panel owns no event data. It only knows which date is selected;
the caller fetches that date's events from the store.
"""

from enum import Enum
from typing import Optional


DISMISS_DISTANCE = 100.0
DISMISS_VELOCITY = 0.5
DRAG_ACTIVATION_DISTANCE = 5.0


class PanelState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    DRAGGING = "dragging"


def should_dismiss(
    dy: float,
    vy: float,
    distance_threshold: float = DISMISS_DISTANCE,
    velocity_threshold: float = DISMISS_VELOCITY,
) -> bool:
    """A release closes the panel if it went far enough OR fast enough."""
    return dy > distance_threshold or vy > velocity_threshold


class DetailPanel:
    """Presentation state of the detail panel."""

    def __init__(
        self,
        dismiss_distance: float = DISMISS_DISTANCE,
        dismiss_velocity: float = DISMISS_VELOCITY,
        drag_activation_distance: float = DRAG_ACTIVATION_DISTANCE,
    ):
        self._dismiss_distance = dismiss_distance
        self._dismiss_velocity = dismiss_velocity
        self._drag_activation_distance = drag_activation_distance

        self._state = PanelState.HIDDEN
        self._offset = 0.0
        self._selected_date: Optional[str] = None

    @property
    def state(self) -> PanelState:
        return self._state

    @property
    def offset(self) -> float:
        """How far the panel is dragged below its open position."""
        return self._offset

    @property
    def selected_date(self) -> Optional[str]:
        return self._selected_date

    @property
    def is_shown(self) -> bool:
        return self._state is not PanelState.HIDDEN

    def select_date(self, date: str) -> PanelState:
        """
        Show a date's panel.

        Selecting the date that is already shown closes the panel;
        selecting another date switches to it.
        """
        if self.is_shown and date == self._selected_date:
            return self.close()

        self._selected_date = date
        self._state = PanelState.VISIBLE
        self._offset = 0.0
        return self._state

    def begin_drag(self, dy: float) -> bool:
        """
        Start dragging if the gesture moves down past the activation slop.

        Upward and sideways gestures never start a drag.
        """
        if self._state is not PanelState.VISIBLE:
            return False
        if dy <= self._drag_activation_distance:
            return False

        self._state = PanelState.DRAGGING
        self._offset = 0.0
        return True

    def drag_move(self, dy: float) -> None:
        # The panel never rises above its open position
        if self._state is PanelState.DRAGGING and dy > 0:
            self._offset = dy

    def release(self, dy: float, vy: float) -> PanelState:
        """Finish a drag: close, or snap back to open."""
        if self._state is not PanelState.DRAGGING:
            return self._state

        if should_dismiss(dy, vy, self._dismiss_distance, self._dismiss_velocity):
            return self.close()

        self._state = PanelState.VISIBLE
        self._offset = 0.0
        return self._state

    def close(self) -> PanelState:
        self._state = PanelState.HIDDEN
        self._offset = 0.0
        self._selected_date = None
        return self._state
