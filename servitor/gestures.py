"""
servitor/gestures.py -- Horizontal swipe classification for touch input.

A :class:`SwipeClassifier` consumes the three pointer events of a single
gesture (down, move, up) and decides at pointer-up whether the gesture was
a deliberate horizontal swipe.  Only the first and the latest sample are
kept; intermediate moves are overwritten.

A gesture counts as a swipe when all of these hold:

    - vertical travel is at most ``max_vertical_swipe`` pixels,
    - horizontal travel is at least ``min_swipe_distance`` pixels,
    - horizontal speed is at least ``min_velocity`` px/ms.

Anything else (a scroll, a tap, a slow drag, an up without a move) ends
silently.  The classifier has no timers and no toolkit dependency; the Qt
event filter in ``servitor_qt.widgets.swipe_filter`` feeds it.

Usage::

    from servitor.gestures import SwipeClassifier, SwipeConfig

    clf = SwipeClassifier(SwipeConfig(min_swipe_distance=80), on_swipe_left=next_page)
    clf.pointer_down(200, 300, 0)
    clf.pointer_move(100, 305, 150)
    clf.pointer_up()                # -> SwipeDirection.LEFT, next_page() called
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class SwipeDirection(Enum):
    LEFT = "left"
    RIGHT = "right"


class GestureState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"


@dataclass(frozen=True)
class GestureSample:
    """One pointer position in pixels with its timestamp in milliseconds."""

    x: float
    y: float
    timestamp_ms: float


class SwipeConfig(BaseModel):
    """Per-element swipe thresholds.  Defaults suit a phone-sized view."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_swipe_distance: float = Field(default=50.0, ge=0)
    max_vertical_swipe: float = Field(default=100.0, ge=0)
    min_velocity: float = Field(default=0.1, ge=0)
    enabled: bool = True


def classify(
    start: GestureSample,
    end: Optional[GestureSample],
    config: Optional[SwipeConfig] = None,
) -> Optional[SwipeDirection]:
    """Classify a finished gesture from its first and last samples.

    Returns ``None`` when the gesture is not a swipe.
    """
    if end is None:
        return None
    config = config or SwipeConfig()

    dx = end.x - start.x
    dy = end.y - start.y
    dt = end.timestamp_ms - start.timestamp_ms

    if dt <= 0:
        return None
    if abs(dy) > config.max_vertical_swipe:
        return None
    if abs(dx) < config.min_swipe_distance:
        return None
    if abs(dx) / dt < config.min_velocity:
        return None

    return SwipeDirection.RIGHT if dx > 0 else SwipeDirection.LEFT


class SwipeClassifier:
    """Idle/Tracking state machine emitting at most one swipe per gesture.

    Handlers are zero-argument callables.  Setting :attr:`enabled` to
    ``False`` drops any gesture in progress and ignores further events
    until re-enabled.
    """

    def __init__(
        self,
        config: Optional[SwipeConfig] = None,
        on_swipe_left: Optional[Callable[[], None]] = None,
        on_swipe_right: Optional[Callable[[], None]] = None,
    ):
        self.config = config or SwipeConfig()
        self.on_swipe_left = on_swipe_left
        self.on_swipe_right = on_swipe_right
        self._enabled = self.config.enabled
        self._start: Optional[GestureSample] = None
        self._latest: Optional[GestureSample] = None

    @property
    def state(self) -> GestureState:
        return GestureState.TRACKING if self._start is not None else GestureState.IDLE

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        value = bool(value)
        if value != self._enabled:
            self.reset()
        self._enabled = value

    def pointer_down(self, x: float, y: float, timestamp_ms: float) -> None:
        if not self._enabled:
            return
        self._start = GestureSample(x, y, timestamp_ms)
        self._latest = None

    def pointer_move(self, x: float, y: float, timestamp_ms: float) -> None:
        if not self._enabled or self._start is None:
            return
        self._latest = GestureSample(x, y, timestamp_ms)

    def pointer_up(self) -> Optional[SwipeDirection]:
        """End the gesture, call the matching handler, and return the result."""
        if not self._enabled or self._start is None:
            return None

        start, latest = self._start, self._latest
        self.reset()

        direction = classify(start, latest, self.config)
        if direction is None:
            return None

        logger.debug("Swipe %s classified", direction.value)
        handler = self.on_swipe_right if direction is SwipeDirection.RIGHT else self.on_swipe_left
        if handler is not None:
            handler()
        return direction

    def cancel(self) -> None:
        """Abandon the gesture in progress (e.g. the host cancelled the touch)."""
        self.reset()

    def reset(self) -> None:
        self._start = None
        self._latest = None
