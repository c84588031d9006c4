"""
servitor_qt/widgets/swipe_filter.py -- Swipe detection for any QWidget.

Installs itself as an event filter on one or more widgets and feeds their
touch (and optionally mouse) events into a single
:class:`~servitor.gestures.SwipeClassifier`.  The filter only observes:
events are never consumed, so scrolling and taps keep working.

Positions are read in global coordinates, so a gesture that starts on a
child widget (e.g. a list viewport) and propagates to its parent is one
gesture, and the duplicate delivery is harmless: the classifier resets
after the first release.

Listening is a scoped resource.  ``attach()`` installs the filter once per
enabled period; ``detach()`` removes it and drops any gesture in progress.
Detach happens on ``set_enabled(False)``, when a widget is destroyed, and
on leaving a ``with`` block, so repeated show/hide cycles never stack
filters on the same widget.

Usage::

    swipe = SwipeGestureFilter(page, SwipeConfig(min_swipe_distance=80))
    swipe.watch(page_list.viewport())
    swipe.swiped_left.connect(go_next)
    swipe.swiped_right.connect(go_previous)
    swipe.attach()
"""

from __future__ import annotations

import logging
from functools import partial

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtWidgets import QWidget

from servitor.gestures import SwipeClassifier, SwipeConfig

logger = logging.getLogger(__name__)

_DOWN_EVENTS = {QEvent.Type.TouchBegin}
_MOVE_EVENTS = {QEvent.Type.TouchUpdate}
_UP_EVENTS = {QEvent.Type.TouchEnd}
_CANCEL_EVENTS = {QEvent.Type.TouchCancel}

_MOUSE_DOWN = QEvent.Type.MouseButtonPress
_MOUSE_MOVE = QEvent.Type.MouseMove
_MOUSE_UP = QEvent.Type.MouseButtonRelease
_MOUSE_TYPES = {_MOUSE_DOWN, _MOUSE_MOVE, _MOUSE_UP}


def _event_position(event) -> tuple[float, float] | None:
    """Return the first touch point (or the mouse position) in global coordinates."""
    if event.type() in _MOUSE_TYPES:
        pos = event.globalPosition()
        return pos.x(), pos.y()
    points = event.points()
    if not points:
        return None
    pos = points[0].globalPosition()
    return pos.x(), pos.y()


def _widget_name(widget: QWidget) -> str:
    return widget.objectName() or type(widget).__name__


class SwipeGestureFilter(QObject):
    """Emit :attr:`swiped_left` / :attr:`swiped_right` for swipes on *widget*.

    Parameters
    ----------
    widget : QWidget
        The element to observe.  More can be added with :meth:`watch`.
    config : SwipeConfig, optional
        Per-element thresholds.  ``config.enabled`` sets the initial state;
        afterwards :meth:`set_enabled` owns it.
    track_mouse : bool
        Also classify mouse drags.  Needed on platforms that deliver touch
        as synthesized mouse events, and for desktop use.
    parent : QObject, optional
        Owner of the filter.  Not an observed widget: the filter must
        outlive them to see their ``destroyed`` signal.
    """

    swiped_left = Signal()
    swiped_right = Signal()

    def __init__(
        self,
        widget: QWidget,
        config: SwipeConfig | None = None,
        track_mouse: bool = True,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._config = config or SwipeConfig()
        self._track_mouse = track_mouse
        self._widgets: list[QWidget] = []
        self._attached = False
        self._enabled = self._config.enabled
        # Listening is switched on and off here, not inside the classifier.
        self._classifier = SwipeClassifier(
            self._config.model_copy(update={"enabled": True}),
            on_swipe_left=self.swiped_left.emit,
            on_swipe_right=self.swiped_right.emit,
        )
        self.watch(widget)

    # ------------------------------------------------------------------
    # Scoped attachment
    # ------------------------------------------------------------------

    @property
    def is_attached(self) -> bool:
        return self._attached

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def classifier(self) -> SwipeClassifier:
        return self._classifier

    @property
    def widgets(self) -> tuple[QWidget, ...]:
        return tuple(self._widgets)

    def watch(self, widget: QWidget) -> None:
        """Add *widget* to the observed set; installs at once if attached."""
        if any(existing is widget for existing in self._widgets):
            return
        self._widgets.append(widget)
        widget.destroyed.connect(partial(self._on_widget_destroyed, widget))
        if self._attached:
            self._install(widget)

    def attach(self) -> bool:
        """Start listening.  Returns False when disabled or every widget is gone."""
        if self._attached or not self._enabled or not self._widgets:
            return self._attached
        self._classifier.reset()
        for widget in self._widgets:
            self._install(widget)
        self._attached = True
        return True

    def detach(self) -> None:
        """Stop listening and discard any gesture in progress."""
        if self._attached:
            for widget in self._widgets:
                try:
                    widget.removeEventFilter(self)
                except RuntimeError:
                    logger.debug("Swipe filter target already deleted")
        self._attached = False
        self._classifier.reset()

    def set_enabled(self, enabled: bool) -> None:
        """Detach on disable; re-attach from a clean Idle state on enable."""
        enabled = bool(enabled)
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self.attach()
        else:
            self.detach()

    def _install(self, widget: QWidget) -> None:
        widget.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        widget.installEventFilter(self)
        logger.debug("Swipe filter attached to %s", _widget_name(widget))

    def _on_widget_destroyed(self, widget: QWidget, *_args) -> None:
        # The C++ widget is already gone; removeEventFilter would fail.
        self._widgets = [w for w in self._widgets if w is not widget]
        self._classifier.reset()
        if not self._widgets:
            self._attached = False

    def __enter__(self) -> SwipeGestureFilter:
        self.attach()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    def eventFilter(self, obj, event) -> bool:
        if not self._attached or not any(obj is w for w in self._widgets):
            return super().eventFilter(obj, event)

        etype = event.type()
        if etype in _DOWN_EVENTS or (self._track_mouse and etype == _MOUSE_DOWN):
            pos = _event_position(event)
            if pos is not None:
                self._classifier.pointer_down(pos[0], pos[1], event.timestamp())
        elif etype in _MOVE_EVENTS or (self._track_mouse and etype == _MOUSE_MOVE):
            pos = _event_position(event)
            if pos is not None:
                self._classifier.pointer_move(pos[0], pos[1], event.timestamp())
        elif etype in _UP_EVENTS or (self._track_mouse and etype == _MOUSE_UP):
            self._classifier.pointer_up()
        elif etype in _CANCEL_EVENTS:
            self._classifier.cancel()

        return super().eventFilter(obj, event)
