"""
servitor_qt/services/event_bus.py -- Application-wide event bus using Qt signals.

Singleton that provides typed signals for cross-widget communication.
Widgets connect to the EventBus rather than directly to each other, so the
selector, the outline tree and the swipe filter stay loosely coupled.

Usage::

    from servitor_qt.services.event_bus import EventBus

    bus = EventBus.instance()
    bus.faction_selected.connect(my_handler)
    bus.faction_selected.emit("kommandos")
"""

from __future__ import annotations

import threading

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """Application-wide signal bus.

    Signals
    -------
    faction_selected(str)
        Fired when the user navigates to a faction. Payload is the raw id.
    killteam_selected(str)
        Fired when the user navigates to a kill team. Payload is the raw id.
    section_requested(str)
        Fired when an outline entry is activated. Payload is the section id.
    swipe_navigation(int)
        Fired by a swipe: -1 for the previous page, +1 for the next.
    error_occurred(str)
        Fired when an error needs to be shown to the user.
    status_message(str)
        Fired to update the status bar message.
    """

    faction_selected = Signal(str)
    killteam_selected = Signal(str)
    section_requested = Signal(str)
    swipe_navigation = Signal(int)

    error_occurred = Signal(str)
    status_message = Signal(str)

    _instance: EventBus | None = None
    _lock = threading.Lock()

    @classmethod
    def instance(cls) -> EventBus:
        """Return the singleton EventBus instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.deleteLater()
            cls._instance = None
