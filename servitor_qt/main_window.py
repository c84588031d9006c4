"""
servitor_qt/main_window.py -- Faction and kill team browser window.

Composes the engine for a desktop/tablet view:

    - faction and kill team combo boxes, each with "recent" pills fed by
      the RecentsStore,
    - a "Jump to Section" tree rebuilt from the selected record's outline,
    - a swipe filter over the central widget and the tree viewport moving
      to the previous or next faction in catalog order.

All cross-widget traffic goes through the EventBus.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from servitor.gestures import SwipeConfig
from servitor.ids import canonical_faction_id, canonical_killteam_id
from servitor.models.records import CatalogEntry
from servitor.outline import build_killteam_outline, build_section_outline
from servitor.recency import resolve_recent
from servitor_qt.services.data_source import LocalDataSource
from servitor_qt.services.event_bus import EventBus
from servitor_qt.services.recents_store import RecentsStore
from servitor_qt.widgets.swipe_filter import SwipeGestureFilter

logger = logging.getLogger(__name__)

_SECTION_ID_ROLE = Qt.ItemDataRole.UserRole


class BrowserWindow(QMainWindow):
    """Main window: selectors, recent pills, section outline."""

    def __init__(
        self,
        data_source: LocalDataSource,
        recents: RecentsStore,
        swipe_config: SwipeConfig | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Servitor")
        self.resize(480, 720)

        self._data = data_source
        self._recents = recents
        self._bus = EventBus.instance()
        self._catalog: list[CatalogEntry] = data_source.load_catalog()
        self._killteam_catalog: list[CatalogEntry] = data_source.load_killteam_catalog()
        self._current_id = ""
        self._current_killteam_id = ""

        central = QWidget(self)
        layout = QVBoxLayout(central)

        self._selector = self._make_selector(self._catalog, self._on_selector_activated)
        layout.addWidget(self._selector)
        self._pills_row = QHBoxLayout()
        layout.addLayout(self._pills_row)

        self._killteam_selector = self._make_selector(
            self._killteam_catalog, self._on_killteam_selector_activated,
        )
        self._killteam_selector.setVisible(bool(self._killteam_catalog))
        layout.addWidget(self._killteam_selector)
        self._killteam_pills_row = QHBoxLayout()
        layout.addLayout(self._killteam_pills_row)

        self._outline = QTreeWidget()
        self._outline.setHeaderHidden(True)
        self._outline.itemActivated.connect(self._on_item_activated)
        layout.addWidget(self._outline, 1)

        self._empty_label = QLabel("Select a faction or kill team to see its sections.")
        layout.addWidget(self._empty_label)
        self.setCentralWidget(central)

        # The tree takes the mouse over most of the window, so its viewport
        # is watched alongside the central widget.
        self._swipe = SwipeGestureFilter(central, swipe_config, parent=self)
        self._swipe.watch(self._outline.viewport())
        self._swipe.swiped_left.connect(lambda: self._bus.swipe_navigation.emit(1))
        self._swipe.swiped_right.connect(lambda: self._bus.swipe_navigation.emit(-1))
        self._swipe.attach()

        self._bus.faction_selected.connect(self._on_faction_selected)
        self._bus.killteam_selected.connect(self._on_killteam_selected)
        self._bus.swipe_navigation.connect(self._step_faction)
        self._bus.status_message.connect(self.statusBar().showMessage)
        self._bus.error_occurred.connect(self.statusBar().showMessage)
        self._recents.faction_recents_changed.connect(self._refresh_pills)
        self._recents.killteam_recents_changed.connect(self._refresh_killteam_pills)

        self._refresh_pills(self._recents.recent_factions)
        self._refresh_killteam_pills(self._recents.recent_killteams)

    @staticmethod
    def _make_selector(catalog: list[CatalogEntry], on_activated) -> QComboBox:
        combo = QComboBox()
        for entry in catalog:
            combo.addItem(entry.name or entry.id, entry.id)
        combo.setCurrentIndex(-1)
        combo.activated.connect(on_activated)
        return combo

    @property
    def current_faction_id(self) -> str:
        return self._current_id

    @property
    def current_killteam_id(self) -> str:
        return self._current_killteam_id

    @property
    def swipe_filter(self) -> SwipeGestureFilter:
        return self._swipe

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _on_selector_activated(self, index: int) -> None:
        faction_id = self._selector.itemData(index)
        if faction_id:
            self._bus.faction_selected.emit(faction_id)

    def _on_killteam_selector_activated(self, index: int) -> None:
        killteam_id = self._killteam_selector.itemData(index)
        if killteam_id:
            self._bus.killteam_selected.emit(killteam_id)

    def _step_faction(self, offset: int) -> None:
        if not self._catalog:
            return
        ids = [entry.id for entry in self._catalog]
        try:
            index = ids.index(self._current_id)
        except ValueError:
            index = -1 if offset > 0 else 0
        target = ids[(index + offset) % len(ids)]
        self._bus.faction_selected.emit(target)

    def _on_faction_selected(self, raw_id: str) -> None:
        faction_id = canonical_faction_id(raw_id)
        record = self._data.load_faction(faction_id)
        if record is None:
            self._bus.error_occurred.emit(f"No data found for faction '{faction_id}'.")
            return

        self._current_id = faction_id
        self._current_killteam_id = ""
        index = self._selector.findData(faction_id)
        if index >= 0:
            self._selector.setCurrentIndex(index)
        self._killteam_selector.setCurrentIndex(-1)
        self._populate_outline(build_section_outline(record))
        self._recents.record_faction(faction_id)
        self._refresh_killteam_pills(self._recents.recent_killteams)
        self._bus.status_message.emit(record.name or faction_id)

    def _on_killteam_selected(self, raw_id: str) -> None:
        killteam_id = canonical_killteam_id(raw_id)
        record = self._data.load_killteam(killteam_id)
        if record is None:
            self._bus.error_occurred.emit(f"No data found for kill team '{killteam_id}'.")
            return

        self._current_killteam_id = killteam_id
        self._current_id = ""
        index = self._killteam_selector.findData(killteam_id)
        if index >= 0:
            self._killteam_selector.setCurrentIndex(index)
        self._selector.setCurrentIndex(-1)
        self._populate_outline(build_killteam_outline(record))
        self._recents.record_killteam(killteam_id)
        self._refresh_pills(self._recents.recent_factions)
        self._bus.status_message.emit(record.killteam_name or killteam_id)

    def _on_item_activated(self, item: QTreeWidgetItem, _column: int) -> None:
        section_id = item.data(0, _SECTION_ID_ROLE)
        if section_id:
            self._bus.section_requested.emit(section_id)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _populate_outline(self, outline) -> None:
        self._outline.clear()
        for section in outline:
            top = QTreeWidgetItem([section.label])
            top.setData(0, _SECTION_ID_ROLE, section.id)
            for child in section.children:
                leaf = QTreeWidgetItem([child.label])
                leaf.setData(0, _SECTION_ID_ROLE, child.id)
                top.addChild(leaf)
            self._outline.addTopLevelItem(top)
        self._empty_label.setVisible(not outline)

    def _refresh_pills(self, recent_ids: list) -> None:
        entries = resolve_recent(recent_ids, self._catalog, exclude=self._current_id)
        self._fill_pills(self._pills_row, entries, self._bus.faction_selected)

    def _refresh_killteam_pills(self, recent_ids: list) -> None:
        entries = resolve_recent(recent_ids, self._killteam_catalog, exclude=self._current_killteam_id)
        self._fill_pills(self._killteam_pills_row, entries, self._bus.killteam_selected)

    @staticmethod
    def _fill_pills(row: QHBoxLayout, entries: list[CatalogEntry], signal) -> None:
        while row.count():
            item = row.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        for entry in entries:
            pill = QPushButton(entry.name or entry.id)
            pill.setFlat(True)
            pill.clicked.connect(lambda _checked=False, eid=entry.id: signal.emit(eid))
            row.addWidget(pill)
        row.addStretch(1)

    def closeEvent(self, event) -> None:
        self._swipe.detach()
        super().closeEvent(event)
