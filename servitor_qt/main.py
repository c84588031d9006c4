"""
servitor_qt/main.py -- Application entry point.

Opens the faction browser, or with ``--headless`` prints the section
outline of one faction or kill team and records it as a recent selection.

Usage::

    python -m servitor_qt.main --data-dir ./data
    python -m servitor_qt.main --data-dir ./data --headless --faction kommandos
    python -m servitor_qt.main --data-dir ./data --headless --killteam IMP-AOD
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback

from servitor.outline import build_killteam_outline, build_section_outline
from servitor.storage import JsonFileStorage
from servitor_qt.paths import get_recents_path, get_reference_data_dir, is_frozen
from servitor_qt.services.data_source import LocalDataSource


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _global_exception_hook(exc_type, exc_value, exc_tb):
    """Last-resort handler for uncaught exceptions."""
    logger = logging.getLogger("servitor_qt")
    logger.critical(
        "Uncaught exception: %s",
        "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="servitor", description="Kill team rules browser")
    parser.add_argument("--data-dir", help="folder containing factions.json, killteams.json and their record folders")
    parser.add_argument("--faction", help="faction id to open")
    parser.add_argument("--killteam", help="kill team id to open")
    parser.add_argument("--headless", action="store_true", help="print the outline instead of opening a window")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _print_outline(title: str, outline, recent_ids: list[str], out) -> None:
    print(title, file=out)
    for section in outline:
        print(f"  {section.label}  #{section.id}", file=out)
        for child in section.children:
            print(f"    {child.label}  #{child.id}", file=out)
    print(f"Recent: {', '.join(recent_ids)}", file=out)


def run_headless(
    data: LocalDataSource,
    recents,
    faction_id: str | None,
    out=None,
    killteam_id: str | None = None,
) -> int:
    """Print one outline and record the visit.  Returns a process exit code."""
    out = out or sys.stdout
    if killteam_id:
        killteam = data.load_killteam(killteam_id)
        if killteam is None:
            print(f"No data found for kill team '{killteam_id}'", file=sys.stderr)
            return 1
        recent_ids = recents.record_killteam(killteam.killteam_id or killteam_id)
        _print_outline(killteam.killteam_name or killteam.killteam_id, build_killteam_outline(killteam), recent_ids, out)
        return 0

    if not faction_id:
        print("--faction or --killteam is required with --headless", file=sys.stderr)
        return 2

    record = data.load_faction(faction_id)
    if record is None:
        print(f"No data found for faction '{faction_id}'", file=sys.stderr)
        return 1

    recent_ids = recents.record_faction(record.id or faction_id)
    _print_outline(record.name or record.id, build_section_outline(record), recent_ids, out)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Launch the Servitor browser."""
    args = _parse_args(argv)
    _setup_logging(args.verbose)
    logger = logging.getLogger("servitor_qt")
    sys.excepthook = _global_exception_hook

    data_dir = get_reference_data_dir(args.data_dir)
    logger.info("Reference data: %s (frozen=%s)", data_dir, is_frozen())
    data = LocalDataSource(data_dir)

    from servitor_qt.services.recents_store import RecentsStore
    recents = RecentsStore.instance(JsonFileStorage(get_recents_path()))

    if args.headless:
        return run_headless(data, recents, args.faction, killteam_id=args.killteam)

    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication(sys.argv)

    from servitor_qt.main_window import BrowserWindow
    from servitor_qt.services.event_bus import EventBus
    window = BrowserWindow(data, recents)
    window.show()
    if args.faction:
        EventBus.instance().faction_selected.emit(args.faction)
    if args.killteam:
        EventBus.instance().killteam_selected.emit(args.killteam)
    logger.info("Main window displayed")

    exit_code = app.exec()
    logger.info("Shutting down...")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
