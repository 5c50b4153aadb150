# src/doseviz/app.py
import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from doseengine.storage import DoseListRepository, SQLiteStore
from .ui.main_window import MainWindow

DEFAULT_DB = Path.home() / ".local" / "share" / "doseviz" / "doses.sqlite3"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Dose concentration tracker")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB, help="SQLite file holding the dose list")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args, qt_args = parser.parse_known_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    app = QApplication([sys.argv[0], *qt_args])
    window = MainWindow(DoseListRepository(SQLiteStore(args.db)))
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
