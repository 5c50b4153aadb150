# src/doseviz/ui/controls.py
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from doseengine.const import MAX_DOSE_ENTRIES
from doseengine.dosing import add_entry, blank_entry, remove_entry, update_entry
from doseengine.storage import DoseListRepository
from doseengine.types import DoseEntry


class DoseEntryPanel(QFrame):
    """Editable list of (date, mg) rows. Emits the full row list after every edit."""

    entriesChanged = Signal(list)

    def __init__(self, repository: DoseListRepository | None = None, max_entries: int = MAX_DOSE_ENTRIES):
        super().__init__()
        self.setFrameShape(QFrame.StyledPanel)
        self.repository = repository
        self.max_entries = max_entries
        self.entries: list[DoseEntry] = repository.load() if repository else [blank_entry()]

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Enter Doses"))

        self.rows_box = QWidget()
        self.rows_layout = QVBoxLayout(self.rows_box)
        self.rows_layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.rows_box)

        self.add_button = QPushButton("Add Dose")
        self.add_button.clicked.connect(self._on_add)
        layout.addWidget(self.add_button)
        layout.addStretch(1)

        self._rebuild_rows()

    def _rebuild_rows(self):
        while self.rows_layout.count():
            item = self.rows_layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        for index, entry in enumerate(self.entries):
            row = QWidget()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(0, 0, 0, 0)
            values = entry.as_dict()

            date_edit = QLineEdit(values["date"]); date_edit.setPlaceholderText("YYYY-MM-DD")
            date_edit.textEdited.connect(lambda text, i=index: self._on_edit(i, "date", text))
            row_layout.addWidget(date_edit, 1)

            amount_edit = QLineEdit(values["amount"]); amount_edit.setPlaceholderText("Dose (mg)")
            amount_edit.setMaximumWidth(120)
            amount_edit.textEdited.connect(lambda text, i=index: self._on_edit(i, "amount", text))
            row_layout.addWidget(amount_edit)

            remove = QPushButton("Remove")
            remove.clicked.connect(lambda _checked=False, i=index: self._on_remove(i))
            row_layout.addWidget(remove)

            self.rows_layout.addWidget(row)

        self.add_button.setVisible(len(self.entries) < self.max_entries)

    def _on_add(self):
        self._commit(add_entry(self.entries, self.max_entries), rebuild=True)

    def _on_remove(self, index: int):
        self._commit(remove_entry(self.entries, index), rebuild=True)

    def _on_edit(self, index: int, field: str, text: str):
        # keep focus in the line edit: no rebuild while typing
        self._commit(update_entry(self.entries, index, field, text), rebuild=False)

    def _commit(self, entries: list[DoseEntry], rebuild: bool):
        self.entries = entries
        if self.repository is not None:
            self.repository.save(entries)
        if rebuild:
            self._rebuild_rows()
        self.entriesChanged.emit(list(entries))

    def emit_current(self):
        self.entriesChanged.emit(list(self.entries))
