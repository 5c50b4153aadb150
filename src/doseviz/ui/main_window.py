# src/doseviz/ui/main_window.py
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QMainWindow, QStatusBar, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from doseengine.metrics import summarize
from doseengine.simulate import simulate
from doseengine.storage import DoseListRepository
from doseengine.types import ZEPBOUND, Compound
from .controls import DoseEntryPanel
from .plots import PlotWidget


def _compound_text(compound: Compound) -> str:
    return (
        f"<b>{compound.name.capitalize()} Properties</b><br>"
        f"• Bioavailability: {compound.bioavailability:.0%}<br>"
        f"• Time to Peak: {compound.peak_delay_days * 24:g} hours<br>"
        f"• Half-life: {compound.half_life_days:g} days"
    )


class MainWindow(QMainWindow):
    def __init__(self, repository: DoseListRepository | None = None, compound: Compound = ZEPBOUND):
        super().__init__()
        self.setWindowTitle("Dose Tracker")
        self.resize(1200, 760)
        self.compound = compound

        central = QWidget(self); self.setCentralWidget(central)
        root = QHBoxLayout(central)

        left = QVBoxLayout()
        info = QLabel(_compound_text(compound)); info.setTextFormat(Qt.RichText)
        left.addWidget(info)
        self.entries = DoseEntryPanel(repository)
        left.addWidget(self.entries, 1)
        root.addLayout(left, 0)

        right = QVBoxLayout()
        self.plot = PlotWidget()
        right.addWidget(self.plot, 3)
        self.table = QTableWidget(0, 2)
        self.table.setHorizontalHeaderLabels(["Date", "Concentration (mg)"])
        self.table.horizontalHeader().setStretchLastSection(True)
        right.addWidget(self.table, 2)
        root.addLayout(right, 1)

        self.status = QStatusBar(); self.setStatusBar(self.status)

        # wire events: every edit of the dose list triggers one explicit recompute
        self.entries.entriesChanged.connect(self.on_entries_changed)
        self.entries.emit_current()

    def on_entries_changed(self, entries: list):
        try:
            samples = simulate(entries, self.compound)
            has_data = bool(samples)
            self.plot.setVisible(has_data)
            self.table.setVisible(has_data)
            self.plot.plot_samples(samples)
            self._fill_table(samples)
            summary = summarize(samples)
            if summary:
                msg = (f"Cmax {summary['cmax']:.2f} mg on {summary['tmax'].isoformat()} | "
                       f"Cavg {summary['cavg']:.2f} mg | AUC {summary['auc']:.1f} mg·day")
                self.status.showMessage(msg, 5000)
            else:
                self.status.showMessage("No complete doses yet", 5000)
        except Exception as e:
            self.status.showMessage(f"Error: {e}", 8000)

    def _fill_table(self, samples):
        self.table.setRowCount(len(samples))
        for row, s in enumerate(samples):
            self.table.setItem(row, 0, QTableWidgetItem(s.date.isoformat()))
            value = QTableWidgetItem(f"{s.total_concentration:.2f}")
            value.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.table.setItem(row, 1, value)
