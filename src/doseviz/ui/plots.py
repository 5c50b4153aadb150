# src/doseviz/ui/plots.py
import numpy as np
import pyqtgraph as pg
from PySide6.QtWidgets import QTabWidget

from doseengine.aggregate import weekly_averages
from doseengine.simulate import stacked_series


def _timestamps(samples) -> np.ndarray:
    # UTC midnight of each sample day, in seconds, for DateAxisItem(utcOffset=0)
    days = np.array([s.date.isoformat() for s in samples], dtype="datetime64[D]")
    return days.astype("datetime64[s]").astype(float)


def _date_plot(title: str) -> pg.PlotWidget:
    plot = pg.PlotWidget(axisItems={"bottom": pg.DateAxisItem(orientation="bottom", utcOffset=0)})
    plot.setTitle(title)
    plot.setLabel("left", "Concentration", units="mg")
    plot.showGrid(x=True, y=True, alpha=0.3)
    plot.addLegend()
    return plot


class PlotWidget(QTabWidget):
    """Line, area, stacked per-dose and weekly-average views of one simulation."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.line_plot = _date_plot("Drug Concentration Over Time")
        self.area_plot = _date_plot("Drug Concentration Area Chart")
        self.stacked_plot = _date_plot("Stacked Dose Contributions")

        self.weekly_plot = pg.PlotWidget()
        self.weekly_plot.setTitle("Weekly Average Concentrations")
        self.weekly_plot.setLabel("left", "Weekly Average", units="mg")
        self.weekly_plot.setLabel("bottom", "Week")
        self.weekly_plot.showGrid(x=False, y=True, alpha=0.3)

        self.addTab(self.line_plot, "Line Chart")
        self.addTab(self.area_plot, "Area Chart")
        self.addTab(self.stacked_plot, "Stacked Area")
        self.addTab(self.weekly_plot, "Weekly Averages")

    def plot_samples(self, samples):
        self.clear_plots()
        if not samples:
            return
        x = _timestamps(samples)
        total = np.array([s.total_concentration for s in samples], dtype=float)

        self.line_plot.plot(x, total, pen=pg.mkPen(width=2), name="Concentration (mg)")
        self.area_plot.plot(x, total, pen=pg.mkPen(width=2), fillLevel=0,
                            brush=pg.mkBrush(136, 132, 216, 120), name="Concentration (mg)")

        lower = self.stacked_plot.plot(x, np.zeros_like(x), pen=pg.mkPen(0, 0, 0, 0))
        for i, upper_y in enumerate(stacked_series(samples)):
            color = pg.intColor(i, hues=max(len(samples[0].per_dose_contribution), 1))
            upper = self.stacked_plot.plot(x, upper_y, pen=pg.mkPen(color, width=1), name=f"Dose {i + 1}")
            band = pg.FillBetweenItem(lower, upper, brush=pg.mkBrush(color.red(), color.green(), color.blue(), 110))
            self.stacked_plot.addItem(band)
            lower = upper

        weeks = weekly_averages(samples)
        bars = pg.BarGraphItem(
            x=[w.week_index for w in weeks],
            height=[w.avg_concentration for w in weeks],
            width=0.6, brush=pg.mkBrush(130, 202, 157),
        )
        self.weekly_plot.addItem(bars)
        self.weekly_plot.getAxis("bottom").setTicks([[(w.week_index, w.label) for w in weeks]])

    def clear_plots(self):
        for plot in (self.line_plot, self.area_plot, self.stacked_plot, self.weekly_plot):
            plot.clear()
