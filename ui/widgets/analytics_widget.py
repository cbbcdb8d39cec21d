# ui/widgets/analytics_widget.py

from __future__ import annotations

from PyQt5.QtWidgets import QWidget, QVBoxLayout, QLabel, QListWidget, QListWidgetItem
from PyQt5.QtGui import QColor

from manager.report_controller import ReportController


class AnalyticsWidget(QWidget):
    """
    List of saved session reports, newest first, each row coloured
    by its assessment category.
    """

    def __init__(self, controller: ReportController, user_id=None, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.user_id = user_id

        self.label_empty = QLabel("No sessions recorded yet")
        self.list_reports = QListWidget()

        layout = QVBoxLayout()
        layout.addWidget(self.label_empty)
        layout.addWidget(self.list_reports)
        self.setLayout(layout)

        self.refresh()

    def refresh(self) -> None:
        rows = self.controller.list_rows(self.user_id)

        self.list_reports.clear()
        for row in rows:
            item = QListWidgetItem(
                f"{row.icon} {row.title}  {row.focus_display}  "
                f"{row.date_display}  {row.duration_display}"
            )
            item.setForeground(QColor(row.color))
            self.list_reports.addItem(item)

        self.label_empty.setVisible(not rows)
        self.list_reports.setVisible(bool(rows))
