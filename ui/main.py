import sys

from PyQt5.QtCore import QTimer
from PyQt5.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QHBoxLayout,
)

from core.config import load_config, setup_logging
from core.database import Database
from core.focus_session import FocusSession
from core.services.report_store import ReportStore
from core.services.session_counter_service import SessionCounterService
from manager.report_controller import ReportController
from ui.widgets.analytics_widget import AnalyticsWidget
from ui.widgets.session_stats_widget import SessionStatsWidget


class FocusWindow(QMainWindow):
    """
    Focus timer + live stats + saved reports.

    The session's timer runs in its own thread; this window only polls
    the session from a QTimer so every widget update stays on the Qt thread.
    """

    def __init__(self, session: FocusSession, controller: ReportController):
        super().__init__()

        self.session = session
        self.controller = controller
        self._shown_report = None

        self.setWindowTitle("Vision – Focus Session")
        self.setMinimumSize(420, 560)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)

        title = QLabel(f"Focus session – user {session.user_id}")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self.stats_widget = SessionStatsWidget()
        self.stats_widget.update_timer(session.timer.remaining_seconds)
        layout.addWidget(self.stats_widget)

        buttons = QHBoxLayout()
        self.start_button = QPushButton("Start")
        self.start_button.clicked.connect(self.session.start)
        buttons.addWidget(self.start_button)

        self.pause_button = QPushButton("Pause")
        self.pause_button.clicked.connect(self.session.pause)
        buttons.addWidget(self.pause_button)

        self.stop_button = QPushButton("Stop")
        self.stop_button.clicked.connect(self.session.stop)
        buttons.addWidget(self.stop_button)
        layout.addLayout(buttons)

        layout.addWidget(QLabel("Analytics"))
        self.analytics_widget = AnalyticsWidget(controller, user_id=session.user_id)
        layout.addWidget(self.analytics_widget)

        self.setCentralWidget(central)

        self._poll = QTimer(self)
        self._poll.timeout.connect(self.refresh)
        self._poll.start(int(session.config.tick_interval_ms))

    def refresh(self):
        self.stats_widget.update_timer(self.session.timer.remaining_seconds)
        self.stats_widget.update_stats(self.session.live_stats())

        self.start_button.setEnabled(not self.session.is_running)
        self.pause_button.setEnabled(self.session.is_running)

        if self.session.last_report is not self._shown_report:
            self._shown_report = self.session.last_report
            self.analytics_widget.refresh()

    def closeEvent(self, event):
        # leaving mid-session still saves a partial report
        if self.session.in_progress:
            self.session.stop()
        super().closeEvent(event)


# ---------------------------------------------------
# MAIN ENTRY
# ---------------------------------------------------
def main():
    config = load_config()
    setup_logging(config)

    db = Database(config.db_path)
    report_store = ReportStore(db, config)
    counter_service = SessionCounterService(db, config)

    user_id = sys.argv[1] if len(sys.argv) > 1 else "local"
    session = FocusSession(user_id, report_store, counter_service, config=config)
    controller = ReportController(report_store, counter_service, config)

    app = QApplication(sys.argv)
    window = FocusWindow(session, controller)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
