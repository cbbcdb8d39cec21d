# ui/widgets/session_stats_widget.py

from __future__ import annotations

from PyQt5.QtWidgets import QWidget, QVBoxLayout, QLabel

from core.focus_session import LiveStats
from monitoring.focus_timer import format_remaining


class SessionStatsWidget(QWidget):
    """
    Live panel of a running focus session:
      - remaining time
      - Focused / Distracted %
      - minutes and frames so far
      - current state and how long it has lasted
      - assessment (coloured by category)
      - face detection warning

    The dashboard calls `update_timer(...)` on every tick and
    `update_stats(...)` on every refresh.
    """

    def __init__(self, parent=None):
        super().__init__(parent)

        self.label_timer = QLabel("00:00")
        self.label_focused = QLabel("Focused: 0.0%")
        self.label_distracted = QLabel("Distracted: 0.0%")
        self.label_minutes = QLabel("Minutes: 0.0")
        self.label_frames = QLabel("Frames: 0")
        self.label_current = QLabel("")
        self.label_assessment = QLabel("Start a focus session to see your attention statistics here")
        self.label_warning = QLabel("")
        self.label_warning.setStyleSheet("color: #FF9800;")

        layout = QVBoxLayout()
        layout.addWidget(self.label_timer)
        layout.addWidget(self.label_focused)
        layout.addWidget(self.label_distracted)
        layout.addWidget(self.label_minutes)
        layout.addWidget(self.label_frames)
        layout.addWidget(self.label_current)
        layout.addWidget(self.label_assessment)
        layout.addWidget(self.label_warning)

        self.setLayout(layout)

    def update_timer(self, remaining_seconds: int) -> None:
        self.label_timer.setText(format_remaining(remaining_seconds))

    def update_stats(self, stats: LiveStats) -> None:
        if stats.total_frames == 0:
            self.label_assessment.setText("Camera not active or no data yet")
            self.label_assessment.setStyleSheet("")
            self.label_warning.setText("")
            self.label_current.setText("")
            return

        self.label_focused.setText(f"Focused: {stats.focus_percentage:.1f}%")
        self.label_distracted.setText(f"Distracted: {stats.distracted_percentage:.1f}%")
        self.label_minutes.setText(f"Minutes: {stats.session_minutes:.1f}")
        self.label_frames.setText(f"Frames: {stats.total_frames}")
        if stats.current_state is not None:
            self.label_current.setText(
                f"Current state: {stats.current_state.value} ({stats.current_state_seconds:.0f}s)"
            )

        self.label_assessment.setText(stats.assessment.label)
        self.label_assessment.setStyleSheet(
            f"color: {stats.assessment.style.color}; font-weight: bold;"
        )
        self.label_warning.setText(
            "Face detection issues detected" if stats.face_detection_issues else ""
        )
