from __future__ import annotations

import logging

from PySide6.QtCore import QDate, QObject, QRunnable, QThreadPool, QTimer, Signal, Slot
from PySide6.QtWidgets import (
    QCheckBox,
    QDateEdit,
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from taskboard.domain.enums import STATUS_COLUMN, TaskStatus
from taskboard.domain.errors import TransportError
from taskboard.domain.filters import TaskFilters
from taskboard.services.board import BoardColumns, BoardView
from taskboard.services.drag_reconciler import DragReconciler, DropEvent, PendingCommit
from taskboard.services.notifications import Notifier
from taskboard.services.realtime import RealtimePatchApplier
from taskboard.services.task_service import TaskService

from .dialogs import TaskDialog
from .widgets import KanbanListWidget, TaskCardWidget

logger = logging.getLogger(__name__)

TOAST_COLORS = {
    "success": "#16A34A",
    "info": "#2563EB",
    "warning": "#D97706",
    "error": "#DC2626",
}


class QtNotifier(QObject, Notifier):
    message = Signal(str, str)

    def success(self, message: str) -> None:
        super().success(message)
        self.message.emit("success", message)

    def info(self, message: str) -> None:
        super().info(message)
        self.message.emit("info", message)

    def warning(self, message: str) -> None:
        super().warning(message)
        self.message.emit("warning", message)

    def error(self, message: str) -> None:
        super().error(message)
        self.message.emit("error", message)


class _StatusJobSignals(QObject):
    finished = Signal(object)


class StatusChangeJob(QRunnable):
    def __init__(self, reconciler: DragReconciler, pending: PendingCommit):
        super().__init__()
        self.reconciler = reconciler
        self.pending = pending
        self.signals = _StatusJobSignals()

    def run(self) -> None:
        try:
            self.reconciler.send(self.pending)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Status change for %s crashed", self.pending.task_id)
            self.pending.error = TransportError(str(exc))
            self.pending.sent = True
        self.signals.finished.emit(self.pending)


class KanbanWindow(QWidget):
    def __init__(
        self,
        service: TaskService,
        board: BoardView,
        reconciler: DragReconciler,
        realtime: RealtimePatchApplier,
        notifier: QtNotifier,
        poll_ms: int = 500,
        parent=None,
    ):
        super().__init__(parent)
        self.service = service
        self.board = board
        self.reconciler = reconciler
        self.realtime = realtime
        self._pool = QThreadPool.globalInstance()
        self._jobs: dict[str, StatusChangeJob] = {}

        self.setWindowTitle("Task Board")
        self.resize(1200, 760)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        self.welcome_label = QLabel("Welcome")
        self.welcome_label.setStyleSheet("font-size: 20px; font-weight: 600;")
        hint = QLabel("Drag tasks between columns to update their status")
        layout.addWidget(self.welcome_label)
        layout.addWidget(hint)

        toolbar = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search by title, description or user")
        self.search_input.textChanged.connect(self.apply_filters)

        self.date_check = QCheckBox("Created on")
        self.date_input = QDateEdit()
        self.date_input.setCalendarPopup(True)
        self.date_input.setDate(QDate.currentDate())
        self.date_input.setEnabled(False)
        self.date_check.toggled.connect(self.date_input.setEnabled)
        self.date_check.toggled.connect(self.apply_filters)
        self.date_input.dateChanged.connect(self.apply_filters)

        add_button = QPushButton("New task")
        add_button.clicked.connect(self.new_task)
        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(lambda: self.service.refresh())

        toolbar.addWidget(self.search_input, 1)
        toolbar.addWidget(self.date_check)
        toolbar.addWidget(self.date_input)
        toolbar.addWidget(add_button)
        toolbar.addWidget(refresh_button)
        layout.addLayout(toolbar)

        columns_row = QHBoxLayout()
        columns_row.setSpacing(12)
        self.columns: dict[TaskStatus, KanbanListWidget] = {}
        for status in TaskStatus:
            column = QVBoxLayout()
            label = QLabel(status.value)
            label.setStyleSheet("font-size: 16px; font-weight: 600;")
            list_widget = KanbanListWidget(STATUS_COLUMN[status], self.on_drop)
            column.addWidget(label)
            column.addWidget(list_widget)
            columns_row.addLayout(column, 1)
            self.columns[status] = list_widget
        layout.addLayout(columns_row, 1)

        self.toast = QLabel("")
        self.toast.setVisible(False)
        layout.addWidget(self.toast)
        self._toast_timer = QTimer(self)
        self._toast_timer.setSingleShot(True)
        self._toast_timer.timeout.connect(lambda: self.toast.setVisible(False))
        notifier.message.connect(self.show_toast)

        self._realtime_timer = QTimer(self)
        self._realtime_timer.setInterval(poll_ms)
        self._realtime_timer.timeout.connect(self.realtime.drain)
        self._realtime_timer.start()

        self.board.subscribe(self.render)
        self.render(self.board.columns)

    def set_user_name(self, name: str) -> None:
        self.welcome_label.setText(f"Welcome {name}")

    def apply_filters(self) -> None:
        search = self.search_input.text().strip()
        created_on = self.date_input.date().toPython() if self.date_check.isChecked() else None
        self.board.set_filters(TaskFilters(search=search or None, created_on=created_on))

    def render(self, columns: BoardColumns) -> None:
        for status, list_widget in self.columns.items():
            list_widget.set_tasks(columns.column(status), self._make_card)

    def _make_card(self, task) -> TaskCardWidget:
        created_by_me = task.created_by is not None and self.service.is_current_user(task.created_by.id)
        # Card actions re-render the list that owns the card.
        return TaskCardWidget(
            task,
            created_by_me,
            lambda task_id: QTimer.singleShot(0, lambda: self.edit_task(task_id)),
            lambda task_id: QTimer.singleShot(0, lambda: self.delete_task(task_id)),
            lambda task_id: QTimer.singleShot(0, lambda: self.complete_task(task_id)),
        )

    def on_drop(self, task_id: str, source: str | None, destination: str) -> None:
        # Re-rendering inside the drag would delete widgets Qt still uses.
        QTimer.singleShot(0, lambda: self._start_status_change(task_id, source, destination))

    def _start_status_change(self, task_id: str, source: str | None, destination: str) -> None:
        pending = self.reconciler.begin(DropEvent(task_id=task_id, source=source, destination=destination))
        if pending is None:
            return
        job = StatusChangeJob(self.reconciler, pending)
        job.setAutoDelete(False)
        job.signals.finished.connect(self._on_status_sent)
        self._jobs[pending.task_id] = job
        self._pool.start(job)

    @Slot(object)
    def _on_status_sent(self, pending: PendingCommit) -> None:
        self._jobs.pop(pending.task_id, None)
        self.reconciler.settle(pending)

    def new_task(self) -> None:
        dialog = TaskDialog(self.service.new_draft(), self.service.users, editing=False, parent=self)
        if dialog.exec() == QDialog.Accepted:
            self.service.create_task(dialog.draft())

    def edit_task(self, task_id: str) -> None:
        task = self.service.get_task(task_id)
        if task is None:
            return
        dialog = TaskDialog(self.service.draft_from_task(task), self.service.users, editing=True, parent=self)
        if dialog.exec() == QDialog.Accepted:
            self.service.update_task(task_id, dialog.draft())

    def delete_task(self, task_id: str) -> None:
        confirm = QMessageBox.question(self, "Remove task", "Remove this task?")
        if confirm != QMessageBox.Yes:
            return
        self.service.delete_task(task_id)

    def complete_task(self, task_id: str) -> None:
        self.service.change_status(task_id, TaskStatus.COMPLETED)

    def show_toast(self, level: str, message: str) -> None:
        self.toast.setText(message)
        self.toast.setStyleSheet(
            f"color: white; background-color: {TOAST_COLORS.get(level, '#374151')};"
            " border-radius: 6px; padding: 6px 10px;"
        )
        self.toast.setVisible(True)
        self._toast_timer.start(4000)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._realtime_timer.stop()
        self.board.close()
        super().closeEvent(event)
