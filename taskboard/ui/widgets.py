from __future__ import annotations

from datetime import date

from PySide6.QtCore import QMimeData, QSize, Qt
from PySide6.QtGui import QDrag
from PySide6.QtWidgets import (
    QAbstractItemView,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from taskboard.domain.entities import TaskEntity, is_overdue
from taskboard.domain.enums import TaskStatus

CATEGORY_COLORS = {
    "high": "#E57B63",
    "medium": "#E0B25B",
    "low": "#7CC4A1",
}

STATUS_COLORS = {
    TaskStatus.NOT_STARTED: "#EF4444",
    TaskStatus.IN_PROCESS: "#EAB308",
    TaskStatus.COMPLETED: "#22C55E",
}

MIME_PREFIX = "task:"


def _task_id_from_mime(mime: QMimeData) -> str | None:
    if not mime.hasText():
        return None
    text = mime.text()
    if not text.startswith(MIME_PREFIX):
        return None
    return text[len(MIME_PREFIX):] or None


class TaskCardWidget(QWidget):
    def __init__(self, task: TaskEntity, created_by_me: bool, on_edit, on_delete, on_complete, parent=None):
        super().__init__(parent)
        self.task = task

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        overdue = is_overdue(task, date.today())

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(4)

        title = QLabel(task.title)
        title.setWordWrap(True)
        title.setStyleSheet("font-weight: 600;")

        category = QLabel(str(task.category))
        category.setStyleSheet(
            f"background-color: {CATEGORY_COLORS.get(task.category, '#9CA3AF')};"
            " border-radius: 8px; padding: 1px 8px;"
        )
        category.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

        header = QHBoxLayout()
        header.addWidget(title, 1)
        header.addWidget(category, 0, Qt.AlignTop)
        layout.addLayout(header)

        description = QLabel(task.description)
        description.setWordWrap(True)
        layout.addWidget(description)

        if task.due_date:
            due_text = f"Due: {task.due_date.strftime('%d.%m.%Y')}"
            if overdue:
                due_text += "  OVERDUE"
            due = QLabel(due_text)
            if overdue:
                due.setStyleSheet("color: #DC2626; font-weight: 600;")
            layout.addWidget(due)

        status = QLabel(f"Status: {task.status}")
        status.setStyleSheet(f"color: {STATUS_COLORS.get(task.status, '#6B7280')};")
        assignee = QLabel(f"For: @{task.assignee_name}")
        meta = QHBoxLayout()
        meta.addWidget(status)
        meta.addStretch()
        meta.addWidget(assignee)
        layout.addLayout(meta)

        creator = "You" if created_by_me else task.creator_name
        layout.addWidget(QLabel(f"Created by: {creator}"))

        edit_button = QPushButton("Edit")
        edit_button.clicked.connect(lambda: on_edit(task.id))
        remove_button = QPushButton("Remove")
        remove_button.clicked.connect(lambda: on_delete(task.id))
        actions = QHBoxLayout()
        actions.addStretch()
        if task.status != TaskStatus.COMPLETED:
            complete_button = QPushButton("Complete")
            complete_button.clicked.connect(lambda: on_complete(task.id))
            actions.addWidget(complete_button)
        actions.addWidget(edit_button)
        actions.addWidget(remove_button)
        layout.addLayout(actions)

        if overdue:
            self.setStyleSheet("#TaskCard { background-color: #FEF2F2; }")


class KanbanListWidget(QListWidget):
    def __init__(self, column_id: str, on_drop, parent=None):
        super().__init__(parent)
        self.column_id = column_id
        self._on_drop = on_drop
        self.setAcceptDrops(True)
        self.setDragEnabled(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDrop)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setSpacing(6)

    def set_tasks(self, tasks: list[TaskEntity], make_card) -> None:
        self.clear()
        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            self.addItem(item)
            widget = make_card(task)
            self.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())
        self.sync_item_sizes()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def sync_item_sizes(self) -> None:
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setFixedWidth(viewport_width)
                widget.adjustSize()
                item.setSizeHint(QSize(viewport_width, widget.sizeHint().height()))

    def startDrag(self, supportedActions: Qt.DropActions) -> None:  # type: ignore[name-defined]
        item = self.currentItem()
        if not item:
            return
        task_id = item.data(Qt.UserRole)
        if not task_id:
            return
        mime = QMimeData()
        mime.setText(f"{MIME_PREFIX}{task_id}")
        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.exec(Qt.MoveAction)

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        if _task_id_from_mime(event.mimeData()) is not None:
            event.acceptProposedAction()

    def dragMoveEvent(self, event) -> None:  # type: ignore[override]
        if _task_id_from_mime(event.mimeData()) is not None:
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:  # type: ignore[override]
        # Items are never moved by Qt; the board re-renders from the store.
        task_id = _task_id_from_mime(event.mimeData())
        if task_id is None:
            event.ignore()
            return
        source = event.source()
        source_column = source.column_id if isinstance(source, KanbanListWidget) else None
        event.setDropAction(Qt.IgnoreAction)
        event.accept()
        self._on_drop(task_id, source_column, self.column_id)
