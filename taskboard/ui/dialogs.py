from __future__ import annotations

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QTextEdit,
    QVBoxLayout,
)

from taskboard.domain.drafts import TaskDraft
from taskboard.domain.entities import UserEntity
from taskboard.domain.enums import TaskCategory, TaskStatus

CATEGORY_OPTIONS = [
    ("High", TaskCategory.HIGH.value),
    ("Medium", TaskCategory.MEDIUM.value),
    ("Low", TaskCategory.LOW.value),
]


class TaskDialog(QDialog):
    def __init__(self, draft: TaskDraft, users: list[UserEntity], editing: bool, parent=None):
        super().__init__(parent)
        self.editing = editing
        self.setWindowTitle("Edit Task" if editing else "Add New Task")
        self.setMinimumWidth(420)

        self.title_input = QLineEdit(draft.title)
        self.title_input.setPlaceholderText("Add Title")

        self.description_input = QTextEdit()
        self.description_input.setPlaceholderText("Add description")
        self.description_input.setPlainText(draft.description)
        self.description_input.setMinimumHeight(100)

        self.category_combo = QComboBox()
        for label, value in CATEGORY_OPTIONS:
            self.category_combo.addItem(label, value)
        self._select(self.category_combo, draft.category)

        self.status_combo = QComboBox()
        for status in TaskStatus:
            self.status_combo.addItem(status.value, status.value)
        self._select(self.status_combo, draft.status or TaskStatus.NOT_STARTED.value)

        self.due_check = QCheckBox("Due date")
        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDate(QDate(draft.due_date.year, draft.due_date.month, draft.due_date.day) if draft.due_date else QDate.currentDate())
        self.due_check.toggled.connect(self.due_input.setEnabled)
        self.due_check.setChecked(draft.due_date is not None)
        self.due_input.setEnabled(draft.due_date is not None)

        self.user_combo = QComboBox()
        self.user_combo.addItem("Select User", None)
        for user in users:
            self.user_combo.addItem(user.name, user.id)
        self._select(self.user_combo, draft.assign_to)

        form = QFormLayout()
        form.addRow("Title", self.title_input)
        form.addRow("Description", self.description_input)
        form.addRow("Category", self.category_combo)
        if editing:
            form.addRow("Status", self.status_combo)
        form.addRow(self.due_check, self.due_input)
        form.addRow("Assign to", self.user_combo)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(buttons)

    def draft(self) -> TaskDraft:
        return TaskDraft(
            title=self.title_input.text(),
            description=self.description_input.toPlainText(),
            category=self.category_combo.currentData(),
            assign_to=self.user_combo.currentData(),
            due_date=self.due_input.date().toPython() if self.due_check.isChecked() else None,
            status=self.status_combo.currentData() if self.editing else None,
        )

    @staticmethod
    def _select(combo: QComboBox, value) -> None:
        index = combo.findData(value)
        if index >= 0:
            combo.setCurrentIndex(index)
