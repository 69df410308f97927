from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskboard.config import load_settings
from taskboard.infra.api import TaskApiClient
from taskboard.infra.logging import setup_logging
from taskboard.infra.session import session_from_settings
from taskboard.services.board import BoardView
from taskboard.services.drag_reconciler import DragReconciler
from taskboard.services.realtime import RealtimePatchApplier
from taskboard.services.task_service import TaskService
from taskboard.services.task_store import TaskStore
from taskboard.ui.kanban import KanbanWindow, QtNotifier


def main() -> None:
    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))

    try:
        settings = load_settings()
    except RuntimeError as exc:
        QMessageBox.critical(None, "Configuration error", str(exc))
        return
    setup_logging(settings)

    session = session_from_settings(settings)
    if session is None:
        QMessageBox.critical(None, "Not signed in", "Set TASKBOARD_TOKEN to your session token.")
        return

    api = TaskApiClient(settings.api_base_url, session, timeout=settings.request_timeout)
    store = TaskStore()
    notifier = QtNotifier()
    service = TaskService(api, store, notifier)
    board = BoardView(store, notifier)

    window = KanbanWindow(
        service,
        board,
        DragReconciler(store, api, notifier),
        RealtimePatchApplier(store, notifier),
        notifier,
        poll_ms=settings.realtime_poll_ms,
    )
    if service.load_session() and service.current_user:
        window.set_user_name(service.current_user.name)
    service.refresh()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
