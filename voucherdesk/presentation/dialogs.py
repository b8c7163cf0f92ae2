# voucherdesk/presentation/dialogs.py

from typing import Optional

from PyQt5.QtWidgets import QMessageBox, QWidget

from voucherdesk.constants import MSG_VALIDATION_TITLE

import logging
logger = logging.getLogger(__name__)


class QtPrompter:
    """Modal message boxes for the lifecycle controller and the invoice list."""

    def __init__(self, parent: Optional[QWidget] = None):
        self.parent = parent

    def confirm(self, title: str, text: str) -> bool:
        reply = QMessageBox.question(self.parent, title, text,
                                     QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                                     QMessageBox.StandardButton.No)  # type: ignore
        return reply == QMessageBox.StandardButton.Yes

    def error(self, title: str, text: str):
        logger.debug(f"Showing error dialog '{title}': {text}")
        if title == MSG_VALIDATION_TITLE:
            QMessageBox.warning(self.parent, title, text)
        else:
            QMessageBox.critical(self.parent, title, text)

    def info(self, title: str, text: str):
        QMessageBox.information(self.parent, title, text)
