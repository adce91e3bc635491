"""
MoodyFlicks - User Notices
Collects the toasts produced while handling a request so the front end can show them.
"""

import logging

from moodyflicks.schemas import Notice, NoticeKind

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self):
        self._pending: list[Notice] = []

    def notify(self, title: str, description: str = "", kind: NoticeKind = NoticeKind.INFO) -> Notice:
        notice = Notice(title=title, description=description, kind=kind)
        self._pending.append(notice)
        if kind == NoticeKind.ERROR:
            logger.warning(f"Notice: {title} - {description}")
        else:
            logger.debug(f"Notice: {title} - {description}")
        return notice

    def info(self, title: str, description: str = "") -> Notice:
        return self.notify(title, description, NoticeKind.INFO)

    def success(self, title: str, description: str = "") -> Notice:
        return self.notify(title, description, NoticeKind.SUCCESS)

    def achievement(self, description: str) -> Notice:
        return self.notify("New Achievement! 🏆", description, NoticeKind.ACHIEVEMENT)

    def error(self, title: str, description: str = "") -> Notice:
        return self.notify(title, description, NoticeKind.ERROR)

    @property
    def pending(self) -> list[Notice]:
        return list(self._pending)

    def drain(self) -> list[Notice]:
        notices, self._pending = self._pending, []
        return notices
