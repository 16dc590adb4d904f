"""NoticeBoard — dismissible user-facing notices keyed by operation id.

A later notice for the same operation replaces the earlier one instead of
stacking (loading -> success / error). Item-level degradations never post here.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.nm_common.datetime_utils import utc_now
from src.nm_common.enums import NoticeLevel

logger = logging.getLogger(__name__)

CATALOG_NOTICE_ID = "catalog"


@dataclass(frozen=True)
class Notice:
    operation_id: str
    level: NoticeLevel
    message: str
    detail: dict[str, object] = field(default_factory=dict)
    posted_at: datetime = field(default_factory=utc_now)


class NoticeBoard:
    def __init__(self) -> None:
        self._notices: dict[str, Notice] = {}

    def post(
        self,
        operation_id: str,
        level: NoticeLevel,
        message: str,
        **detail: object,
    ) -> Notice:
        notice = Notice(operation_id=operation_id, level=level, message=message, detail=detail)
        self._notices[operation_id] = notice
        logger.debug("notice %s [%s] %s", operation_id, level.value, message)
        return notice

    def loading(self, operation_id: str, message: str) -> Notice:
        return self.post(operation_id, NoticeLevel.LOADING, message)

    def success(self, operation_id: str, message: str, **detail: object) -> Notice:
        return self.post(operation_id, NoticeLevel.SUCCESS, message, **detail)

    def error(self, operation_id: str, message: str) -> Notice:
        return self.post(operation_id, NoticeLevel.ERROR, message)

    def get(self, operation_id: str) -> Notice | None:
        return self._notices.get(operation_id)

    def dismiss(self, operation_id: str) -> bool:
        return self._notices.pop(operation_id, None) is not None

    def active(self) -> list[Notice]:
        """Current notices, oldest first."""
        return sorted(self._notices.values(), key=lambda n: n.posted_at)
