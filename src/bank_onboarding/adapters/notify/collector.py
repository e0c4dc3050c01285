"""
Collecting notifier adapter - Implements Notifier protocol.

Notifications posted while handling one request are collected so the API
can return them with the response, and logged for the server operator.
"""

import logging
from dataclasses import dataclass

from bank_onboarding.domain.ports import NoticeKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str


class CollectingNotifier:
    """
    Implements Notifier protocol by accumulating notices in order.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, kind: NoticeKind, message: str) -> None:
        self.notices.append(Notice(kind=kind, message=message))
        level = logging.WARNING if kind == NoticeKind.ERROR else logging.INFO
        logger.log(level, "[NOTICE] %s: %s", kind.value, message)
