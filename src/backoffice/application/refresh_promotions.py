"""Application service: Refresh Promotion Statuses use case.

Statuses are re-derived lazily whenever a promotion is used; this sweep
does the same for every promotion so listings are up to date.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from backoffice.application.clock import local_now
from backoffice.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class RefreshPromotionsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self) -> list[str]:
        """Return the codes whose status changed."""
        today = self._clock().date()
        changed: list[str] = []
        with self._uow as uow:
            for promotion in uow.promotions.list_all():
                if promotion.refresh_status(today):
                    uow.promotions.save(promotion)
                    changed.append(promotion.code)
                    logger.info(
                        "Promotion %s is now %s", promotion.code, promotion.status.value
                    )
            uow.commit()
        return changed
