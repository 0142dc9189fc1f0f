"""
Use cases that load expenses and feed them to the aggregation layer.
"""
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from backoffice.config import settings
from core.permissions import Actor, CHART_VIEWERS, EXPENSE_WRITERS, require_role
from database.repositories import ExpenseRepository
from services.aggregation import ExpenseRecord
from services.reports import ExpenseCharts, ExpenseReport, build_charts, build_report
from services.use_cases.base import BaseUseCase

logger = logging.getLogger(__name__)


class _ExpenseReadUseCase(BaseUseCase):
    def __init__(self, session):
        super().__init__(session)
        self.expenses = ExpenseRepository(session)

    async def _load_records(
        self,
        organization_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[ExpenseRecord]:
        expenses = await self.expenses.get_by_organization(
            organization_id, start_date=start_date, end_date=end_date
        )
        return [ExpenseRecord.from_model(expense) for expense in expenses]


class GetExpenseChartsUseCase(_ExpenseReadUseCase):
    """
    Chart breakdowns for the last N days.
    """

    async def execute(self, actor: Actor, days: Optional[int] = None) -> ExpenseCharts:
        """
        Args:
            actor: Acting admin or supervisor
            days: Window size in days (defaults to ``chart_default_days``)
        """
        require_role(actor, CHART_VIEWERS)
        days = days or settings.chart_default_days
        started = time.perf_counter()

        since = datetime.now(timezone.utc) - timedelta(days=days)
        records = await self._load_records(actor.organization_id, start_date=since)
        charts = build_charts(
            records,
            tz=settings.timezone,
            default_color=settings.default_category_color,
        )

        logger.debug(
            f"Built expense charts over {len(records)} expenses ({days} days)",
            extra={
                "organization_id": actor.organization_id,
                "duration": round(time.perf_counter() - started, 4),
            },
        )
        return charts


class GetExpenseReportUseCase(_ExpenseReadUseCase):
    """
    Report data for export over an optional date range.
    """

    async def execute(
        self,
        actor: Actor,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> ExpenseReport:
        require_role(actor, EXPENSE_WRITERS)
        records = await self._load_records(actor.organization_id, start_date, end_date)
        report = build_report(
            records,
            start_date=start_date,
            end_date=end_date,
            default_color=settings.default_category_color,
        )
        logger.info(
            f"Expense report prepared: {report.expense_count} expenses, total {report.total}",
            extra={"organization_id": actor.organization_id},
        )
        return report
