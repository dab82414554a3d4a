"""Profit target domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import ProfitTarget as ProfitTargetEntity, TargetProgress
from ledgerbook.domain.errors import ValidationError
from ledgerbook.domain.statements import dashboard_metrics_from_journal, target_progress
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.amount_parser import ZERO, money

logger = get_logger(__name__)


def _check_period(target_month: int, target_year: int) -> None:
    if not 1 <= target_month <= 12:
        raise ValidationError("Target month must be between 1 and 12")
    if target_year < 1:
        raise ValidationError("Target year must be positive")


class ProfitTargetService:
    """Service for monthly and yearly profit targets."""

    def __init__(self, db: Database, owner: str):
        """Initialize profit target service.

        Args:
            db: Database instance
            owner: Identifier of the user the targets belong to
        """
        self.db = db
        self.owner = owner

    def set_target(
        self,
        target_month: int,
        target_year: int,
        monthly_target: Optional[Decimal],
        yearly_target: Optional[Decimal] = None,
    ) -> int:
        """Create or replace the target for a month.

        Args:
            target_month: Month (1-12)
            target_year: Year
            monthly_target: Net profit target for the month
            yearly_target: Net profit target for the year (defaults to 12x monthly)

        Returns:
            Profit target ID

        Raises:
            ValidationError: If the period is invalid, the monthly target is
                missing, or a target is negative
        """
        _check_period(target_month, target_year)
        if monthly_target is None:
            raise ValidationError("Monthly target is required")
        if yearly_target is None:
            yearly_target = monthly_target * 12
        if monthly_target < ZERO or yearly_target < ZERO:
            raise ValidationError("Targets cannot be negative")

        target_id = self.db.upsert_profit_target(
            self.owner, target_month, target_year, money(monthly_target), money(yearly_target)
        )
        logger.info("profit_target_set", target_month=target_month, target_year=target_year)
        return target_id

    def get_target(self, target_month: int, target_year: int) -> Optional[ProfitTargetEntity]:
        _check_period(target_month, target_year)
        return self.db.get_profit_target(self.owner, target_month, target_year)

    def progress(self, target_month: int, target_year: int) -> Optional[TargetProgress]:
        """Compare the month's journal net profit with its target.

        Returns:
            TargetProgress, or None if no target is set for the month
        """
        target = self.get_target(target_month, target_year)
        if target is None:
            return None

        start = date(target_year, target_month, 1)
        end = start + relativedelta(months=1, days=-1)
        journal_entries = self.db.list_journal_entries(self.owner, start_date=start, end_date=end)
        return target_progress(target, dashboard_metrics_from_journal(journal_entries).net_profit)
