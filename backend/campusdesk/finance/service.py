"""Expenses and the recurring-expense roll-forward."""
import logging
from datetime import datetime
from typing import Optional

import pendulum as plm
from sqlalchemy.orm import Session

from campusdesk.errors import NotFoundError
from campusdesk.models import Expense, ExpenseStatus, OneOff, Recurring, RecurringFrequency
from campusdesk.utils import utcnow
from .schemas import ExpenseCreate, ExpenseUpdate, RecurringRunResult

logger = logging.getLogger(__name__)

_MONTHS_PER_PERIOD = {
    RecurringFrequency.monthly: 1,
    RecurringFrequency.quarterly: 3,
    RecurringFrequency.yearly: 12,
}


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the end of the target month."""
    return plm.instance(value, tz="UTC").add(months=months).naive()


def next_recurring_date(previous: datetime, frequency: Optional[RecurringFrequency]) -> datetime:
    if frequency == RecurringFrequency.weekly:
        return plm.instance(previous, tz="UTC").add(weeks=1).naive()
    return add_months(previous, _MONTHS_PER_PERIOD.get(frequency, 1))


def clone_occurrence(template: Expense, now: datetime) -> Expense:
    """A dated, pending, one-off copy of a recurring template, without its receipt."""
    occurrence = Expense(
        amount=template.amount,
        date=now,
        vendor=template.vendor,
        description=template.description,
        category=template.category,
        receipt_url=None,
        status=ExpenseStatus.pending,
        incurred_by_id=template.incurred_by_id,
        project_id=template.project_id,
        inventory_item_id=template.inventory_item_id,
        quarter=template.quarter,
    )
    occurrence.schedule = OneOff()
    return occurrence


class ExpenseService:
    def __init__(self, db: Session):
        self.db = db

    def get_expense(self, expense_id: str) -> Expense:
        expense = self.db.get(Expense, expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        return expense

    def create_expense(self, data: ExpenseCreate) -> Expense:
        fields = data.model_dump(exclude={"schedule", "date"})
        expense = Expense(**fields, date=data.date or utcnow())
        expense.schedule = data.schedule.to_schedule()
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"Created expense {expense.id} ({type(expense.schedule).__name__})")
        return expense

    def update_expense(self, expense_id: str, patch: ExpenseUpdate) -> Expense:
        """Apply only the fields present in ``patch``."""
        expense = self.get_expense(expense_id)
        changes = patch.model_dump(exclude_unset=True, exclude={"schedule"})
        for field, value in changes.items():
            setattr(expense, field, value)
        if "schedule" in patch.model_fields_set:
            expense.schedule = patch.schedule.to_schedule() if patch.schedule else OneOff()

        self.db.commit()
        self.db.refresh(expense)
        return expense

    def list_recurring(self) -> list[Expense]:
        return (
            self.db.query(Expense)
            .filter(Expense.is_recurring.is_(True))
            .order_by(Expense.next_recurring_date)
            .all()
        )

    def due_templates(self, now: datetime) -> list[Expense]:
        return (
            self.db.query(Expense)
            .filter(Expense.is_recurring.is_(True), Expense.next_recurring_date <= now)
            .order_by(Expense.next_recurring_date)
            .all()
        )

    def roll_forward(self, template: Expense, now: datetime) -> Expense:
        """Create this period's occurrence and advance the template, in one transaction.

        The next date is computed from the template's own schedule, not from
        ``now``, so a late run keeps the cadence.
        """
        schedule = template.schedule
        if not isinstance(schedule, Recurring):
            raise ValueError(f"Expense {template.id} is not a recurring template")

        occurrence = clone_occurrence(template, now)
        self.db.add(occurrence)
        template.schedule = Recurring(
            frequency=schedule.frequency,
            next_date=next_recurring_date(schedule.next_date or now, schedule.frequency),
        )
        self.db.commit()
        return occurrence

    def process_recurring_expenses(self, now: Optional[datetime] = None) -> RecurringRunResult:
        """Roll every due template forward; a failing template does not stop the others."""
        now = now or utcnow()
        due = self.due_templates(now)
        if not due:
            return RecurringRunResult(processed=0, message="No recurring expenses are due.")

        template_ids = [template.id for template in due]
        created: list[str] = []
        failed: list[str] = []
        for template_id, template in zip(template_ids, due):
            try:
                occurrence = self.roll_forward(template, now)
                created.append(occurrence.id)
            except Exception:
                self.db.rollback()
                failed.append(template_id)
                logger.exception(f"[RECURRING_PROCESS] template {template_id} failed")

        plural = "" if len(created) == 1 else "s"
        logger.info(f"Processed {len(created)} recurring expense{plural}, {len(failed)} failed")
        return RecurringRunResult(
            processed=len(created),
            created_expense_ids=created,
            failed_template_ids=failed,
            message=f"{len(created)} recurring expense{plural} processed successfully.",
        )
