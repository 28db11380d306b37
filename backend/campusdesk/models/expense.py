"""Expense model and its recurrence schedule."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer, Boolean, Numeric,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow
from .enums import ExpenseStatus, RecurringFrequency


@dataclass(frozen=True)
class OneOff:
    """Schedule of an ordinary expense, including generated occurrences."""


@dataclass(frozen=True)
class Recurring:
    """Schedule of a recurring template.

    ``next_date`` may be None for a template that has never run; the
    roll-forward then treats it as due from the moment it runs.
    """
    frequency: RecurringFrequency = RecurringFrequency.monthly
    next_date: Optional[datetime] = None


Schedule = Union[OneOff, Recurring]


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (
        # Only recurring templates carry a frequency or a next date
        CheckConstraint(
            "is_recurring OR (recurring_frequency IS NULL AND next_recurring_date IS NULL)",
            name="ck_expense_one_off_has_no_schedule",
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    amount = Column(Numeric(10, 2), nullable=False)
    date = Column(DateTime, default=utcnow)
    vendor = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(100), nullable=False)
    receipt_url = Column(String(500), nullable=True)
    status = Column(SQLEnum(ExpenseStatus), nullable=False, default=ExpenseStatus.pending)
    incurred_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    project_id = Column(String(36), nullable=True)
    inventory_item_id = Column(String(36), nullable=True)
    quarter = Column(String(20), nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(SQLEnum(RecurringFrequency), nullable=True)
    next_recurring_date = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    incurred_by = relationship("User")

    def __repr__(self):
        return f"<Expense(id={self.id}, vendor='{self.vendor}', amount={self.amount})>"

    @property
    def schedule(self) -> Schedule:
        if not self.is_recurring:
            return OneOff()
        return Recurring(
            frequency=self.recurring_frequency or RecurringFrequency.monthly,
            next_date=self.next_recurring_date,
        )

    @schedule.setter
    def schedule(self, value: Schedule) -> None:
        if isinstance(value, Recurring):
            self.is_recurring = True
            self.recurring_frequency = value.frequency
            self.next_recurring_date = value.next_date
        else:
            self.is_recurring = False
            self.recurring_frequency = None
            self.next_recurring_date = None
