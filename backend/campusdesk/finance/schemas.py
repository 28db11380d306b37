"""Expense request and response bodies."""
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, field_validator

from campusdesk.models import ExpenseStatus, OneOff, Recurring, RecurringFrequency
from campusdesk.schemas import CamelModel, PatchModel


class OneOffSchedule(CamelModel):
    kind: Literal["one_off"] = "one_off"

    def to_schedule(self) -> OneOff:
        return OneOff()


class RecurringSchedule(CamelModel):
    kind: Literal["recurring"] = "recurring"
    frequency: RecurringFrequency = RecurringFrequency.monthly
    next_date: Optional[datetime] = None

    def to_schedule(self) -> Recurring:
        next_date = self.next_date
        if next_date is not None and next_date.tzinfo is not None:
            next_date = next_date.replace(tzinfo=None) - next_date.utcoffset()
        return Recurring(frequency=self.frequency, next_date=next_date)


ScheduleIn = Annotated[Union[OneOffSchedule, RecurringSchedule], Field(discriminator="kind")]


class ExpenseCreate(CamelModel):
    amount: Decimal = Field(..., gt=0)
    date: Optional[datetime] = None
    vendor: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    receipt_url: Optional[str] = None
    status: ExpenseStatus = ExpenseStatus.pending
    incurred_by_id: int
    project_id: Optional[str] = None
    inventory_item_id: Optional[str] = None
    quarter: Optional[str] = None
    schedule: ScheduleIn = Field(default_factory=OneOffSchedule)


class ExpenseUpdate(PatchModel):
    amount: Optional[Decimal] = Field(None, gt=0)
    date: Optional[datetime] = None
    vendor: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    receipt_url: Optional[str] = None
    status: Optional[ExpenseStatus] = None
    project_id: Optional[str] = None
    inventory_item_id: Optional[str] = None
    quarter: Optional[str] = None
    schedule: Optional[ScheduleIn] = None

    @field_validator("amount", "date", "vendor", "category", "status")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ExpenseOut(CamelModel):
    id: str
    amount: Decimal
    date: Optional[datetime] = None
    vendor: str
    description: Optional[str] = None
    category: str
    receipt_url: Optional[str] = None
    status: ExpenseStatus
    incurred_by_id: int
    project_id: Optional[str] = None
    inventory_item_id: Optional[str] = None
    quarter: Optional[str] = None
    is_recurring: bool
    recurring_frequency: Optional[RecurringFrequency] = None
    next_recurring_date: Optional[datetime] = None


class ExpenseResponse(CamelModel):
    expense: ExpenseOut


class ExpenseListResponse(CamelModel):
    expenses: list[ExpenseOut]


class RecurringRunResult(CamelModel):
    processed: int
    created_expense_ids: list[str] = []
    failed_template_ids: list[str] = []
    message: str
