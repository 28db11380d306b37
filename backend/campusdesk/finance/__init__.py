"""Expenses and recurring expense processing."""
from .service import ExpenseService, add_months, clone_occurrence, next_recurring_date
from .router import router as finance_router

__all__ = [
    'ExpenseService',
    'add_months',
    'clone_occurrence',
    'next_recurring_date',
    'finance_router',
]
