"""Expense endpoints, including the recurring roll-forward trigger."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from campusdesk.auth import Action, Resource, User, require
from campusdesk.database import get_db
from .schemas import (
    ExpenseCreate, ExpenseListResponse, ExpenseResponse, ExpenseUpdate, RecurringRunResult,
)
from .service import ExpenseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/expenses", tags=["Finance"])

manage_expenses = require(Resource.expenses, Action.manage)


def get_expense_service(db: Session = Depends(get_db)) -> ExpenseService:
    return ExpenseService(db)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    body: ExpenseCreate,
    current_user: User = Depends(manage_expenses),
    service: ExpenseService = Depends(get_expense_service),
):
    try:
        return {"expense": service.create_expense(body)}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to create expense")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create expense"
        )


@router.get("/recurring", response_model=ExpenseListResponse)
def list_recurring_expenses(
    current_user: User = Depends(manage_expenses),
    service: ExpenseService = Depends(get_expense_service),
):
    return {"expenses": service.list_recurring()}


@router.post("/recurring/process", response_model=RecurringRunResult)
def process_recurring_expenses(
    current_user: User = Depends(manage_expenses),
    service: ExpenseService = Depends(get_expense_service),
):
    """Clone every due recurring template and advance its schedule."""
    try:
        return service.process_recurring_expenses()
    except HTTPException:
        raise
    except Exception:
        logger.exception("[RECURRING_PROCESS] failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process recurring expenses"
        )


@router.patch("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: str,
    body: ExpenseUpdate,
    current_user: User = Depends(manage_expenses),
    service: ExpenseService = Depends(get_expense_service),
):
    try:
        return {"expense": service.update_expense(expense_id, body)}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to update expense")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update expense"
        )
