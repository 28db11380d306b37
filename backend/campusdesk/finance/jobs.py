"""Entry point for the external scheduler that triggers the recurring roll-forward."""
import logging

from campusdesk.database import get_db_session
from .schemas import RecurringRunResult
from .service import ExpenseService

logger = logging.getLogger(__name__)


def run_recurring_expenses() -> RecurringRunResult:
    with get_db_session() as db:
        result = ExpenseService(db).process_recurring_expenses()
    logger.info(result.message)
    return result


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    result = run_recurring_expenses()
    if result.failed_template_ids:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
