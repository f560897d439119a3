"""
Scheduled background tasks for the library API.

Tasks include:
- Clearing stored refresh tokens that have expired (every TOKEN_SWEEP_MINUTES)
- Reporting overdue transactions (daily)
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from repositories.member_repository import MemberRepository
from repositories.transaction_repository import TransactionRepository
from utils.errors import LibraryError

logger = logging.getLogger(__name__)


def clear_expired_refresh_tokens(app) -> int:
    """Scheduled task: Forget refresh tokens that no longer verify.

    A member whose token was cleared has to log in again.

    Returns:
        Number of tokens cleared.
    """
    with app.app_context():
        try:
            cleared = MemberRepository().clear_expired_tokens()
        except LibraryError as e:
            logger.error(f"Error in clear_expired_refresh_tokens: {e.message}")
            return 0
    if cleared > 0:
        logger.info(f"Cleared {cleared} expired refresh token(s)")
    return cleared


def report_overdue_transactions(app) -> int:
    """Scheduled task: Log issued transactions past their due date.

    Runs daily at 9:00 AM.

    Returns:
        Number of overdue transactions found.
    """
    with app.app_context():
        try:
            overdue = TransactionRepository().overdue()
        except LibraryError as e:
            logger.error(f"Error in report_overdue_transactions: {e.message}")
            return 0
        for transaction in overdue:
            logger.warning(
                f"Transaction {transaction.id} overdue: book {transaction.book_id} "
                f"held by member {transaction.member_id} since {transaction.due_date}"
            )
    if overdue:
        logger.info(f"Found {len(overdue)} overdue transaction(s)")
    return len(overdue)


# Initialize scheduler
scheduler = BackgroundScheduler()


def start_scheduler(app):
    """Schedule the tasks against ``app`` and start the background scheduler."""
    if scheduler.running:
        return

    scheduler.add_job(
        func=clear_expired_refresh_tokens,
        args=[app],
        trigger='interval',
        minutes=app.config['TOKEN_SWEEP_MINUTES'],
        id='clear_expired_refresh_tokens',
        name='Clear expired refresh tokens',
        replace_existing=True
    )

    scheduler.add_job(
        func=report_overdue_transactions,
        args=[app],
        trigger='cron',
        hour=9,
        minute=0,
        id='report_overdue_transactions',
        name='Report overdue transactions',
        replace_existing=True
    )

    scheduler.start()
    logger.info("Scheduled tasks started successfully")


def shutdown_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduled tasks shut down")
