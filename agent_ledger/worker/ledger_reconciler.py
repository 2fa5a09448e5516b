"""Ledger Reconciliation Background Worker

Periodically audits account balances against transaction history and
earnings rows against their totals. Can be run as a standalone script or
integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from agent_ledger.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from agent_ledger.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from agent_ledger.adapter.repositories.agent_earnings_repository import SqlAlchemyAgentEarningsRepository
from agent_ledger.adapter.services.notification_service import create_notification_service
from agent_ledger.app.services.notification_service import NotificationService
from agent_ledger.app.use_cases.credits import ReconcileLedger, ReconciliationResultDTO
from agent_ledger.domain.base import utc_now

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Background worker for ledger reconciliation

    Features:
    - Compares account balances against transaction sums and chains
    - Checks total = pending + paid_out on every earnings row
    - Alerts through the notification service when discrepancies are found
    - Can run once or continuously

    Usage:
        # Run once
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        worker = LedgerReconcilerWorker()
        await worker.run_forever(interval_seconds=86400)  # Daily
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        webhook_url: Optional[str] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            webhook_url: Discrepancy webhook (defaults to ApplicationConfig.DISCREPANCY_NOTIFICATION_WEBHOOK)
            notification_service: Overrides the service built from webhook_url
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.webhook_url = webhook_url or ApplicationConfig.DISCREPANCY_NOTIFICATION_WEBHOOK

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        self.notification_service = notification_service or create_notification_service(self.webhook_url)

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Returns:
            ReconciliationResultDTO with reconciliation results
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                total_earnings_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                earnings_discrepancies=[],
                reconciliation_time=utc_now(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileLedger(
                account_repo=SqlAlchemyAccountRepository(session),
                transaction_repo=SqlAlchemyCreditTransactionRepository(session),
                earnings_repo=SqlAlchemyAgentEarningsRepository(session),
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

        if response.discrepancies_found > 0:
            logger.error(f"ALERT: {response.discrepancies_found} ledger discrepancies found!")
            sent = await self.notification_service.send_discrepancy_alert(response)
            if not sent:
                logger.error("Discrepancy alert could not be delivered")

        return response

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        Args:
            interval_seconds: Seconds between reconciliation runs (default: 24 hours)
        """
        logger.info(f"Starting continuous ledger reconciliation with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_accounts_checked} accounts and "
                    f"{result.total_earnings_checked} earnings rows, "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m agent_ledger.worker.ledger_reconciler --once

        # Run continuously (default: RECONCILIATION_INTERVAL_SECONDS)
        python -m agent_ledger.worker.ledger_reconciler

        # Run continuously with custom interval (in seconds)
        python -m agent_ledger.worker.ledger_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Ledger Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Accounts checked: {result.total_accounts_checked}")
            print(f"  Earnings rows checked: {result.total_earnings_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.discrepancies:
                print(
                    f"  - Account {d.account_id}: expected={d.calculated_balance_cents}, "
                    f"actual={d.balance_cents}, diff={d.discrepancy_cents}, "
                    f"broken_chain_at={d.broken_chain_at}"
                )
            for d in result.earnings_discrepancies:
                print(
                    f"  - Agent {d.agent_id} (owner {d.owner_account_id}): total={d.total_earnings_cents}, "
                    f"pending={d.pending_earnings_cents}, paid_out={d.paid_out_cents}"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
