"""GetPlatformRevenueSummary Use Case

Platform-wide view of creator earnings and the platform's share.
"""

from libs.result import Result, Return
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import PlatformRevenueSummaryDTO


class GetPlatformRevenueSummary:
    """
    Derives gross transaction value from creator earnings:
    gross = floor(creator_total * 100 / creator%), platform = gross - creator_total.
    The result is an estimate because per-execution flooring is not replayed.
    """

    def __init__(self, earnings_repo: AgentEarningsRepository, policy: LedgerPolicy):
        self.earnings_repo = earnings_repo
        self.policy = policy

    async def execute(self) -> Result[PlatformRevenueSummaryDTO]:
        rows = await self.earnings_repo.get_all()

        total_creator_earnings = sum(e.total_earnings_cents for e in rows)
        total_executions = sum(e.total_executions for e in rows)

        creator_percentage = self.policy.creator_earnings_percentage
        if creator_percentage > 0:
            gross = (total_creator_earnings * 100) // creator_percentage
        else:
            gross = total_creator_earnings

        return Return.ok(
            PlatformRevenueSummaryDTO(
                total_platform_revenue_cents=gross - total_creator_earnings,
                total_creator_earnings_cents=total_creator_earnings,
                total_executions=total_executions,
                average_revenue_per_execution_cents=(gross / total_executions) if total_executions else 0.0,
            )
        )
