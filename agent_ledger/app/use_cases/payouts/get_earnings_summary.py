"""GetEarningsSummary Use Case

Aggregates an owner's earnings across all their agents. Read-only.
"""

from libs.result import Result, Return
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from .dtos import EarningsSummaryDTO, AgentEarningsBreakdownDTO


class GetEarningsSummary:

    def __init__(self, earnings_repo: AgentEarningsRepository):
        self.earnings_repo = earnings_repo

    async def execute(self, owner_account_id: str) -> Result[EarningsSummaryDTO]:
        rows = await self.earnings_repo.list_by_owner(owner_account_id)

        # Most recently earning agents first, never-earned rows last
        rows = sorted(
            rows,
            key=lambda e: (e.last_earning_at is not None, e.last_earning_at or 0),
            reverse=True,
        )

        return Return.ok(
            EarningsSummaryDTO(
                owner_account_id=owner_account_id,
                total_earnings_cents=sum(e.total_earnings_cents for e in rows),
                pending_earnings_cents=sum(e.pending_earnings_cents for e in rows),
                paid_out_cents=sum(e.paid_out_cents for e in rows),
                total_executions=sum(e.total_executions for e in rows),
                agent_breakdown=[
                    AgentEarningsBreakdownDTO(
                        agent_id=e.agent_id,
                        total_earnings_cents=e.total_earnings_cents,
                        pending_earnings_cents=e.pending_earnings_cents,
                        paid_out_cents=e.paid_out_cents,
                        total_executions=e.total_executions,
                        last_earning_at=e.last_earning_at,
                    )
                    for e in rows
                ],
            )
        )
