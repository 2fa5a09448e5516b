"""Earnings posting

Books the creator share of an execution inside the caller's unit of work
(no commit), so RecordEarnings and ChargeExecution share one code path.
"""

from typing import Optional
from libs.result import Result, Return
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.use_cases.errors import invalid_amount, is_whole_cents
from agent_ledger.domain.agent_earnings import calculate_revenue_split
from agent_ledger.domain.policy import LedgerPolicy
from agent_ledger.domain.base import utc_now
from .dtos import EarningsRecordedDTO


class EarningsPosting:

    def __init__(self, earnings_repo: AgentEarningsRepository, policy: LedgerPolicy):
        self.earnings_repo = earnings_repo
        self.policy = policy

    async def record(
        self,
        agent_id: str,
        owner_account_id: str,
        execution_cost_cents: int,
        payer_account_id: Optional[str] = None,
    ) -> Result[EarningsRecordedDTO]:
        if not is_whole_cents(execution_cost_cents) or execution_cost_cents < 0:
            return Return.err(
                invalid_amount("Execution cost must be a non-negative whole number of cents", execution_cost_cents)
            )

        platform_fee_cents, creator_earnings_cents = calculate_revenue_split(
            execution_cost_cents, self.policy.platform_fee_percentage
        )

        if payer_account_id == owner_account_id and not self.policy.allow_self_earnings:
            return Return.ok(
                EarningsRecordedDTO(
                    agent_id=agent_id,
                    owner_account_id=owner_account_id,
                    platform_fee_cents=platform_fee_cents,
                    creator_earnings_cents=creator_earnings_cents,
                    total_earnings_cents=0,
                    pending_earnings_cents=0,
                    total_executions=0,
                    recorded=False,
                )
            )

        earnings = await self.earnings_repo.increment(
            agent_id=agent_id,
            owner_account_id=owner_account_id,
            creator_earnings_cents=creator_earnings_cents,
            earned_at=utc_now(),
        )

        return Return.ok(
            EarningsRecordedDTO(
                agent_id=agent_id,
                owner_account_id=owner_account_id,
                platform_fee_cents=platform_fee_cents,
                creator_earnings_cents=creator_earnings_cents,
                total_earnings_cents=earnings.total_earnings_cents,
                pending_earnings_cents=earnings.pending_earnings_cents,
                total_executions=earnings.total_executions,
                recorded=True,
            )
        )
