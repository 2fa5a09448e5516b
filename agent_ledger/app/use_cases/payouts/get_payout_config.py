"""GetPayoutConfig Use Case

Static payout configuration, mirrored by clients for input validation.
"""

from libs.result import Result, Return
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import PayoutConfigDTO


def format_cents(amount_cents: int) -> str:
    return f"${amount_cents / 100:,.2f}"


class GetPayoutConfig:

    def __init__(self, policy: LedgerPolicy):
        self.policy = policy

    def execute(self) -> Result[PayoutConfigDTO]:
        policy = self.policy
        return Return.ok(
            PayoutConfigDTO(
                minimum_payout_cents=policy.minimum_payout_cents,
                maximum_payout_cents=policy.maximum_payout_cents,
                platform_fee_percentage=policy.platform_fee_percentage,
                creator_earnings_percentage=policy.creator_earnings_percentage,
                formatted={
                    "minimum_payout": format_cents(policy.minimum_payout_cents),
                    "maximum_payout": format_cents(policy.maximum_payout_cents),
                    "platform_fee_percentage": f"{policy.platform_fee_percentage}%",
                    "creator_earnings_percentage": f"{policy.creator_earnings_percentage}%",
                },
            )
        )
