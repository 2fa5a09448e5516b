"""Ledger policy

Revenue split, payout limits and the two policy switches the ledger
exposes: whether owners earn from executing their own agents, and whether
a failed payout hands its reservation back to pending earnings.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerPolicy:
    platform_fee_percentage: int = 10
    minimum_payout_cents: int = 500
    maximum_payout_cents: int = 1000000
    minimum_purchase_cents: int = 500
    maximum_purchase_cents: int = 100000
    default_currency: str = "usd"
    allow_self_earnings: bool = True
    restore_earnings_on_failed_payout: bool = False

    @property
    def creator_earnings_percentage(self) -> int:
        return 100 - self.platform_fee_percentage

    @classmethod
    def from_config(cls, config) -> "LedgerPolicy":
        return cls(
            platform_fee_percentage=int(config.PLATFORM_FEE_PERCENTAGE),
            minimum_payout_cents=int(config.MINIMUM_PAYOUT_CENTS),
            maximum_payout_cents=int(config.MAXIMUM_PAYOUT_CENTS),
            minimum_purchase_cents=int(config.MINIMUM_PURCHASE_CENTS),
            maximum_purchase_cents=int(config.MAXIMUM_PURCHASE_CENTS),
            default_currency=config.DEFAULT_CURRENCY,
            allow_self_earnings=bool(config.ALLOW_SELF_EARNINGS),
            restore_earnings_on_failed_payout=bool(config.RESTORE_EARNINGS_ON_FAILED_PAYOUT),
        )
