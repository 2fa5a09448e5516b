"""Earnings ledger and payout workflow use cases"""
from .record_earnings import RecordEarnings
from .get_earnings_summary import GetEarningsSummary
from .get_platform_revenue_summary import GetPlatformRevenueSummary
from .create_payout_request import CreatePayoutRequest
from .process_payout import ProcessPayout
from .reject_payout import RejectPayout
from .list_payouts import ListPayouts
from .get_payout_config import GetPayoutConfig
from .dtos import (
    RecordEarningsCommandDTO,
    EarningsRecordedDTO,
    AgentEarningsBreakdownDTO,
    EarningsSummaryDTO,
    PlatformRevenueSummaryDTO,
    CreatePayoutCommandDTO,
    PayoutResponseDTO,
    ProcessPayoutResponseDTO,
    PayoutConfigDTO,
)

__all__ = [
    "RecordEarnings",
    "GetEarningsSummary",
    "GetPlatformRevenueSummary",
    "CreatePayoutRequest",
    "ProcessPayout",
    "RejectPayout",
    "ListPayouts",
    "GetPayoutConfig",
    "RecordEarningsCommandDTO",
    "EarningsRecordedDTO",
    "AgentEarningsBreakdownDTO",
    "EarningsSummaryDTO",
    "PlatformRevenueSummaryDTO",
    "CreatePayoutCommandDTO",
    "PayoutResponseDTO",
    "ProcessPayoutResponseDTO",
    "PayoutConfigDTO",
]
