"""Application services."""
from raffle.application.services.funds_ledger import FundsLedger

__all__ = ["FundsLedger"]
