"""SalesLedger package."""

from salesledger.core.config import SalesLedgerConfig
from salesledger.core.engine import compute_stats
from salesledger.core.types import DateFilter

__all__ = ["DateFilter", "SalesLedgerConfig", "compute_stats"]
