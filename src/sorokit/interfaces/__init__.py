"""Protocol interfaces for sorokit collaborators."""

from sorokit.interfaces.source import EventSource
from sorokit.interfaces.ledger import LedgerClient

__all__ = ["EventSource", "LedgerClient"]
