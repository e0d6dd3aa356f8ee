"""Domain layer for fundbook."""

from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.journal import JournalService, build_journal_entries
from fundbook.domain.replay import BalanceReplayEngine
from fundbook.domain.cleanup import LegacyCleanup
from fundbook.domain.analysis import CashAnalysisService
from fundbook.domain.records import RecordService

__all__ = [
    "AccountDirectory",
    "JournalService",
    "build_journal_entries",
    "BalanceReplayEngine",
    "LegacyCleanup",
    "CashAnalysisService",
    "RecordService",
]
