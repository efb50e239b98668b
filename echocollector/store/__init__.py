"""
Record store for Financial Echo Collector.

All writes to echoes and tones go through the repository.
"""

from echocollector.store.repository import EchoRepository, DEFAULT_TONES
from echocollector.core.validation import EchoDraft

__all__ = ["EchoRepository", "EchoDraft", "DEFAULT_TONES"]
