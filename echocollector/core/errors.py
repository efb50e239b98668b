"""
Exceptions raised by Financial Echo Collector.
"""


class EchoCollectorError(Exception):
    """Base class for all application errors."""


class ValidationError(EchoCollectorError, ValueError):
    """A record failed field validation on the write path."""


class CycleError(ValidationError):
    """A parent link would make an echo its own ancestor."""


class InvalidArgumentError(EchoCollectorError, ValueError):
    """A caller passed a value outside an enumerated set."""


class RecordNotFoundError(EchoCollectorError, LookupError):
    """No echo or tone exists with the requested id."""

    def __init__(self, kind: str, record_id: int):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} #{record_id} not found")
