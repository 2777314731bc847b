"""
Exception hierarchy for Gannicus.

Schema and provider-configuration errors are fatal and raised before any
record is generated. Backend, field and record errors are recoverable by
policy and end up in the run's error list.
"""

from typing import List, Optional


class GannicusError(Exception):
    """Base class for all Gannicus errors."""


class SchemaError(GannicusError):
    """Raised when a schema is invalid (missing reference, bad range, empty enum)."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.field_name = field_name


class CircularDependencyError(SchemaError):
    """Raised when depends/coherence edges form a cycle."""

    def __init__(self, path: List[str]):
        self.path = list(path)
        super().__init__(
            f"Circular dependency detected: {' -> '.join(self.path)}",
            field_name=self.path[0] if self.path else None,
        )


class ProviderConfigError(GannicusError):
    """Raised for an unknown backend name or a missing required model."""


class BackendError(GannicusError):
    """Raised by backend adapters on transport failure, timeout or malformed response."""

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(message)
        self.backend = backend


class FieldGenerationError(GannicusError):
    """A single field could not be produced for a record."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        record_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.field_name = field_name
        self.record_index = record_index


class FieldValidationError(FieldGenerationError):
    """A field value was rejected by ``validate_field``."""


class RecordValidationError(GannicusError):
    """A record was rejected by ``validate_record``."""

    def __init__(self, message: str, record_index: Optional[int] = None):
        super().__init__(message)
        self.record_index = record_index
