"""
Result types for a generation run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..utils.cost import CostEstimate


@dataclass
class GenerationError:
    """A recorded field- or record-level failure."""
    record_index: int
    message: str
    error_type: str
    field_name: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        record_index: int,
        field_name: Optional[str] = None,
    ) -> "GenerationError":
        return cls(
            record_index=record_index,
            message=str(error),
            error_type=type(error).__name__,
            field_name=field_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record_index": self.record_index,
            "field_name": self.field_name,
            "message": self.message,
            "error_type": self.error_type,
            "timestamp": self.timestamp,
        }


@dataclass
class GenerationStats:
    """Run statistics."""
    total_records: int = 0
    requested_records: int = 0
    llm_calls: int = 0
    """Values requested for LLM fields (cache hits included)."""

    backend_calls: int = 0
    """Requests that missed the cache and went to the backend."""

    cache_hits: int = 0
    cache_hit_rate: float = 0.0
    filtered: int = 0
    errors: int = 0
    duration_ms: float = 0.0
    provider: str = ""
    model: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_records": self.total_records,
            "requested_records": self.requested_records,
            "llm_calls": self.llm_calls,
            "backend_calls": self.backend_calls,
            "cache_hits": self.cache_hits,
            "cache_hit_rate": self.cache_hit_rate,
            "filtered": self.filtered,
            "errors": self.errors,
            "duration_ms": round(self.duration_ms, 2),
            "provider": self.provider,
            "model": self.model,
        }


@dataclass
class GenerationMetadata:
    """Run metadata."""
    schema_fields: List[str] = field(default_factory=list)
    execution_order: List[str] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)
    cost_estimate: Optional[CostEstimate] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_fields": self.schema_fields,
            "execution_order": self.execution_order,
            "options": self.options,
            "cost_estimate": self.cost_estimate.to_dict() if self.cost_estimate else None,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }


@dataclass
class GenerationResult:
    """Generated records plus statistics, metadata and recovered errors."""
    data: List[Dict[str, Any]] = field(default_factory=list)
    stats: GenerationStats = field(default_factory=GenerationStats)
    metadata: GenerationMetadata = field(default_factory=GenerationMetadata)
    errors: List[GenerationError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "stats": self.stats.to_dict(),
            "metadata": self.metadata.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
        }
