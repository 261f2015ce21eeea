"""
Typed result models returned by the pipeline stages.
The final PipelineResult is the sole machine-checkable outcome of a run.
"""
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class LoadMode(str, Enum):
    """Loader strategy"""
    DURABLE = "durable"
    IN_MEMORY = "in_memory"


class PipelineState(str, Enum):
    """Orchestrator states; SUCCEEDED and FAILED are terminal"""
    IDLE = "idle"
    EXTRACTING = "extracting"
    TRANSFORMING = "transforming"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.SUCCEEDED, PipelineState.FAILED)


class LoadResult(BaseModel):
    """Outcome of the load stage"""
    records_loaded: int
    summary_stats: Dict[str, Any] = Field(default_factory=dict)
    mode: LoadMode

    model_config = ConfigDict(frozen=True)


class PipelineResult(BaseModel):
    """Result of one ETL pipeline run"""
    success: bool
    records_extracted: int = 0
    records_transformed: int = 0
    records_loaded: int = 0
    records_rejected: int = 0
    error_message: Optional[str] = None
    execution_time_ms: float = 0.0
    summary_stats: Dict[str, Any] = Field(default_factory=dict)
    load_mode: Optional[LoadMode] = None
    final_state: PipelineState = PipelineState.SUCCEEDED

    model_config = ConfigDict(frozen=True)

    @property
    def success_rate(self) -> float:
        """Share of extracted records that survived transformation"""
        return self.records_transformed / max(self.records_extracted, 1)
