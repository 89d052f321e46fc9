"""Project clustering schema definitions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Literal

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from bid_lens.schemas.base import BoundaryModel

if TYPE_CHECKING:
    from bid_lens.core.config import BidLensSettings

ClusteringMethod = Literal["ai", "rule_based", "manual"]
ClusteringRunMethod = Literal["ai", "rule_based", "hybrid"]


class SignalWeights(BoundaryModel):
    """Weights applied to each field comparison."""

    subject: float = Field(0.2, ge=0.0, le=1.0)
    project_name: float = Field(0.25, ge=0.0, le=1.0)
    address: float = Field(0.35, ge=0.0, le=1.0)
    gc: float = Field(0.1, ge=0.0, le=1.0)
    engineer: float = Field(0.05, ge=0.0, le=1.0)
    architect: float = Field(0.05, ge=0.0, le=1.0)


class ClusteringConfig(BoundaryModel):
    """Configuration for a clustering pass."""

    similarity_threshold: float = Field(
        0.6, ge=0.0, le=1.0, description="Minimum score to consider emails related"
    )
    use_ai: bool = Field(False, description="Use the AI clustering strategy")
    signal_weights: SignalWeights = Field(default_factory=SignalWeights)
    max_batch_size: int = Field(50, ge=1, description="Maximum emails per AI call")

    @classmethod
    def from_settings(cls, settings: BidLensSettings) -> ClusteringConfig:
        """Build a clustering config from application settings."""
        return cls(
            similarity_threshold=settings.similarity_threshold,
            use_ai=settings.use_ai,
            max_batch_size=settings.max_batch_size,
            signal_weights=SignalWeights(
                subject=settings.weight_subject,
                project_name=settings.weight_project_name,
                address=settings.weight_address,
                gc=settings.weight_gc,
                engineer=settings.weight_engineer,
                architect=settings.weight_architect,
            ),
        )


class ProjectInfo(BoundaryModel):
    """Canonical project attributes for a cluster."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str | None = None
    address: str | None = None
    general_contractor: str | None = None
    engineer: str | None = None
    architect: str | None = None


class ProjectCluster(BoundaryModel):
    """A set of emails believed to concern the same project."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., description="Generated cluster ID")
    name: str = Field(..., description="Display name")
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    email_ids: list[str] = Field(default_factory=list, description="Member email IDs")
    confidence: float = Field(..., ge=0.0, le=1.0)
    clustering_method: ClusteringMethod = "rule_based"
    created_at: datetime = Field(..., description="When the cluster was formed")


class ClusteringSummary(BoundaryModel):
    """Aggregate statistics for a clustering pass."""

    total_emails: int = 0
    total_clusters: int = 0
    average_cluster_size: float = 0.0
    average_confidence: float = 0.0


class ClusteringResult(BoundaryModel):
    """Output of a clustering pass."""

    clusters: list[ProjectCluster] = Field(default_factory=list)
    unclustered: list[str] = Field(default_factory=list)
    summary: ClusteringSummary = Field(default_factory=ClusteringSummary)
    processed_at: datetime
    method: ClusteringRunMethod


class AIClusterSuggestion(BoundaryModel):
    """One cluster proposed by the model."""

    cluster_name: str
    email_ids: list[str]
    reasoning: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)


class AIClusteringResponse(BoundaryModel):
    """Validated JSON response from the clustering model."""

    clusters: list[AIClusterSuggestion] = Field(default_factory=list)
    unclustered: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
