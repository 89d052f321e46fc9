"""AI-assisted project clustering.

An alternate strategy behind the same interface as the rule-based
clusterer. The model itself is an injected collaborator; this module only
builds the prompt, validates the response and converts it to clusters.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from typing import Protocol

import structlog
from pydantic import ValidationError

from bid_lens.clustering.models import EmailSignal
from bid_lens.clustering.rule_based import (
    cluster_emails_rule_based,
    empty_clustering_result,
    generate_cluster_id,
    summarize_clusters,
)
from bid_lens.clustering.similarity import DEFAULT_CLUSTERING_CONFIG
from bid_lens.core.exceptions import ClusteringError
from bid_lens.schemas.clustering import (
    AIClusteringResponse,
    ClusteringConfig,
    ClusteringResult,
    ProjectCluster,
)

logger = structlog.get_logger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\n?")

AI_CLUSTERING_SYSTEM_PROMPT = """You group construction and HVAC bid request emails by project.

You receive a list of emails with extracted metadata. Group emails about the
same construction project together.

Signals, most important first:
- Project name
- Project address or location
- General contractor
- Engineer and architect
- Subject patterns
- Purchaser company

Rules:
1. Each email belongs to exactly one cluster or is listed as unclustered
2. Emails from the same thread belong to the same cluster
3. Group emails whose project name, address or GC closely match
4. When uncertain, keep emails separate
5. Name each cluster after its project (e.g. "Byron WWTP - Improvements")

Respond with valid JSON only."""

AI_CLUSTERING_PROMPT_TEMPLATE = """Group these emails into project clusters:

EMAILS:
{emails}

Respond with this exact JSON structure:
{{
  "clusters": [
    {{
      "clusterName": "Project Name - Description",
      "emailIds": ["id1", "id2"],
      "reasoning": "Why these emails belong together",
      "confidence": 0.85,
      "projectInfo": {{
        "name": "Project name or null",
        "address": "Project address or null",
        "generalContractor": "GC name or null",
        "engineer": "Engineer or null",
        "architect": "Architect or null"
      }}
    }}
  ],
  "unclustered": ["ids of emails that fit no cluster"],
  "notes": ["Observations about the grouping"]
}}"""


class LLMCompleter(Protocol):
    """Text completion collaborator used for AI clustering."""

    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        """Return the model's completion for the prompt."""
        ...


def build_clustering_prompt(emails: list[EmailSignal]) -> str:
    """Render the clustering prompt for a batch of emails."""
    payload = [
        {
            "id": email.email_id,
            "threadId": email.thread_id,
            "subject": email.subject,
            "from": email.from_address,
            "date": email.date,
            "projectName": email.project_name,
            "projectAddress": email.project_address,
            "generalContractor": email.general_contractor,
            "engineer": email.engineer,
            "architect": email.architect,
            "purchaser": email.purchaser_company,
        }
        for email in emails
    ]
    return AI_CLUSTERING_PROMPT_TEMPLATE.format(emails=json.dumps(payload, indent=2))


def parse_clustering_response(response: str) -> AIClusteringResponse:
    """Parse and validate a model response.

    Args:
        response: Raw model output, possibly wrapped in markdown fences.

    Returns:
        Validated clustering response.

    Raises:
        ClusteringError: If the output is not valid JSON or fails validation.
    """
    cleaned = CODE_FENCE_PATTERN.sub("", response).strip()

    try:
        return AIClusteringResponse.model_validate(json.loads(cleaned))
    except json.JSONDecodeError as e:
        raise ClusteringError(f"Clustering response is not valid JSON: {e}", response) from e
    except ValidationError as e:
        raise ClusteringError(f"Clustering response failed validation: {e}", response) from e


async def _cluster_chunk(
    emails: list[EmailSignal],
    completer: LLMCompleter,
) -> tuple[list[ProjectCluster], list[str]]:
    response = await completer.complete(
        build_clustering_prompt(emails), AI_CLUSTERING_SYSTEM_PROMPT
    )

    try:
        parsed = parse_clustering_response(response)
    except ClusteringError as e:
        logger.error("ai_clustering_response_invalid", reason=e.reason)
        raise

    clusters = [
        ProjectCluster(
            id=generate_cluster_id(),
            name=suggestion.cluster_name,
            project=suggestion.project_info,
            email_ids=suggestion.email_ids,
            confidence=suggestion.confidence,
            clustering_method="ai",
            created_at=datetime.now(UTC),
        )
        for suggestion in parsed.clusters
    ]
    return clusters, parsed.unclustered


async def cluster_emails_with_ai(
    emails: list[EmailSignal],
    completer: LLMCompleter,
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
) -> ClusteringResult:
    """Cluster emails with a language model.

    Batches larger than ``config.max_batch_size`` are split into chunks that
    are clustered independently and concatenated.

    Args:
        emails: Emails to cluster.
        completer: Model collaborator.
        config: Clustering configuration.

    Returns:
        ClusteringResult with method "ai".

    Raises:
        ClusteringError: If any chunk's response is unusable.
    """
    if not emails:
        return empty_clustering_result("ai")

    clusters: list[ProjectCluster] = []
    unclustered: list[str] = []

    for start in range(0, len(emails), config.max_batch_size):
        chunk = emails[start : start + config.max_batch_size]
        chunk_clusters, chunk_unclustered = await _cluster_chunk(chunk, completer)
        clusters.extend(chunk_clusters)
        unclustered.extend(chunk_unclustered)

    logger.debug(
        "ai_clustering_complete",
        total_emails=len(emails),
        total_clusters=len(clusters),
        unclustered=len(unclustered),
    )

    return ClusteringResult(
        clusters=clusters,
        unclustered=unclustered,
        summary=summarize_clusters(len(emails), clusters),
        processed_at=datetime.now(UTC),
        method="ai",
    )


async def cluster_emails(
    emails: list[EmailSignal],
    config: ClusteringConfig = DEFAULT_CLUSTERING_CONFIG,
    completer: LLMCompleter | None = None,
) -> ClusteringResult:
    """Cluster emails with the configured strategy.

    The AI strategy runs only when ``config.use_ai`` is set and a completer
    is supplied; otherwise the rule-based clusterer is used.
    """
    if config.use_ai and completer is not None:
        return await cluster_emails_with_ai(emails, completer, config)
    return cluster_emails_rule_based(emails, config)
