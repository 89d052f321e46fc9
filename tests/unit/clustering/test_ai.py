"""Tests for AI-assisted clustering."""

from __future__ import annotations

import json
from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from bid_lens.clustering.ai import (
    AI_CLUSTERING_SYSTEM_PROMPT,
    build_clustering_prompt,
    cluster_emails,
    cluster_emails_with_ai,
    parse_clustering_response,
)
from bid_lens.clustering.models import EmailSignal
from bid_lens.core.exceptions import ClusteringError
from bid_lens.schemas.clustering import ClusteringConfig

SignalFactory = Callable[..., EmailSignal]


def response_for(*groups: list[str]) -> str:
    """Build a model response with one cluster per group."""
    return json.dumps(
        {
            "clusters": [
                {
                    "clusterName": f"Project {index}",
                    "emailIds": group,
                    "reasoning": "Same project name",
                    "confidence": 0.8,
                    "projectInfo": {"name": f"Project {index}", "address": None},
                }
                for index, group in enumerate(groups)
            ],
            "unclustered": [],
            "notes": [],
        }
    )


def make_completer(*responses: str) -> AsyncMock:
    """Completer mock returning the given responses in order."""
    completer = AsyncMock()
    completer.complete.side_effect = list(responses)
    return completer


class TestBuildClusteringPrompt:
    """Tests for build_clustering_prompt function."""

    def test_includes_email_fields(self, make_signal: SignalFactory) -> None:
        """Test each email's metadata is embedded as JSON."""
        prompt = build_clustering_prompt(
            [make_signal("a", subject="RFQ Byron", project_name="Byron WWTP")]
        )

        assert '"id": "a"' in prompt
        assert '"projectName": "Byron WWTP"' in prompt
        assert '"clusterName"' in prompt


class TestParseClusteringResponse:
    """Tests for parse_clustering_response function."""

    def test_plain_json(self) -> None:
        """Test a bare JSON response."""
        parsed = parse_clustering_response(response_for(["a", "b"]))

        assert parsed.clusters[0].email_ids == ["a", "b"]
        assert parsed.clusters[0].project_info.name == "Project 0"

    def test_strips_code_fences(self) -> None:
        """Test markdown fenced JSON is accepted."""
        parsed = parse_clustering_response(f"```json\n{response_for(['a'])}\n```")

        assert len(parsed.clusters) == 1

    def test_invalid_json(self) -> None:
        """Test non-JSON output raises."""
        with pytest.raises(ClusteringError) as exc_info:
            parse_clustering_response("I could not decide")

        assert exc_info.value.raw_response == "I could not decide"

    def test_schema_violation(self) -> None:
        """Test JSON with the wrong shape raises."""
        with pytest.raises(ClusteringError):
            parse_clustering_response('{"clusters": [{"clusterName": "A"}]}')


class TestClusterEmailsWithAI:
    """Tests for cluster_emails_with_ai function."""

    @pytest.mark.asyncio
    async def test_converts_suggestions(self, make_signal: SignalFactory) -> None:
        """Test suggestions become AI clusters."""
        completer = make_completer(response_for(["a", "b"], ["c"]))
        emails = [make_signal("a"), make_signal("b"), make_signal("c")]

        result = await cluster_emails_with_ai(emails, completer)

        assert result.method == "ai"
        assert [c.email_ids for c in result.clusters] == [["a", "b"], ["c"]]
        assert all(c.clustering_method == "ai" for c in result.clusters)
        assert result.summary.total_clusters == 2
        _, system_prompt = completer.complete.call_args.args
        assert system_prompt == AI_CLUSTERING_SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_chunks_by_batch_size(self, make_signal: SignalFactory) -> None:
        """Test large batches are split into several calls."""
        completer = make_completer(response_for(["a", "b"]), response_for(["c"]))
        config = ClusteringConfig(max_batch_size=2)
        emails = [make_signal("a"), make_signal("b"), make_signal("c")]

        result = await cluster_emails_with_ai(emails, completer, config)

        assert completer.complete.await_count == 2
        assert len(result.clusters) == 2

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        """Test no model call for an empty batch."""
        completer = make_completer()

        result = await cluster_emails_with_ai([], completer)

        assert result.clusters == []
        completer.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_response_raises(self, make_signal: SignalFactory) -> None:
        """Test an unusable response propagates as ClusteringError."""
        completer = make_completer("not json")

        with pytest.raises(ClusteringError):
            await cluster_emails_with_ai([make_signal("a")], completer)


class TestClusterEmails:
    """Tests for the cluster_emails dispatcher."""

    @pytest.mark.asyncio
    async def test_rule_based_by_default(self, make_signal: SignalFactory) -> None:
        """Test the completer is ignored unless AI is enabled."""
        completer = make_completer()

        result = await cluster_emails([make_signal("a")], ClusteringConfig(), completer)

        assert result.method == "rule_based"
        completer.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ai_requires_completer(self, make_signal: SignalFactory) -> None:
        """Test enabling AI without a completer falls back to rules."""
        result = await cluster_emails([make_signal("a")], ClusteringConfig(use_ai=True))

        assert result.method == "rule_based"

    @pytest.mark.asyncio
    async def test_ai_when_enabled(self, make_signal: SignalFactory) -> None:
        """Test the AI strategy runs when enabled with a completer."""
        completer = make_completer(response_for(["a"]))

        result = await cluster_emails([make_signal("a")], ClusteringConfig(use_ai=True), completer)

        assert result.method == "ai"
