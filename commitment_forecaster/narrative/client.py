"""
Text-completion client used to narrate a projection summary in prose.

The service speaks the OpenAI-style chat-completions protocol of a hosted
model deployment:

  POST {endpoint}openai/deployments/{deployment}/chat/completions
       ?api-version={api_version}
    → Header: api-key: <key from the credential cache>
    → Body:   {"model": ..., "messages": [...], "temperature": ..., "max_tokens": ...}
    → Returns: {"choices": [{"message": {"role": "assistant", "content": "..."}}]}

No numeric result depends on the narrative; it is purely presentational.

Usage::

    cache  = CredentialCache(EnvSecretFetcher(), ttl_seconds=3600)
    client = NarrativeClient(config.narrative, cache)
    text   = client.narrate_summary(projection)
"""

from __future__ import annotations

import json
import logging
from typing import Literal, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict

from commitment_forecaster.config import NarrativeConfig
from commitment_forecaster.credentials.cache import CredentialCache
from commitment_forecaster.models.projection import Projection

logger = logging.getLogger(__name__)

SUMMARY_TEMPERATURE = 0.5
SUMMARY_MAX_TOKENS = 200

_SYSTEM_PROMPT = (
    "You are a business analyst writing executive summaries. Be concise, "
    "professional, and actionable. Write in plain English, not bullet points."
)


class NarrativeServiceError(RuntimeError):
    """Raised when the completion service fails or returns an unusable body.

    Attributes:
        status_code: HTTP status of the failed call, or ``None`` when the
            failure happened before a response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ChatMessage(BaseModel):
    """One role-tagged message of a chat-completion request."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


def build_summary_messages(projection: Projection) -> list[ChatMessage]:
    """Compose the system/user prompt asking for a 2–3 sentence summary."""
    s = projection.summary
    data = {
        "totalCommitment": projection.commitment.total_commitment,
        "currency": projection.commitment.currency,
        "termMonths": projection.commitment.term_months,
        "totalConsumed": round(s.total_consumed, 2),
        "percentConsumed": round(s.percent_consumed, 1),
        "monthsRemaining": s.months_remaining,
        "currentMonthlyRunRate": round(s.current_monthly_run_rate, 2),
        "projectedEndConsumption": round(s.projected_end_consumption, 2),
        "projectedShortfall": round(s.projected_shortfall, 2),
        "projectedOverage": round(s.projected_overage, 2),
        "riskLevel": s.risk_level,
        "onTrack": s.on_track,
        "topRecommendations": [r.title for r in projection.recommendations[:3]],
    }
    context = "Summarize the consumption position of this spend commitment."
    return [
        ChatMessage(role="system", content=_SYSTEM_PROMPT),
        ChatMessage(
            role="user",
            content=(
                f"{context}\n\nData:\n{json.dumps(data, indent=2)}\n\n"
                "Write a 2-3 sentence executive summary."
            ),
        ),
    ]


class NarrativeClient:
    """Chat-completion client with credentials from a ``CredentialCache``.

    Attributes:
        config: Endpoint, deployment and default sampling parameters.
        credentials: Cache resolving ``config.secret_name`` to an API key.
    """

    def __init__(
        self,
        config: NarrativeConfig,
        credentials: CredentialCache,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config
        self.credentials = credentials
        self._http = http_client or httpx.Client(timeout=config.timeout_s)
        self._owns_http = http_client is None

    @property
    def url(self) -> str:
        return (
            f"{self.config.endpoint}openai/deployments/"
            f"{self.config.deployment}/chat/completions"
        )

    def complete(
        self,
        messages: Sequence[ChatMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Send ``messages`` and return the generated text ("" if none).

        Raises:
            ValueError: If ``messages`` is empty.
            NarrativeServiceError: On transport errors, non-2xx responses,
                or a response body that is not a chat completion.
        """
        if not messages:
            raise ValueError("messages must not be empty.")

        api_key = self.credentials.get(self.config.secret_name)
        payload = {
            "model": self.config.deployment,
            "messages": [m.model_dump() for m in messages],
            "temperature": self.config.temperature if temperature is None else temperature,
            "max_tokens": self.config.max_tokens if max_tokens is None else max_tokens,
        }

        try:
            resp = self._http.post(
                self.url,
                params={"api-version": self.config.api_version},
                headers={"api-key": api_key, "Content-Type": "application/json"},
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise NarrativeServiceError(f"Completion request failed: {exc}") from exc

        if resp.status_code in (401, 403):
            # Rotated key: drop it so the next call refetches from the store.
            self.credentials.invalidate(self.config.secret_name)
        if resp.is_error:
            logger.error("Completion service returned HTTP %d", resp.status_code)
            raise NarrativeServiceError(
                f"Completion service error: HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
            choices = body.get("choices") or []
        except (ValueError, AttributeError) as exc:
            raise NarrativeServiceError(f"Malformed completion response: {exc}") from exc

        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""

    def narrate_summary(self, projection: Projection) -> str:
        """Return a short prose summary of ``projection``."""
        return self.complete(
            build_summary_messages(projection),
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=SUMMARY_MAX_TOKENS,
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "NarrativeClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
