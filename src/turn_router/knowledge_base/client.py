"""
HTTP client for a QnA-style knowledge base.

Posts a question to /knowledgebases/{id}/generateAnswer and returns the
parsed answers. Every failure to ask (transport error, timeout, bad
status, unparseable body) surfaces as LookupFailure, never as an empty
result.
"""
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

import httpx
from pydantic import ValidationError

from ..config import DEFAULT_KNOWLEDGE_BASE_ENDPOINT, TurnRouterConfig
from ..exceptions import ConfigurationError, LookupFailure
from .models import KnowledgeBaseQuery, KnowledgeBaseResult, Metadata

logger = logging.getLogger(__name__)

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"


class KnowledgeBase(Protocol):
    """Protocol for the knowledge-base collaborator used by dispatchers."""
    def generate_answer(self, question: str) -> KnowledgeBaseResult:
        ...


def _to_metadata(pairs: Optional[Sequence]) -> List[Metadata]:
    items = []
    for pair in pairs or []:
        if isinstance(pair, Metadata):
            items.append(pair)
        else:
            name, value = pair
            items.append(Metadata(name=name, value=value))
    return items


class KnowledgeBaseClient:
    """
    Synchronous knowledge-base client built on httpx.

    Usage:
        client = KnowledgeBaseClient("kb-id", "subscription-key", max_answers=3)
        result = client.generate_answer("How do I reset my password?")
    """

    def __init__(
        self,
        knowledge_base_id: str,
        subscription_key: str,
        endpoint: str = DEFAULT_KNOWLEDGE_BASE_ENDPOINT,
        max_answers: int = 5,
        metadata_boost: Optional[Sequence[Tuple[str, str]]] = None,
        metadata_filter: Optional[Sequence[Tuple[str, str]]] = None,
        timeout: float = 5.0,
        score_scale: float = 1.0,
        user_id: str = "TurnRouter",
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        :param knowledge_base_id: Knowledge base identifier
        :param subscription_key: Key sent in the subscription header
        :param endpoint: Service base URL
        :param max_answers: Number of answers to request
        :param metadata_boost: (name, value) pairs that boost ranking
        :param metadata_filter: (name, value) pairs answers must carry
        :param timeout: Request timeout in seconds
        :param score_scale: Divisor applied to returned scores
        :param user_id: Caller identity sent with each question
        :param transport: Optional httpx transport (used by tests)
        :raises ConfigurationError: if the identifier or key is missing
        """
        if not knowledge_base_id or not subscription_key:
            raise ConfigurationError(
                "Valid knowledge base id and subscription key not provided. "
                "Set TURN_ROUTER_KB_ID and TURN_ROUTER_SUBSCRIPTION_KEY."
            )
        if max_answers < 1:
            raise ConfigurationError(f"max_answers must be >= 1, got {max_answers}")

        self.knowledge_base_id = knowledge_base_id
        self.max_answers = max_answers
        self.metadata_boost = _to_metadata(metadata_boost)
        self.metadata_filter = _to_metadata(metadata_filter)
        self.user_id = user_id
        self._subscription_key = subscription_key
        self._url = f"{endpoint.rstrip('/')}/knowledgebases/{knowledge_base_id}/generateAnswer"
        self._timeout = timeout
        self._score_scale = score_scale
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport)

    @classmethod
    def from_config(
        cls,
        config: TurnRouterConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "KnowledgeBaseClient":
        return cls(
            knowledge_base_id=config.knowledge_base_id,
            subscription_key=config.subscription_key,
            endpoint=config.knowledge_base_endpoint,
            max_answers=config.max_answers,
            metadata_boost=config.metadata_boost,
            metadata_filter=config.metadata_filter,
            timeout=config.timeout_seconds,
            score_scale=config.score_scale,
            transport=transport,
        )

    def build_query(self, question: str) -> KnowledgeBaseQuery:
        return KnowledgeBaseQuery(
            question=question,
            top=self.max_answers,
            user_id=self.user_id,
            metadata_boost=self.metadata_boost,
            strict_filters=self.metadata_filter,
        )

    def generate_answer(self, question: str) -> KnowledgeBaseResult:
        """
        Ask the knowledge base a question.

        :param question: User question
        :return: Parsed result (may be the sentinel no-answer)
        :raises LookupFailure: if the question could not be asked or the
            response could not be parsed
        """
        payload = self.build_query(question).to_payload()
        headers = {SUBSCRIPTION_KEY_HEADER: self._subscription_key}

        try:
            response = self._client.post(self._url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as err:
            logger.warning(f"Knowledge base lookup timed out after {self._timeout}s")
            raise LookupFailure(
                f"Knowledge base lookup timed out after {self._timeout}s", question
            ) from err
        except httpx.HTTPStatusError as err:
            status = err.response.status_code
            logger.warning(f"Knowledge base returned HTTP {status}")
            raise LookupFailure(f"Knowledge base returned HTTP {status}", question) from err
        except httpx.HTTPError as err:
            logger.warning(f"Knowledge base request failed: {err}")
            raise LookupFailure(f"Knowledge base request failed: {err}", question) from err

        try:
            body = response.json()
        except ValueError as err:
            raise LookupFailure(
                "Unable to deserialize knowledge base response", question
            ) from err

        try:
            result = KnowledgeBaseResult.model_validate(
                body, context={"score_scale": self._score_scale}
            )
        except ValidationError as err:
            raise LookupFailure(
                f"Knowledge base response has an unexpected shape: {err.error_count()} error(s)",
                question,
            ) from err

        logger.info(f"Knowledge base returned {len(result.answers)} answer(s) for '{question}'")
        return result

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "KnowledgeBaseClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
