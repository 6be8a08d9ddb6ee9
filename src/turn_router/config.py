from dataclasses import dataclass, field
from typing import List, Optional, Tuple


DEFAULT_KNOWLEDGE_BASE_ENDPOINT = "https://westus.api.cognitive.microsoft.com/qnamaker/v3.0"


@dataclass
class TurnRouterConfig:
    # Knowledge base
    knowledge_base_id: Optional[str] = None
    subscription_key: Optional[str] = None
    knowledge_base_endpoint: str = DEFAULT_KNOWLEDGE_BASE_ENDPOINT
    max_answers: int = 5
    metadata_boost: List[Tuple[str, str]] = field(default_factory=list)
    metadata_filter: List[Tuple[str, str]] = field(default_factory=list)

    # Lookup bounds
    timeout_seconds: float = 5.0
    score_scale: float = 1.0

    # Phrase matching
    phrase_threshold: float = 0.5

    # Dialog behavior
    initial_message: Optional[str] = None
    no_match_message: Optional[str] = None

    @property
    def has_knowledge_base(self) -> bool:
        """Check if knowledge base credentials are present."""
        return bool(self.knowledge_base_id) and bool(self.subscription_key)
