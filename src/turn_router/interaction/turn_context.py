"""
Per-turn reply channel handed to handlers.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..matching import MatchResult
from ..schemas import Attachment, TurnResponse


@dataclass
class TurnContext:
    """Collects the responses a handler produces during one turn."""
    session_id: str
    match: Optional[MatchResult] = None
    responses: List[TurnResponse] = field(default_factory=list)

    def post(self, text: str, attachments: Optional[Sequence[Attachment]] = None) -> None:
        """Queue a response for the transport."""
        self.responses.append(
            TurnResponse(
                session_id=self.session_id,
                text=text,
                attachments=list(attachments or []),
            )
        )
