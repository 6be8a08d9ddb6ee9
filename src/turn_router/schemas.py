from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Attachment:
    content_type: str
    content_url: str
    name: Optional[str] = None
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the camelCase shape transports expect."""
        result = {
            "contentType": self.content_type,
            "contentUrl": self.content_url,
        }

        if self.name:
            result["name"] = self.name

        if self.thumbnail_url:
            result["thumbnailUrl"] = self.thumbnail_url

        return result


@dataclass
class TurnResponse:
    session_id: str
    text: str
    attachments: List[Attachment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "text": self.text,
            "attachments": [attachment.to_dict() for attachment in self.attachments],
        }
