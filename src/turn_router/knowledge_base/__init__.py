"""
Knowledge-base collaborator: wire models, HTTP client, attachment markup.
"""
from .attachments import extract_attachments, parse_directive, strip_attachments
from .models import (
    NO_ANSWER_ID,
    KnowledgeBaseAnswer,
    KnowledgeBaseQuery,
    KnowledgeBaseResult,
    Metadata,
)
from .client import SUBSCRIPTION_KEY_HEADER, KnowledgeBase, KnowledgeBaseClient

__all__ = [
    "extract_attachments",
    "parse_directive",
    "strip_attachments",
    "NO_ANSWER_ID",
    "KnowledgeBaseAnswer",
    "KnowledgeBaseQuery",
    "KnowledgeBaseResult",
    "Metadata",
    "SUBSCRIPTION_KEY_HEADER",
    "KnowledgeBase",
    "KnowledgeBaseClient",
]
