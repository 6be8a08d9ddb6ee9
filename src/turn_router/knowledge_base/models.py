"""
Wire models for the knowledge-base generateAnswer call.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ..schemas import Attachment
from .attachments import extract_attachments

NO_ANSWER_ID = -1


class Metadata(BaseModel):
    name: str
    value: str


class KnowledgeBaseQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    top: int = Field(default=5, ge=1)
    user_id: str = Field(default="TurnRouter", alias="userId")
    metadata_boost: List[Metadata] = Field(default_factory=list, alias="metadataBoost")
    strict_filters: List[Metadata] = Field(default_factory=list, alias="strictFilters")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class KnowledgeBaseAnswer(BaseModel):
    """
    One answer returned by the knowledge base.

    Attachment markup is stripped from answer_text on validation and the
    parsed attachments are appended to ``attachments``. Scores are divided
    by the ``score_scale`` validation context when one is given, so
    percentage scores land in [0, 1].
    """
    model_config = ConfigDict(populate_by_name=True)

    score: float = 0.0
    answer_id: Optional[int] = Field(default=None, alias="qnaId")
    answer_text: str = Field(default="", alias="answer")
    source: Optional[str] = None
    source_questions: List[str] = Field(default_factory=list, alias="questions")
    metadata: List[Metadata] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _default_score(cls, value):
        return 0.0 if value is None else value

    @field_validator("score")
    @classmethod
    def _scale_score(cls, value: float, info: ValidationInfo) -> float:
        scale = (info.context or {}).get("score_scale", 1.0)
        return value / scale

    @field_validator("answer_text", mode="before")
    @classmethod
    def _default_text(cls, value):
        return "" if value is None else value

    @field_validator("source_questions", "metadata", "attachments", mode="before")
    @classmethod
    def _default_list(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _extract_attachments(self) -> "KnowledgeBaseAnswer":
        text, attachments = extract_attachments(self.answer_text)
        self.answer_text = text
        self.attachments = list(self.attachments) + attachments
        return self


class KnowledgeBaseResult(BaseModel):
    answers: List[KnowledgeBaseAnswer] = Field(default_factory=list)

    @field_validator("answers", mode="before")
    @classmethod
    def _default_answers(cls, value):
        return [] if value is None else value

    @property
    def top_answer(self) -> Optional[KnowledgeBaseAnswer]:
        return self.answers[0] if self.answers else None

    @property
    def is_no_answer(self) -> bool:
        """
        Sentinel "nothing usable" signal from the knowledge base.

        True when there are no answers, the top answer carries the
        no-answer id, or its score is exactly zero.
        """
        top = self.top_answer
        if top is None:
            return True
        return top.answer_id == NO_ANSWER_ID or top.score == 0
