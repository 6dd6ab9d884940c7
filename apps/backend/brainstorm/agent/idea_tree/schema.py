from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

IdeaLabel = Literal[
    "AI Section Suggestion",
    "AI Question",
    "AI Stimulating Question",
    "Domain Expert Opinion",
]

SECTION_SUGGESTION: IdeaLabel = "AI Section Suggestion"
QUESTION: IdeaLabel = "AI Question"
STIMULATING_QUESTION: IdeaLabel = "AI Stimulating Question"
EXPERT_OPINION: IdeaLabel = "Domain Expert Opinion"


def as_list(value: Any) -> Any:
    """Promote a bare value to a one-element list; Absent becomes empty."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class IdeaNode(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    label: IdeaLabel
    helper: Optional[str] = None
    content: str
    children: list[IdeaNode] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _promote_children(cls, value: Any) -> Any:
        return as_list(value)


class IdeaTree(BaseModel):
    model_config = ConfigDict(extra="forbid")

    root: list[IdeaNode]

    @field_validator("root", mode="before")
    @classmethod
    def _promote_root(cls, value: Any) -> Any:
        return as_list(value)


class IdeaTreeOutput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    thought: Optional[str] = None
    tree: IdeaTree


class IdeaTreeResponse(BaseModel):
    output: IdeaTreeOutput


class RoleThought(BaseModel):
    """One role-attributed opinion or question."""

    model_config = ConfigDict(extra="allow")

    name: str
    thoughts: str


class OpinionList(BaseModel):
    model_config = ConfigDict(extra="allow")

    opinion: list[RoleThought]

    @field_validator("opinion", mode="before")
    @classmethod
    def _promote_opinion(cls, value: Any) -> Any:
        return as_list(value)


class OpinionsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    opinions: OpinionList


class QuestionList(BaseModel):
    model_config = ConfigDict(extra="allow")

    question: list[RoleThought]

    @field_validator("question", mode="before")
    @classmethod
    def _promote_question(cls, value: Any) -> Any:
        return as_list(value)


class QuestionsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    questions: QuestionList
