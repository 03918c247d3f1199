"""Research plan models.

A plan is produced once per request by the planner and consumed by the executor. The wire
format (what the reasoning engine returns) uses the keys ``search_complexity``,
``search_query`` and ``search_plan``; models accept either the wire keys or field names.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Complexity(str, Enum):
    """How much searching a request needs."""

    SIMPLE = "simple"
    COMPLEX = "complex"


class _StepBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    topic: str
    sub_request: str = ""
    final_answer_outline: str = ""

    @property
    def instructions(self) -> str:
        """Compilation instructions for this step."""

        return f"{self.sub_request}\n\n{self.final_answer_outline}".strip()


class SearchStep(_StepBase):
    """Search the web, read the results and fold the relevant findings."""

    kind: Literal["search"] = "search"
    query: str = Field(alias="search_query", min_length=1)


class ReduceStep(_StepBase):
    """Fold the findings accumulated so far, without searching."""

    kind: Literal["reduce"] = "reduce"


Step = Annotated[Union[SearchStep, ReduceStep], Field(discriminator="kind")]


def _tag_step(item: Any) -> Any:
    if not isinstance(item, dict) or "kind" in item:
        return item
    query = item.get("search_query", item.get("query"))
    kind = "search" if isinstance(query, str) and query.strip() else "reduce"
    return {**item, "kind": kind}


class Plan(BaseModel):
    """Structured interpretation of an information request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    approved: bool
    reason: str = ""
    complexity: Complexity | None = Field(default=None, alias="search_complexity")
    query: str | None = Field(default=None, alias="search_query")
    steps: list[Step] = Field(default_factory=list, alias="search_plan")
    compilation_policy: str = ""

    @field_validator("reason", "compilation_policy", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("query", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("steps", mode="before")
    @classmethod
    def _tag_steps(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [_tag_step(item) for item in v]
        return v

    @model_validator(mode="after")
    def _check_shape(self) -> "Plan":
        if not self.approved:
            if not self.reason.strip():
                raise ValueError("reason is required when plan is not approved")
            # A bare refusal carries no shape; a refusal that declares one must still be valid.
            if self.complexity is None and self.query is None and not self.steps:
                return self

        if self.complexity is None:
            raise ValueError("search_complexity is required when a search shape is given")
        if self.complexity is Complexity.SIMPLE:
            if self.query is None or not self.query.strip():
                raise ValueError("search_query is required for simple plans")
            if self.steps:
                raise ValueError("search_plan must be empty for simple plans")
        else:
            if self.query is not None:
                raise ValueError("search_query must be null for complex plans")
            if not self.steps:
                raise ValueError("search_plan is required for complex plans")
        return self

    @property
    def outline(self) -> str:
        """Numbered list of step topics."""

        return "".join(f"- {i}. {step.topic}\n" for i, step in enumerate(self.steps, start=1))

    def __str__(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
