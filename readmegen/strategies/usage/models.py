"""Usage synthesis domain models.

Pydantic models for the structured reply of the text-generation
collaborator. Replies are untrusted, so validation here is loose: aliases
from the reply format are accepted, and malformed usage groups are dropped
with a warning instead of failing the whole reply.
"""

import logging
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

CONDITION_RE = re.compile(r'^\s*(?:var\.)?([A-Za-z_][\w-]*)\s*==?\s*"([^"]*)"')


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


class UsageGroup(BaseModel):
    """One trigger value and the conditional variables it makes mandatory."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    trigger: str = Field(
        validation_alias=AliasChoices("trigger", "triggerVar", "trigger_var"),
        description="Name of the trigger variable",
    )
    value: str = Field(
        default="",
        validation_alias=AliasChoices("value", "triggerValue", "trigger_value"),
        description="Concrete value the trigger takes in this example",
    )
    label: str = Field(
        default="",
        validation_alias=AliasChoices("label", "name"),
        description="Human-readable name of the usage example",
    )
    variables: list[str] = Field(
        default_factory=list,
        description="Conditional variable names required for this trigger value",
    )

    @model_validator(mode="before")
    @classmethod
    def recover_from_condition(cls, data: Any) -> Any:
        """Fill trigger and value from a ``trigger = "value"`` condition string."""
        if not isinstance(data, dict):
            return data

        condition = data.get("condition")
        match = CONDITION_RE.match(condition) if isinstance(condition, str) else None
        if match is None:
            return data

        data = dict(data)
        if not any(data.get(k) for k in ("trigger", "triggerVar", "trigger_var")):
            data["trigger"] = match.group(1)
        if not any(data.get(k) not in (None, "") for k in ("value", "triggerValue", "trigger_value")):
            data["value"] = match.group(2)
        return data

    @field_validator("trigger", mode="before")
    @classmethod
    def require_trigger(cls, v: Any) -> str:
        name = _as_text(v).strip()
        if not name:
            raise ValueError("trigger name must not be empty")
        return name

    @field_validator("label", mode="before")
    @classmethod
    def strip_label(cls, v: Any) -> str:
        return _as_text(v).strip()

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str:
        """Coerce JSON scalars (booleans, numbers) to their HCL text."""
        return _as_text(v)

    @field_validator("variables", mode="before")
    @classmethod
    def normalize_variables(cls, v: Any) -> list[str]:
        """Accept a single name, drop blanks and repeated names."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        seen: list[str] = []
        for item in v:
            name = _as_text(item).strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    @model_validator(mode="after")
    def default_label(self) -> "UsageGroup":
        if not self.label:
            self.label = self.condition
        return self

    @property
    def condition(self) -> str:
        """Return the condition shown in requirement comments."""
        return f'{self.trigger} = "{self.value}"'


class ModuleDescription(BaseModel):
    """Prose and usage groups for one module."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: str = Field(default="", description="One sentence describing the module")
    features: list[str] = Field(default_factory=list, description="Feature bullet points")
    conditional_usage: list[UsageGroup] = Field(
        default_factory=list,
        validation_alias=AliasChoices("conditional_usage", "conditionalUsage"),
        description="Usage groups, one conditional usage example each",
    )

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, v: Any) -> str:
        return _as_text(v).strip()

    @field_validator("features", mode="before")
    @classmethod
    def normalize_features(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [_as_text(item).strip() for item in v if _as_text(item).strip()]

    @field_validator("conditional_usage", mode="before")
    @classmethod
    def drop_malformed_groups(cls, v: Any) -> list[Any]:
        """Keep the usage groups that validate, log the rest."""
        if v is None:
            return []
        if not isinstance(v, list):
            logger.warning(f"Ignoring conditional usage of type {type(v).__name__}")
            return []

        groups: list[Any] = []
        for idx, item in enumerate(v):
            if isinstance(item, UsageGroup):
                groups.append(item)
                continue
            try:
                groups.append(UsageGroup.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping malformed usage group {idx}: {e.error_count()} error(s)")
        return groups
