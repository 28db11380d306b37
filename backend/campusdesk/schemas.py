"""Shared pydantic base for request and response bodies."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, while still accepting snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PatchModel(CamelModel):
    """Partial update body: every field optional, unknown keys rejected."""

    model_config = ConfigDict(extra="forbid")
