"""Shared base for models serialized to the web client."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Frozen model that reads and writes camelCase keys.

    Python code uses snake_case attributes; JSON crossing the HTTP boundary
    or the model boundary uses camelCase, matching the onboarding wizard.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
