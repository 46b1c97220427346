"""Shared pydantic base for boundary models."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase keys (``costCenter``).

    Construction accepts either the Python field name or the alias.
    """

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
