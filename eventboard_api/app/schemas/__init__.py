"""
Pydantic schema definitions for API payloads.

Each domain (users, events) defines its own request and response
models.  JSON keys are camelCase on the wire; request bodies also
accept the snake_case field names.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base model for every schema exchanged over HTTP."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
