"""Base pydantic models shared by the API schemas.

The public API speaks camelCase (the frontend contract); Python code
uses snake_case attributes. ``populate_by_name`` lets services build
models with field names while requests may use either form.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    success: bool = True
    message: str | None = None
