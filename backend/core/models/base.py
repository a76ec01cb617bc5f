"""Shared model configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every model that crosses the API or storage boundary.

    Serializes with camelCase keys (``by_alias=True``) and accepts either
    camelCase or the Python field names on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
