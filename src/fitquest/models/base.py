"""Shared pydantic base for documents exchanged with the log and profile stores."""

from pydantic import BaseModel, ConfigDict


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys.

    Stored documents use camelCase (``exerciseId``, ``totalXP``); Python code
    uses snake_case attribute names. Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
