# MIT License
# Copyright (c) 2025 Hashborn

from typing import Annotated, Any
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _hex_to_bytes(value: Any) -> Any:
    """Accepts raw bytes or a hex string (as found in JSON dumps)."""
    if isinstance(value, str):
        return bytes.fromhex(value)
    if isinstance(value, bytearray):
        return bytes(value)
    return value


HexBytes = Annotated[bytes, BeforeValidator(_hex_to_bytes)]
Address = Annotated[bytes, BeforeValidator(_hex_to_bytes), Field(min_length=20, max_length=20)]
Amount = Annotated[int, Field(ge=0)]
Height = Annotated[int, Field(ge=0)]


class SnapshotModel(BaseModel):
    """
    Base for immutable snapshot records.

    Fields are snake_case in Python and camelCase on the wire, matching the
    legacy node's JSON output.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
