"""Pydantic models for keyring items.

An ``Item`` is one secret entry. On the wire the ``data`` payload is
standard base64 text; in Python it is always ``bytes``. Documents written by
earlier releases used capitalized field names, which are still accepted on
read.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    field_serializer,
    field_validator,
)


class Item(BaseModel):
    """A single secret entry managed by a keyring."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(validation_alias=AliasChoices("key", "Key"))
    data: bytes = Field(default=b"", validation_alias=AliasChoices("data", "Data"))
    label: str | None = Field(default=None, validation_alias=AliasChoices("label", "Label"))
    description: str | None = Field(
        default=None, validation_alias=AliasChoices("description", "Description")
    )

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, value: Any, info: ValidationInfo) -> Any:
        # Only JSON input carries base64; Python callers pass raw bytes.
        if info.mode == "json" and isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except binascii.Error as exc:
                raise ValueError(f"data is not valid base64: {exc}") from exc
        if value is None:
            return b""
        return value

    @field_serializer("data", when_used="json")
    def _encode_data(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


# Adapter for the whole keyring document: key -> Item.
ItemMap = TypeAdapter(dict[str, Item])


def encode_document(items: dict[str, Item]) -> bytes:
    """Serialize a key -> Item mapping to the indented on-disk form."""
    return ItemMap.dump_json(items, indent=2) + b"\n"


def decode_document(raw: bytes | str) -> dict[str, Item]:
    """Parse the on-disk form. Raises ``pydantic.ValidationError``."""
    return ItemMap.validate_json(raw)
