import json
from typing import Any

from fastapi.encoders import jsonable_encoder

from utils.hateoas import JSONNode


class JSONCodec:
    """
    Converts between application values, JSON trees and JSON bytes.

    Passed to the link injector explicitly so conversion rules are not read
    from any global serializer configuration.
    """

    def __init__(self, *, by_alias: bool = True, exclude_none: bool = False, ensure_ascii: bool = False):
        self.by_alias = by_alias
        self.exclude_none = exclude_none
        self.ensure_ascii = ensure_ascii

    def to_node(self, value: Any) -> JSONNode:
        """Pydantic models, dataclasses, datetimes, UUIDs... -> plain dicts/lists/scalars."""
        return jsonable_encoder(value, by_alias=self.by_alias, exclude_none=self.exclude_none)

    def decode(self, body: bytes | str) -> JSONNode:
        return json.loads(body)

    def encode(self, node: JSONNode) -> bytes:
        return json.dumps(
            node,
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")
