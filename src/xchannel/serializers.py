"""
xchannel.serializers
Pluggable serializers. Anything with dump(value) -> bytes and load(bytes) -> value works.
"""
from __future__ import annotations

import pickle
from typing import Any, Protocol

import orjson


class Serializer(Protocol):
    def dump(self, value: Any) -> bytes: ...
    def load(self, data: bytes) -> Any: ...


class PickleSerializer:
    """Python's native object serializer. Only use between trusted peers."""

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def dump(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=self.protocol)

    def load(self, data: bytes) -> Any:
        return pickle.loads(data)

    def __repr__(self) -> str:
        return f"PickleSerializer(protocol={self.protocol})"


class JSONSerializer:
    name = "json"

    def dump(self, value: Any) -> bytes:
        return orjson.dumps(value)

    def load(self, data: bytes) -> Any:
        return orjson.loads(data)

    def __repr__(self) -> str:
        return "JSONSerializer()"


SERIALIZERS = {
    PickleSerializer.name: PickleSerializer,
    JSONSerializer.name: JSONSerializer,
}


def get_serializer(name: str) -> Serializer:
    try:
        cls = SERIALIZERS[name]
    except KeyError:
        raise ValueError(f"unknown serializer {name!r}, expected one of {sorted(SERIALIZERS)}") from None
    return cls()
