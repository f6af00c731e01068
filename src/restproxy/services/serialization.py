# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Body serializers used by operations built on the service proxy."""

from __future__ import annotations

from typing import Any, Protocol
from xml.parsers.expat import ExpatError

import msgspec
import xmltodict

from restproxy import errors as _err


class Serializer(Protocol):
    """Encodes request bodies and decodes response bodies."""

    def serialize(self, obj: Any) -> bytes: ...

    def unserialize(self, data: bytes | str) -> Any: ...


class JsonSerializer:
    """JSON bodies via msgspec."""

    def serialize(self, obj: Any) -> bytes:
        try:
            return msgspec.json.encode(obj)
        except (TypeError, msgspec.EncodeError) as e:
            raise _err.SerializationError(f"Cannot encode JSON body: {e}", cause=e)

    def unserialize(self, data: bytes | str) -> Any:
        try:
            return msgspec.json.decode(data)
        except msgspec.DecodeError as e:
            raise _err.SerializationError(
                f"Invalid JSON body: {e}",
                context={"content_preview": str(data[:200])},
                cause=e,
            )


class XmlSerializer:
    """XML bodies as nested dicts, via xmltodict.

    Serializing: mapping keys become child elements, lists become repeated
    elements with the same tag, scalars become text. Keys prefixed with
    ``@`` become attributes and ``#text`` holds the text of an element that
    also has attributes. Unserializing returns the content of the root
    element in the same shape; tags named in ``force_list`` always come
    back as lists.
    """

    def __init__(
        self,
        root_name: str = "Root",
        *,
        xml_declaration: bool = True,
        force_list: tuple[str, ...] | None = None,
    ):
        self.root_name = root_name
        self.xml_declaration = xml_declaration
        self.force_list = force_list

    def serialize(self, obj: Any, *, root_name: str | None = None) -> bytes:
        try:
            xml = xmltodict.unparse(
                {root_name or self.root_name: obj},
                full_document=self.xml_declaration,
            )
        except ValueError as e:
            raise _err.SerializationError(f"Cannot encode XML body: {e}", cause=e)
        return xml.encode("utf-8")

    def unserialize(self, data: bytes | str) -> Any:
        try:
            parsed = xmltodict.parse(data, force_list=self.force_list)
        except ExpatError as e:
            raise _err.SerializationError(
                f"Invalid XML body: {e}",
                context={"content_preview": str(data[:200])},
                cause=e,
            )
        # A parsed document always has exactly one root
        return next(iter(parsed.values()))
