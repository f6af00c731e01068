# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import pytest

from restproxy import errors as _err
from restproxy.services import JsonSerializer, XmlSerializer


class TestXmlSerializer:
    def test_serialize_nested_mapping(self):
        body = XmlSerializer(xml_declaration=False).serialize(
            {"BlockList": {"Latest": ["AAAA", "AQAA"]}}, root_name="Request"
        )

        assert body == (
            b"<Request><BlockList><Latest>AAAA</Latest><Latest>AQAA</Latest></BlockList></Request>"
        )

    def test_declaration_included_by_default(self):
        body = XmlSerializer("QueueMessage").serialize({"MessageText": "hello"})

        assert body.startswith(b"<?xml")
        assert b"<QueueMessage><MessageText>hello</MessageText></QueueMessage>" in body

    def test_serialize_attributes_and_text(self):
        body = XmlSerializer(xml_declaration=False).serialize(
            {"Name": {"@id": "1", "#text": "blob.txt"}}
        )

        assert body == b'<Root><Name id="1">blob.txt</Name></Root>'

    def test_unserialize_lists_and_attributes(self):
        xml = (
            b'<EnumerationResults ContainerName="c">'
            b"<Blobs><Blob><Name>a</Name></Blob><Blob><Name>b</Name></Blob></Blobs>"
            b"<NextMarker/>"
            b"</EnumerationResults>"
        )

        actual = XmlSerializer().unserialize(xml)

        assert actual == {
            "@ContainerName": "c",
            "Blobs": {"Blob": [{"Name": "a"}, {"Name": "b"}]},
            "NextMarker": None,
        }

    def test_unserialize_keeps_text_beside_attributes(self):
        actual = XmlSerializer().unserialize(b'<Root><Name id="1">blob.txt</Name></Root>')

        assert actual == {"Name": {"@id": "1", "#text": "blob.txt"}}

    def test_force_list_for_single_child(self):
        xml = b"<EnumerationResults><Blobs><Blob><Name>a</Name></Blob></Blobs></EnumerationResults>"

        actual = XmlSerializer(force_list=("Blob",)).unserialize(xml)

        assert actual == {"Blobs": {"Blob": [{"Name": "a"}]}}

    def test_booleans_written_lowercase(self):
        body = XmlSerializer(xml_declaration=False).serialize({"Enabled": True})

        assert body == b"<Root><Enabled>true</Enabled></Root>"

    def test_malformed_xml(self):
        with pytest.raises(_err.SerializationError):
            XmlSerializer().unserialize(b"<open>")


class TestJsonSerializer:
    def test_roundtrip(self):
        serializer = JsonSerializer()
        entity = {"PartitionKey": "p", "RowKey": "r", "Age": 3}

        assert serializer.unserialize(serializer.serialize(entity)) == entity

    def test_invalid_json(self):
        with pytest.raises(_err.SerializationError):
            JsonSerializer().unserialize(b"{not json")

    def test_unencodable(self):
        with pytest.raises(_err.SerializationError):
            JsonSerializer().serialize({"x": object()})
