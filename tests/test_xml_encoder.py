"""Tests for the XML encoder."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List

import pytest

from conftest import HIDDEN, User
from publicview.core.definitions import XML_HEADER
from publicview.core.domain import EncodeOptions
from publicview.core.exceptions import MarshalError
from publicview.engine.descriptors import exposed, hidden
from publicview.engine.encoders import XmlEncoder

HEADER = XML_HEADER.encode()


@dataclass
class Item:
    id: int = exposed(attr=True, default=0)
    name: str = ""
    secret: str = hidden(default="")


@dataclass
class Basket:
    owner: str = ""
    items: List[Item] = field(default_factory=list)


def body_of(encoded: bytes) -> bytes:
    assert encoded.startswith(HEADER)
    return encoded[len(HEADER):]


class TestHeader:
    """Every document starts with the XML declaration."""

    def test_header_prefix(self):
        encoded = XmlEncoder().encode(Item(id=1, name="a"))
        assert encoded.startswith(b'<?xml version="1.0" encoding="UTF-8"?>\n')

    def test_none_is_header_only(self):
        assert XmlEncoder().encode(None) == HEADER


class TestStructure:
    """Composites map to elements named after types and fields."""

    def test_reference_sample(self, sample):
        root = ET.fromstring(body_of(XmlEncoder().encode(sample)))

        assert root.tag == "Sample"
        assert [child.tag for child in root] == [
            "id",
            "name",
            "registered",
            "profile_ptr",
            "profile_as_interface_struct",
            "profile_as_interface_ptr",
            "profile",
            "messages",
            "messages",
        ]
        assert root.findtext("registered") == "2006-01-02T15:04:05+00:00"
        assert root.findtext("profile_ptr/field_visible") == "xxx"
        assert root.find("profile_ptr/field_hidden_value") is None
        assert [m.findtext("field_visible") for m in root.findall("messages")] == ["123", "345"]

    def test_hidden_values_never_reach_the_bytes(self, sample):
        encoded = XmlEncoder().encode(sample)

        assert HIDDEN.encode() not in encoded
        assert b"password" not in encoded

    def test_attributes_and_repeated_elements(self):
        basket = Basket(owner="ann", items=[Item(id=1, name="a", secret="s"), Item(id=2, name="b")])

        assert body_of(XmlEncoder().encode(basket)) == (
            b'<Basket><owner>ann</owner>'
            b'<items id="1"><name>a</name></items>'
            b'<items id="2"><name>b</name></items></Basket>'
        )

    def test_none_fields_are_omitted(self):
        @dataclass
        class Maybe:
            a: str = "x"
            b: object = None

        assert body_of(XmlEncoder().encode(Maybe())) == b"<Maybe><a>x</a></Maybe>"

    def test_scalar_formatting(self):
        encoded = XmlEncoder().encode({"flag": True, "n": 3, "raw": b"\x00\x01"}, options=EncodeOptions(root_tag="v"))

        assert body_of(encoded) == b"<v><flag>true</flag><n>3</n><raw>AAE=</raw></v>"

    def test_top_level_scalar_uses_type_name(self):
        assert body_of(XmlEncoder().encode("hi")) == b"<str>hi</str>"

    def test_text_is_escaped(self):
        encoded = XmlEncoder().encode(Item(id=1, name="<a & b>"))
        assert b"<name>&lt;a &amp; b&gt;</name>" in encoded

    def test_override_view_result_is_encoded(self):
        root = ET.fromstring(body_of(XmlEncoder().encode(User(id="1", name="Buster", password="hideme", avatar="xxx"))))

        assert root.tag == "User"
        assert root.findtext("avatar") == "//origin/xxx"
        assert root.findtext("password") in ("", None)

    def test_pretty_print(self):
        encoded = XmlEncoder(EncodeOptions(pretty_print=True)).encode(Basket(owner="ann"))
        assert body_of(encoded) == b"<Basket>\n\t<owner>ann</owner>\n</Basket>"


class TestRootTag:
    """Top-level sequences and mappings need an explicit root element."""

    def test_bare_sequence_is_unsupported(self):
        with pytest.raises(MarshalError, match="root_tag"):
            XmlEncoder().encode([Item(id=1, name="a")])

    def test_several_values_are_a_sequence(self):
        with pytest.raises(MarshalError):
            XmlEncoder().encode(Item(id=1), Item(id=2))

    def test_bare_mapping_is_unsupported(self):
        with pytest.raises(MarshalError):
            XmlEncoder().encode({"a": 1})

    def test_sequence_with_root_tag(self):
        options = EncodeOptions(root_tag="items")

        encoded = XmlEncoder().encode([Item(id=1, name="a"), 5], options=options)

        assert body_of(encoded) == b'<items><Item id="1"><name>a</name></Item><item>5</item></items>'

    def test_root_tag_renames_composite_root(self):
        encoded = XmlEncoder(EncodeOptions(root_tag="thing")).encode(Item(id=1, name="a"))
        assert body_of(encoded) == b'<thing id="1"><name>a</name></thing>'


class TestMarshalErrors:
    """XML-specific structural constraints."""

    def test_invalid_element_name(self):
        with pytest.raises(MarshalError, match="invalid element"):
            XmlEncoder().encode({"has space": 1}, options=EncodeOptions(root_tag="r"))

    def test_attribute_must_be_scalar(self):
        @dataclass
        class Bad:
            tags: list = exposed(attr=True, default_factory=list)

        with pytest.raises(MarshalError, match="attribute"):
            XmlEncoder().encode(Bad(tags=["a"]))

    def test_unsupported_value(self):
        with pytest.raises(MarshalError, match="unsupported type"):
            XmlEncoder().encode({"fn": len}, options=EncodeOptions(root_tag="r"))

    def test_duplicate_attribute_names(self):
        @dataclass
        class TwoIds:
            a: int = exposed(name="id", attr=True, default=0)
            b: int = exposed(name="id", attr=True, default=0)

        with pytest.raises(MarshalError, match="wire name 'id'"):
            XmlEncoder().encode(TwoIds(a=1, b=2))

    def test_attribute_and_element_share_a_name(self):
        @dataclass
        class Mixed:
            a: int = exposed(name="id", attr=True, default=0)
            b: str = exposed(name="id", default="")

        with pytest.raises(MarshalError, match="wire name 'id'"):
            XmlEncoder().encode(Mixed(a=1, b="x"))


class TestCharacters:
    """Output parses even when values hold characters XML cannot carry."""

    def test_control_character_in_text(self):
        root = ET.fromstring(body_of(XmlEncoder().encode(Item(id=1, name="a\x01b"))))

        assert root.findtext("name") == "a\ufffdb"

    def test_control_character_in_attribute(self):
        @dataclass
        class Labelled:
            label: str = exposed(attr=True, default="")

        root = ET.fromstring(body_of(XmlEncoder().encode(Labelled(label="x\x0by"))))

        assert root.get("label") == "x\ufffdy"

    def test_allowed_characters_are_kept(self):
        name = "tab\there é \U0001f600"

        root = ET.fromstring(body_of(XmlEncoder().encode(Item(id=1, name=name))))

        assert root.findtext("name") == name
