# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Tests for converting XML documents to dict trees and back."""

from __future__ import annotations

import pytest
from lxml import etree

from core.xml_tree import build_xml, parse_xml

SOAP = 'http://schemas.xmlsoap.org/soap/envelope/'


class TestParseXml:
    """Tests for the dict tree of an XML document."""

    def test_elements_attributes_and_repeats(self) -> None:
        """Attributes get an @ prefix and repeated tags become a list."""
        data = b'<user id="7"><name>Max</name><ip>10.0.0.1</ip><ip>10.0.0.2</ip></user>'

        assert parse_xml(data) == {'user': {'@id': '7', 'name': 'Max', 'ip': ['10.0.0.1', '10.0.0.2']}}

    def test_text_with_attributes(self) -> None:
        """Text of an element with attributes is stored as #text."""
        assert parse_xml(b'<p lang="en">Hello</p>') == {'p': {'@lang': 'en', '#text': 'Hello'}}

    def test_empty_element(self) -> None:
        """Elements without content are None."""
        assert parse_xml(b'<a><b/></a>') == {'a': {'b': None}}

    def test_comments_and_instructions_dropped(self) -> None:
        """Comments and processing instructions are not part of the tree."""
        data = b'<a><!-- secret --><?skip me?><b>1</b></a>'

        assert parse_xml(data) == {'a': {'b': '1'}}

    def test_namespaces_kept(self) -> None:
        """Namespace declarations and prefixes are kept."""
        data = (
            f'<soap:Envelope xmlns:soap="{SOAP}"><soap:Body>'
            '<m:Get xmlns:m="urn:x"><m:id>5</m:id></m:Get>'
            '</soap:Body></soap:Envelope>'
        ).encode()

        assert parse_xml(data) == {
            'soap:Envelope': {
                '@xmlns:soap': SOAP,
                'soap:Body': {'m:Get': {'@xmlns:m': 'urn:x', 'm:id': '5'}},
            },
        }

    def test_xml_prefix_attribute(self) -> None:
        """Attributes in the implicit xml namespace keep their xml: prefix."""
        assert parse_xml(b'<doc xml:lang="nl">tekst</doc>') == {'doc': {'@xml:lang': 'nl', '#text': 'tekst'}}

    def test_external_entities_not_resolved(self) -> None:
        """External entities are never loaded into the tree."""
        data = b'<!DOCTYPE x [<!ENTITY e SYSTEM "file:///etc/passwd">]><x>&e;</x>'

        assert 'root:' not in str(parse_xml(data))

    def test_malformed_document(self) -> None:
        """Documents that are not well-formed raise a syntax error."""
        with pytest.raises(etree.XMLSyntaxError):
            parse_xml(b'<a><b></a>')


class TestBuildXml:
    """Tests for serializing dict trees."""

    @pytest.mark.parametrize(
        'data',
        [
            b'<user id="7"><name>Max</name><ip>10.0.0.1</ip><ip>10.0.0.2</ip></user>',
            b'<root xmlns="urn:a"><item>1</item><item>2</item></root>',
            f'<soap:Envelope xmlns:soap="{SOAP}"><soap:Body><m:Get xmlns:m="urn:x"><m:id>5</m:id></m:Get>'
            '</soap:Body></soap:Envelope>'.encode(),
            b'<doc xml:lang="nl">tekst<empty/></doc>',
        ],
    )
    def test_tree_survives_rebuild(self, data: bytes) -> None:
        """Parsing the rebuilt document gives the same tree."""
        tree = parse_xml(data)

        assert parse_xml(build_xml(tree)) == tree

    def test_declaration_and_encoding(self) -> None:
        """Output is a UTF-8 document with XML declaration."""
        result = build_xml({'note': 'Grüße'})

        assert result.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
        assert 'Grüße'.encode() in result

    def test_non_string_values(self) -> None:
        """Numbers and booleans are written in their text form."""
        result = build_xml({'r': {'n': 5, 'flag': True}})

        assert b'<n>5</n>' in result
        assert b'<flag>true</flag>' in result

    @pytest.mark.parametrize('tree', [{}, {'a': '1', 'b': '2'}, ['a']])
    def test_single_root_required(self, tree: object) -> None:
        """A document needs exactly one root element."""
        with pytest.raises(ValueError, match='one root'):
            build_xml(tree)
