"""
XML <-> JSON content conversion

Both directions use xmltodict's mapping: attributes become ``@name`` keys, element text
next to attributes or children becomes ``#text``, repeated siblings become arrays and
empty elements become null. ``json_to_xml`` applies the inverse and emits one element
per top-level key without an XML declaration.

Input XML goes through defusedxml first so DTD entity tricks are rejected before the
document reaches xmltodict. Rendered XML is checked for well-formedness so a JSON key or
string that cannot be expressed in XML fails instead of producing broken output.
"""

import json
from typing import Any
from xml.etree import ElementTree as ET
from xml.parsers.expat import ExpatError

import defusedxml.ElementTree as SafeET
import xmltodict
from defusedxml import DefusedXmlException

from remote_policy.utils.error_util import ConversionError

# Wraps rendered fragments, which may hold several top-level elements
_CHECK_ROOT = 'rendered'


def _safe_parse_xml(xml_string: str | bytes) -> ET.Element:
    """
    Parse XML with XXE and entity expansion protection.

    Raises:
        ConversionError: If parsing fails or the document is rejected
    """
    if isinstance(xml_string, str):
        xml_string = xml_string.encode('utf-8')
    try:
        return SafeET.fromstring(xml_string)
    except ET.ParseError as e:
        raise ConversionError(f'Invalid XML: {e}') from e
    except DefusedXmlException as e:
        raise ConversionError(f'Rejected XML: {e}') from e


def xml_to_json(content: str | bytes) -> str:
    """Convert an XML document to compact JSON text.

    Raises:
        ConversionError: malformed or unsafe XML
    """
    if isinstance(content, str):
        content = content.encode('utf-8')
    _safe_parse_xml(content)
    try:
        document = xmltodict.parse(content)
    except ExpatError as e:
        raise ConversionError(f'Invalid XML: {e}') from e
    return json.dumps(document, ensure_ascii=False, separators=(',', ':'))


def _check_well_formed(xml: str) -> None:
    try:
        _safe_parse_xml(f'<{_CHECK_ROOT}>{xml}</{_CHECK_ROOT}>')
    except ConversionError as e:
        raise ConversionError(f'JSON cannot be rendered as XML: {e}') from e


def json_to_xml(content: str | bytes) -> str:
    """Convert a JSON object to XML text (one element per top-level key).

    Raises:
        ConversionError: malformed JSON, a non-object document or content that has no
            well-formed XML rendering
    """
    try:
        document: Any = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConversionError(f'Invalid JSON: {e}') from e
    if not isinstance(document, dict):
        raise ConversionError(f'Invalid JSON: expected an object, got {type(document).__name__}')

    try:
        xml = xmltodict.unparse(document, full_document=False)
    except (ValueError, TypeError) as e:
        raise ConversionError(f'JSON cannot be rendered as XML: {e}') from e
    _check_well_formed(xml)
    return xml
