"""XML parser adapter for KML documents.

The rest of the pipeline touches the XML tree only through the narrow
DOM-style interface defined here:

- ``get_elements_by_tag_name(element, tag)``: descendants by local tag name
- ``get_attribute(element, name)``: attribute value or None
- ``text_content(element)``: concatenated, stripped text

Lookups ignore namespaces, so plain ``<kml>`` files, files declaring the
OGC 2.2 namespace and files mixing in ``gx:`` extensions are all handled
the same way.

Example:
    >>> doc = parse_kml('<kml><Placemark><name>A</name></Placemark></kml>')
    >>> [text_content(p) for p in doc.get_elements_by_tag_name('name')]
    ['A']
"""

import re
from typing import Any, List, Optional, Union

from lxml import etree

from .exceptions import KMLParseError
from .logger import logger

__all__ = [
    'KMLDocument',
    'parse_kml',
    'local_name',
    'get_elements_by_tag_name',
    'find_first',
    'find_child',
    'get_attribute',
    'text_content',
    'first_text',
]

# encoding="..." pseudo-attribute of the XML declaration
XML_DECL_ENCODING = re.compile(r"\A(\ufeff?\s*<\?xml\b[^>]*?)\s+encoding\s*=\s*([\"'])[^\"']*\2")


def local_name(tag: Any) -> str:
    """Strip the ``{namespace}`` prefix from an lxml tag."""
    if not isinstance(tag, str):
        return ''
    return tag.split('}', 1)[1] if '}' in tag else tag


def get_elements_by_tag_name(element: Any, tag_name: str) -> List[Any]:
    """
    Find all descendants of ``element`` with the given local tag name.

    Args:
        element: lxml element to search within (not included in the result)
        tag_name: Local tag name without prefix, e.g. 'Placemark'

    Returns:
        Matching elements in document order
    """
    return [elem for elem in element.iter('{*}' + tag_name) if elem is not element]


def find_first(element: Any, tag_name: str) -> Optional[Any]:
    """Return the first descendant with the given local tag name, or None."""
    for elem in element.iter('{*}' + tag_name):
        if elem is not element:
            return elem
    return None


def find_child(element: Any, tag_name: str) -> Optional[Any]:
    """Return the first direct child with the given local tag name, or None."""
    for child in element:
        if local_name(child.tag) == tag_name:
            return child
    return None


def get_attribute(element: Any, name: str) -> Optional[str]:
    """
    Read an attribute by local name.

    A plain ``id`` attribute wins over a namespaced one such as ``kml:id``.
    """
    value = element.get(name)
    if value is not None:
        return value
    for key, attr_value in element.attrib.items():
        if local_name(key) == name:
            return attr_value
    return None


def text_content(element: Optional[Any]) -> str:
    """Concatenated text of an element and its descendants, stripped."""
    if element is None:
        return ''
    return ''.join(element.itertext()).strip()


def first_text(element: Any, tag_name: str) -> Optional[str]:
    """Text of the first descendant with the given tag, None if absent or blank."""
    text = text_content(find_first(element, tag_name))
    return text or None


class KMLDocument:
    """Handle on a parsed KML document."""

    def __init__(self, root: Any, file_path: Optional[str] = None) -> None:
        self.root = root
        self.file_path = file_path

    def get_elements_by_tag_name(self, tag_name: str) -> List[Any]:
        """All elements with the given local tag name, root included."""
        return list(self.root.iter('{*}' + tag_name))

    def __repr__(self) -> str:
        return f"KMLDocument(root={local_name(self.root.tag)!r}, file_path={self.file_path!r})"


def parse_kml(kml_text: Union[str, bytes], file_path: Optional[str] = None) -> KMLDocument:
    """
    Parse KML text into a document handle.

    Bytes input lets the parser honor the encoding declared in the XML
    prolog. A str is already decoded text, so its declared encoding is
    dropped and the text is parsed as UTF-8.

    Args:
        kml_text: Raw KML document
        file_path: Source path, only used in error messages

    Returns:
        KMLDocument

    Raises:
        KMLParseError: If the input is empty or not well-formed XML
    """
    if kml_text is None or not kml_text.strip():
        raise KMLParseError("KML document is empty", file_path=file_path)

    if isinstance(kml_text, str):
        data = XML_DECL_ENCODING.sub(r"\1", kml_text, count=1).encode('utf-8')
        parser = etree.XMLParser(
            encoding='utf-8', resolve_entities=False, no_network=True, huge_tree=True
        )
    else:
        data = kml_text
        parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)

    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        raise KMLParseError(
            f"Failed to parse KML: {e.msg}", file_path=file_path, line_number=e.lineno
        ) from e

    logger.debug(f"Parsed KML root <{local_name(root.tag)}>")
    return KMLDocument(root, file_path=file_path)
