"""XML request rendering and response reading helpers for ossclient."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable
from xml.sax.saxutils import escape as _sax_escape

from ossclient.errors import ResponseParseError
from ossclient.models import PartETag


def _escape_xml(value: str) -> str:
    """Escape special XML characters in a string value."""
    return _sax_escape(str(value))


def render_complete_multipart_upload(part_etags: Iterable[PartETag]) -> str:
    """Render a CompleteMultipartUpload request body.

    Parts are written in the order given. ETags are sent quoted.

    Args:
        part_etags: The parts to assemble.

    Returns:
        An XML string for CompleteMultipartUpload.
    """
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<CompleteMultipartUpload>",
    ]
    for part in part_etags:
        parts.append("<Part>")
        parts.append(f"<PartNumber>{int(part.part_number)}</PartNumber>")
        parts.append(f'<ETag>"{_escape_xml(part.etag)}"</ETag>')
        parts.append("</Part>")
    parts.append("</CompleteMultipartUpload>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


class XmlDocument:
    """A parsed response document with namespace-agnostic lookups.

    Attributes:
        root: The root element.
        ns: The ``{namespace}`` prefix of the root element, or "".
    """

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.ns = ""
        if root.tag.startswith("{"):
            self.ns = root.tag[: root.tag.index("}") + 1]

    @classmethod
    def parse(cls, body: bytes, expected_root: str) -> XmlDocument:
        """Parse ``body`` and check its root element name.

        Raises:
            ResponseParseError: If the body is not well-formed XML or the root
                element is not ``expected_root``.
        """
        try:
            root = ET.fromstring(body)
        except ET.ParseError as exc:
            raise ResponseParseError(f"Malformed XML in {expected_root} response: {exc}") from exc

        doc = cls(root)
        if doc.local_name(root) != expected_root:
            raise ResponseParseError(
                f"Expected <{expected_root}> but got <{doc.local_name(root)}>"
            )
        return doc

    def local_name(self, elem: ET.Element) -> str:
        tag = elem.tag
        return tag[tag.index("}") + 1 :] if tag.startswith("{") else tag

    def findall(self, name: str, parent: ET.Element | None = None) -> list[ET.Element]:
        return (parent if parent is not None else self.root).findall(f"{self.ns}{name}")

    def text(self, name: str, parent: ET.Element | None = None) -> str | None:
        """Return the text of the child ``name``, "" if empty, None if absent."""
        elem = (parent if parent is not None else self.root).find(f"{self.ns}{name}")
        if elem is None:
            return None
        return elem.text or ""

    def required_text(self, name: str, parent: ET.Element | None = None) -> str:
        value = self.text(name, parent)
        if value is None:
            raise ResponseParseError(f"Missing <{name}> element")
        return value
