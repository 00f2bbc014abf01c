# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""XMP packet builder.

Start with :class:`XmpWriter`, add properties with :meth:`XmpWriter.set_property`
or the scoped :meth:`XmpWriter.element` writer, and call
:meth:`XmpWriter.finish` to get the packet bytes::

    writer = XmpWriter()
    writer.set_property(DUBLIN_CORE, "creator", Array.of(ArrayKind.ORDERED, ["Ada"]))
    writer.set_property(
        DUBLIN_CORE, "title", LangAlt([("de", "Titel"), (None, "Title")])
    )
    packet = writer.finish()
"""

import logging
import re
from typing import Any

from .element import Element, _Scope, check_value
from .escape import EscapeContext, escape
from .namespaces import META, RDF, Namespace, NamespaceRegistry
from .values import Value, as_value

logger = logging.getLogger(__name__)

PACKET_ID = "W5M0MpCehiHzreSzNTczkc9d"
TOOLKIT = "xmpwriter"

# XMP packet header and trailer
XMP_HEADER = f'<?xpacket begin="\ufeff" id="{PACKET_ID}"?>\n'.encode()
XMP_TRAILER = b'<?xpacket end="w"?>'

# Whitespace left before the trailer so the packet can be edited in place
DEFAULT_PADDING = 2048
PADDING_LINE_LENGTH = 100

# Start of an existing packet, through the end of its trailer
_XPACKET_RE = re.compile(
    rb"<\?xpacket\s+begin=.*?\?>.*?<\?xpacket\s+end=[\"'][rw][\"']\s*\?>",
    re.DOTALL,
)


def padding_block(size: int) -> bytes:
    """Return ``size`` bytes of whitespace, broken into lines.

    Lines are :data:`PADDING_LINE_LENGTH` spaces followed by a newline;
    the last line is shortened to hit ``size`` exactly.
    """
    if size <= 0:
        return b""
    line = b" " * PADDING_LINE_LENGTH + b"\n"
    num_lines, remainder = divmod(size, len(line))
    return line * num_lines + b" " * remainder


def find_packet(data: bytes) -> tuple[int, int] | None:
    """Locate an XMP packet in ``data``.

    Returns:
        ``(start, end)`` offsets of the span from ``<?xpacket begin`` to the
        end of the ``<?xpacket end=...?>`` trailer, or None.
    """
    match = _XPACKET_RE.search(data)
    if match is None:
        return None
    return match.start(), match.end()


class XmpWriter(_Scope):
    """Builds one XMP packet, property by property.

    Properties are written straight into an output buffer. A property with
    a composite value hands out a scoped writer (see :mod:`xmpwriter.element`)
    and the builder is locked until that writer is closed. After
    :meth:`finish` the builder cannot be used again.

    An XmpWriter is not thread-safe; use one per thread.
    """

    def __init__(self, toolkit: str = TOOLKIT) -> None:
        super().__init__()
        self._toolkit = toolkit
        self._parts: list[str] = []
        self._namespaces = NamespaceRegistry()
        self._properties: list[str] = []

    def __repr__(self) -> str:
        return f"<XmpWriter {len(self._properties)} properties {self.state.value}>"

    @property
    def namespaces(self) -> NamespaceRegistry:
        """Namespaces declared so far, in declaration order."""
        return self._namespaces

    @property
    def properties(self) -> list[str]:
        """Prefixed names of the top-level properties written so far."""
        return list(self._properties)

    def _emit(self, text: str) -> None:
        self._parts.append(text)

    def _prefix(self, namespace: Namespace) -> str:
        return self._namespaces.resolve(namespace)

    def element(self, name: str, namespace: Namespace) -> Element:
        """Start a top-level property and return its scoped writer.

        Raises:
            InvalidName: If ``name`` is not a legal XML name.
            StructuralMisuse: If the builder is finished or another property
                writer is still open.
        """
        self._check_writable()
        elem = Element(self, self, name, namespace)
        self._adopt(elem)
        if elem.tag in self._properties:
            logger.debug("Property %s written more than once", elem.tag)
        self._properties.append(elem.tag)
        return elem

    def set_property(
        self, namespace: Namespace, local_name: str, value: Value | Any
    ) -> "XmpWriter":
        """Write a complete property.

        Args:
            namespace: Namespace of the property.
            local_name: Property name without prefix.
            value: A :class:`~xmpwriter.values.Value`, or a scalar that is
                written as text.

        Returns:
            The builder, for chaining.
        """
        value = as_value(value)
        check_value(value)
        with self.element(local_name, namespace) as elem:
            elem._write_value(value)
        return self

    def _render(self, about: str) -> bytes:
        declarations = "".join(
            f' xmlns:{prefix}="{escape(uri, EscapeContext.ATTRIBUTE)}"'
            for prefix, uri in self._namespaces.declarations()
        )
        xml = (
            f'<x:xmpmeta xmlns:x="{META.uri}"'
            f' x:xmptk="{escape(self._toolkit, EscapeContext.ATTRIBUTE)}">'
            f'<rdf:RDF xmlns:rdf="{RDF.uri}">'
            f'<rdf:Description rdf:about="{escape(about, EscapeContext.ATTRIBUTE)}"'
            f"{declarations}>"
            f"{''.join(self._parts)}"
            "</rdf:Description></rdf:RDF></x:xmpmeta>\n"
        )
        return XMP_HEADER + xml.encode("utf-8")

    def finish(
        self,
        existing: bytes | None = None,
        *,
        about: str = "",
        padding: int = DEFAULT_PADDING,
    ) -> bytes:
        """Close the packet and return it as UTF-8 bytes.

        Args:
            existing: Bytes holding a current XMP packet, possibly with data
                around it. The packet span (or the whole buffer if it holds
                no packet markers) is replaced by the new packet, padded to
                the same length, and the bytes around it are kept.
            about: Value of ``rdf:about``.
            padding: Bytes of whitespace before the trailer of a fresh
                packet.

        Returns:
            The finished packet, or ``existing`` with its packet replaced.

        Raises:
            StructuralMisuse: If a property writer is still open or the
                builder was already finished.
        """
        self._check_writable()
        self._closed = True

        body = self._render(about)
        if existing is None:
            result = body + padding_block(padding) + XMP_TRAILER
            logger.debug("XMP packet created: %d bytes", len(result))
            return result

        span = find_packet(existing)
        start, end = span if span is not None else (0, len(existing))
        available = (end - start) - len(body) - len(XMP_TRAILER)
        if available < 0:
            logger.warning(
                "New XMP packet does not fit the existing %d byte region, "
                "writing %d bytes instead",
                end - start,
                len(body) + padding + len(XMP_TRAILER),
            )
            available = padding
        packet = body + padding_block(available) + XMP_TRAILER
        logger.debug(
            "XMP packet rewritten in place: %d bytes at offset %d", len(packet), start
        )
        return existing[:start] + packet + existing[end:]
