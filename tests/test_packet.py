# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Unit tests for packet.py."""

import logging

import pytest
from conftest import EXAMPLE, NS, body_of, description_of, parse_packet

from xmpwriter import properties
from xmpwriter.exceptions import StructuralMisuse
from xmpwriter.namespaces import DUBLIN_CORE, RDF, XMP, Namespace
from xmpwriter.packet import (
    DEFAULT_PADDING,
    PACKET_ID,
    PADDING_LINE_LENGTH,
    XMP_HEADER,
    XMP_TRAILER,
    XmpWriter,
    find_packet,
    padding_block,
)
from xmpwriter.values import DateTime

_CLOSE = b"</x:xmpmeta>\n"


def _padding_of(packet: bytes) -> bytes:
    """Return the bytes between the closed root element and the trailer."""
    start = packet.index(_CLOSE) + len(_CLOSE)
    end = packet.rindex(XMP_TRAILER)
    return packet[start:end]


def _sample(writer: XmpWriter) -> XmpWriter:
    properties.creator(writer, ["Ada Lovelace"])
    properties.title(writer, [("de", "Titel"), (None, "Title & Subtitle")])
    properties.create_date(writer, DateTime.new(2024, 1, 15, 12, 0, 0, 2))
    return writer


class TestPaddingBlock:
    """Tests for padding_block()."""

    @pytest.mark.parametrize("size", [0, 1, 100, 101, 102, 2048, 5000])
    def test_exact_size(self, size: int) -> None:
        """The block has exactly the requested length."""
        assert len(padding_block(size)) == size

    def test_only_whitespace(self) -> None:
        """The block is made of spaces and newlines."""
        assert set(padding_block(500)) <= {ord(" "), ord("\n")}

    def test_line_length(self) -> None:
        """Full lines are PADDING_LINE_LENGTH spaces and a newline."""
        lines = padding_block(1000).split(b"\n")
        assert all(len(line) == PADDING_LINE_LENGTH for line in lines[:-1])

    def test_negative(self) -> None:
        """A negative size gives no padding."""
        assert padding_block(-5) == b""


class TestFindPacket:
    """Tests for find_packet()."""

    def test_finds_span(self) -> None:
        """The span runs from the header to the end of the trailer."""
        packet = XmpWriter().finish(padding=10)
        data = b"%PDF-1.7\n" + packet + b"\nendstream"
        assert find_packet(data) == (9, 9 + len(packet))

    def test_read_only_trailer(self) -> None:
        """A read-only trailer also ends the span."""
        data = b"<?xpacket begin='' id='x'?><a/><?xpacket end='r'?>"
        assert find_packet(data) == (0, len(data))

    def test_no_packet(self) -> None:
        """Data without markers gives None."""
        assert find_packet(b"<x:xmpmeta/>") is None


class TestFinish:
    """Tests for XmpWriter.finish()."""

    def test_golden_packet(self, writer: XmpWriter, golden_packet: bytes) -> None:
        """A small packet matches the expected bytes exactly."""
        assert _sample(writer).finish() == golden_packet

    def test_header_and_trailer(self, writer: XmpWriter) -> None:
        """The packet is framed by the xpacket instructions."""
        packet = writer.finish()
        assert packet.startswith(XMP_HEADER)
        assert packet.endswith(XMP_TRAILER)
        assert b"\xef\xbb\xbf" in packet[: len(XMP_HEADER)]
        assert PACKET_ID.encode() in packet[: len(XMP_HEADER)]

    def test_empty_packet(self, writer: XmpWriter) -> None:
        """An empty packet declares only the envelope namespaces."""
        packet = writer.finish()
        assert body_of(packet) == ""
        assert packet.count(b"xmlns:") == 2
        assert len(description_of(packet)) == 0

    def test_envelope(self, writer: XmpWriter) -> None:
        """The envelope is x:xmpmeta > rdf:RDF > one rdf:Description."""
        packet = writer.finish()
        root = parse_packet(packet)
        assert root.tag == "{adobe:ns:meta/}xmpmeta"
        assert root.get("{adobe:ns:meta/}xmptk") == "xmpwriter"
        assert [child.tag for child in root] == [f"{{{RDF.uri}}}RDF"]
        assert description_of(packet).get(f"{{{RDF.uri}}}about") == ""

    def test_default_padding(self, writer: XmpWriter) -> None:
        """A fresh packet carries DEFAULT_PADDING bytes of whitespace."""
        padding = _padding_of(writer.finish())
        assert len(padding) == DEFAULT_PADDING
        assert padding.strip() == b""

    def test_custom_padding(self, writer: XmpWriter) -> None:
        """The padding size can be chosen."""
        assert len(_padding_of(writer.finish(padding=333))) == 333

    def test_no_padding(self, writer: XmpWriter) -> None:
        """Zero padding puts the trailer right after the root element."""
        assert writer.finish(padding=0).endswith(_CLOSE + XMP_TRAILER)

    def test_about(self, writer: XmpWriter) -> None:
        """rdf:about is attribute-escaped."""
        packet = writer.finish(about='uuid:"1" & <2>')
        assert b'rdf:about="uuid:&quot;1&quot; &amp; &lt;2&gt;"' in packet
        about = description_of(packet).get(f"{{{RDF.uri}}}about")
        assert about == 'uuid:"1" & <2>'

    def test_toolkit(self) -> None:
        """The toolkit name is written to x:xmptk."""
        root = parse_packet(XmpWriter(toolkit='Tool "9"').finish())
        assert root.get("{adobe:ns:meta/}xmptk") == 'Tool "9"'

    def test_finish_twice(self, writer: XmpWriter) -> None:
        """A finished packet cannot be finished again."""
        writer.finish()
        with pytest.raises(StructuralMisuse):
            writer.finish()

    def test_write_after_finish(self, writer: XmpWriter) -> None:
        """A finished packet rejects new properties."""
        writer.finish()
        with pytest.raises(StructuralMisuse):
            writer.set_property(DUBLIN_CORE, "format", "application/pdf")

    def test_finish_with_open_property(self, writer: XmpWriter) -> None:
        """An open property writer blocks finish()."""
        elem = writer.element("format", DUBLIN_CORE)
        with pytest.raises(StructuralMisuse):
            writer.finish()
        elem.value("application/pdf")
        elem.close()
        assert b"<dc:format>application/pdf</dc:format>" in writer.finish()

    def test_packet_parses(self, writer: XmpWriter) -> None:
        """A filled packet is well-formed and namespace-correct."""
        description = description_of(_sample(writer).finish())
        creators = description.xpath("dc:creator/rdf:Seq/rdf:li/text()", namespaces=NS)
        assert creators == ["Ada Lovelace"]
        created = description.xpath("xmp:CreateDate/text()", namespaces=NS)
        assert created == ["2024-01-15T12:00:00+02:00"]


class TestNamespaceDeclarations:
    """Namespace declarations on rdf:Description."""

    def test_registration_order(self, writer: XmpWriter) -> None:
        """Namespaces are declared in the order they were first used."""
        writer.set_property(XMP, "Label", "x")
        writer.set_property(EXAMPLE, "a", "1")
        writer.set_property(DUBLIN_CORE, "format", "text/plain")
        writer.set_property(XMP, "Nickname", "y")
        text = writer.finish().decode("utf-8")
        positions = [
            text.index(f'xmlns:{prefix}="') for prefix in ("xmp", "ex", "dc")
        ]
        assert positions == sorted(positions)
        assert text.count("xmlns:xmp=") == 1

    def test_prefix_collision(self, writer: XmpWriter) -> None:
        """Two URIs with the same preferred prefix get distinct prefixes."""
        first = Namespace("ex", "http://a.example/")
        second = Namespace("ex", "http://b.example/")
        writer.set_property(first, "p", "1")
        writer.set_property(second, "p", "2")
        packet = writer.finish()
        assert body_of(packet) == "<ex:p>1</ex:p><ex2:p>2</ex2:p>"
        description = description_of(packet)
        assert description.find("{http://a.example/}p").text == "1"
        assert description.find("{http://b.example/}p").text == "2"

    def test_reserved_prefix_not_rebound(self, writer: XmpWriter) -> None:
        """A custom namespace asking for rdf gets another prefix."""
        writer.set_property(Namespace("rdf", "http://not-rdf.example/"), "p", "1")
        packet = writer.finish()
        assert body_of(packet) == "<rdf2:p>1</rdf2:p>"
        assert description_of(packet).find("{http://not-rdf.example/}p").text == "1"

    def test_namespaces_property(self, writer: XmpWriter) -> None:
        """The registry of the packet is exposed."""
        writer.set_property(DUBLIN_CORE, "format", "text/plain")
        assert DUBLIN_CORE.uri in writer.namespaces


class TestProperties:
    """Tests for XmpWriter bookkeeping."""

    def test_properties_listed(self, writer: XmpWriter) -> None:
        """Top-level properties are listed with their prefix."""
        _sample(writer)
        assert writer.properties == ["dc:creator", "dc:title", "xmp:CreateDate"]

    def test_scalar_property(self, writer: XmpWriter) -> None:
        """set_property accepts plain scalars."""
        writer.set_property(XMP, "Rating", 3)
        assert body_of(writer.finish()) == "<xmp:Rating>3</xmp:Rating>"

    def test_chaining(self, writer: XmpWriter) -> None:
        """set_property returns the writer."""
        result = writer.set_property(XMP, "Label", "a").set_property(
            XMP, "Nickname", "b"
        )
        assert result is writer

    def test_repeated_property_logged(
        self, writer: XmpWriter, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Writing the same property twice is logged."""
        with caplog.at_level(logging.DEBUG, logger="xmpwriter"):
            writer.set_property(XMP, "Label", "a")
            writer.set_property(XMP, "Label", "b")
        assert "xmp:Label written more than once" in caplog.text


class TestExistingPacket:
    """Tests for finish() with an existing packet."""

    def _old_packet(self) -> bytes:
        writer = XmpWriter()
        properties.title(writer, [(None, "Old title")])
        return writer.finish(padding=4000)

    def test_same_length(self) -> None:
        """The replacement has the length of the old packet."""
        old = self._old_packet()
        new = _sample(XmpWriter()).finish(old)
        assert len(new) == len(old)
        assert new.startswith(XMP_HEADER)
        assert new.endswith(XMP_TRAILER)
        assert b"Ada Lovelace" in new
        assert b"Old title" not in new

    def test_surrounding_bytes_kept(self) -> None:
        """Bytes before and after the packet are untouched."""
        old = self._old_packet()
        head = b"%PDF-1.7\n1 0 obj\n<< /Length 9999 >>\nstream\n"
        tail = b"\nendstream\nendobj\n"
        new = _sample(XmpWriter()).finish(head + old + tail)
        assert new.startswith(head)
        assert new.endswith(tail)
        assert len(new) == len(head + old + tail)
        assert find_packet(new) == (len(head), len(head) + len(old))

    def test_replaced_packet_parses(self) -> None:
        """The new packet inside the old region is well-formed."""
        new = _sample(XmpWriter()).finish(self._old_packet())
        titles = description_of(new).xpath(
            "dc:title/rdf:Alt/rdf:li/text()", namespaces=NS
        )
        assert titles == ["Titel", "Title & Subtitle"]

    def test_no_markers_uses_whole_buffer(self) -> None:
        """Without xpacket markers the whole buffer is the packet region."""
        new = _sample(XmpWriter()).finish(b" " * 5000)
        assert len(new) == 5000
        assert new.startswith(XMP_HEADER)
        assert new.endswith(XMP_TRAILER)

    def test_too_small_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """A region that is too small gets a fresh packet and a warning."""
        old = b"<?xpacket begin='' id='x'?><?xpacket end='w'?>"
        with caplog.at_level(logging.WARNING, logger="xmpwriter"):
            new = _sample(XmpWriter()).finish(b"A" + old + b"Z", padding=100)
        expected = _sample(XmpWriter()).finish(padding=100)
        assert new == b"A" + expected + b"Z"
        assert "does not fit" in caplog.text

    def test_exact_fit(self) -> None:
        """A region exactly as large as the body needs no padding."""
        fresh = _sample(XmpWriter()).finish(padding=0)
        new = _sample(XmpWriter()).finish(b"\x00" * len(fresh))
        assert new == fresh
