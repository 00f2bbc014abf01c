# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the xmpwriter test suite."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from lxml import etree
from pikepdf import Pdf

from xmpwriter import namespaces
from xmpwriter.namespaces import DUBLIN_CORE, RDF, XML_URI, XMP, Namespace
from xmpwriter.packet import XmpWriter

# Namespace map for XPath queries on parsed packets
NS = {
    "x": "adobe:ns:meta/",
    "rdf": RDF.uri,
    "dc": DUBLIN_CORE.uri,
    "xmp": XMP.uri,
}

RDF_LI = f"{{{RDF.uri}}}li"
XML_LANG = f"{{{XML_URI}}}lang"

EXAMPLE = Namespace("ex", "http://example.com/ns/1.0/")

_SECURE_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)

# -- Global PDF tracker --

_tracked_pdfs: list[Pdf] = []


@pytest.fixture(autouse=True)
def _auto_close_pdfs():
    """Close all tracked PDF objects after each test."""
    yield
    for pdf in reversed(_tracked_pdfs):
        pdf.close()
    _tracked_pdfs.clear()


@pytest.fixture(autouse=True)
def _restore_preferred_prefixes() -> Generator[None, None, None]:
    """Undo register_namespace() calls made by a test."""
    saved = dict(namespaces._PREFERRED_PREFIXES)
    yield
    namespaces._PREFERRED_PREFIXES.clear()
    namespaces._PREFERRED_PREFIXES.update(saved)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Drop handlers that setup_logging() bound to captured streams."""
    yield
    package_logger = logging.getLogger("xmpwriter")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


def new_pdf(**kwargs) -> Pdf:
    """Create a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.new(**kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def open_pdf(source, **kwargs) -> Pdf:
    """Open a tracked Pdf (auto-closed after test)."""
    pdf = Pdf.open(source, **kwargs)
    _tracked_pdfs.append(pdf)
    return pdf


def parse_packet(data: bytes) -> etree._Element:
    """Parse a finished packet and return its ``x:xmpmeta`` root.

    The xpacket processing instructions and the padding are legal XML
    around the root element, so the packet parses as a whole.
    """
    return etree.fromstring(data, _SECURE_XML_PARSER)


def description_of(data: bytes) -> etree._Element:
    """Return the single ``rdf:Description`` of a finished packet."""
    descriptions = parse_packet(data).xpath("rdf:RDF/rdf:Description", namespaces=NS)
    assert len(descriptions) == 1
    return descriptions[0]


def body_of(data: bytes) -> str:
    """Return the serialized properties between the Description tags."""
    text = data.decode("utf-8")
    start = text.index(">", text.index("<rdf:Description")) + 1
    end = text.index("</rdf:Description>")
    return text[start:end]


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests.

    Args:
        tmp_path: Pytest-provided temporary directory.

    Returns:
        Path to the temporary directory.
    """
    return tmp_path


@pytest.fixture
def writer() -> XmpWriter:
    """A fresh packet builder."""
    return XmpWriter()


@pytest.fixture
def golden_packet() -> bytes:
    """Expected bytes of the packet built in test_packet's golden test."""
    return (Path(__file__).parent / "data" / "golden_packet.xmp").read_bytes()
