# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Named XMP properties from the common schemas.

Each function maps one property onto :meth:`XmpWriter.set_property` and
returns the writer so calls can be chained. Language alternatives take
``(language, text)`` pairs where a language of ``None`` marks the default
entry.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from .namespaces import (
    ADOBE_PDF,
    DIMENSIONS,
    DUBLIN_CORE,
    PDFA_ID,
    PDFX_ID,
    RESOURCE_EVENT,
    XMP,
    XMP_IDQ,
    XMP_MEDIA,
    XMP_PAGED,
    XMP_RIGHTS,
)
from .packet import XmpWriter
from .values import Array, ArrayKind, DateTime, LangAlt, Struct, as_value

LangItems = Iterable[tuple[str | None, str]]


def _bag(items: Iterable[Any]) -> Array:
    return Array.of(ArrayKind.UNORDERED, items)


def _seq(items: Iterable[Any]) -> Array:
    return Array.of(ArrayKind.ORDERED, items)


# -- Dublin Core --


def contributor(writer: XmpWriter, names: Iterable[str]) -> XmpWriter:
    """``dc:contributor``: contributors not listed as creators."""
    return writer.set_property(DUBLIN_CORE, "contributor", _bag(names))


def coverage(writer: XmpWriter, text: str) -> XmpWriter:
    return writer.set_property(DUBLIN_CORE, "coverage", text)


def creator(writer: XmpWriter, names: Iterable[str]) -> XmpWriter:
    """``dc:creator``: the authors, in order of precedence."""
    return writer.set_property(DUBLIN_CORE, "creator", _seq(names))


def date(writer: XmpWriter, dates: Iterable[DateTime]) -> XmpWriter:
    """``dc:date``: dates of events in the life of the resource."""
    return writer.set_property(DUBLIN_CORE, "date", _seq(dates))


def description(writer: XmpWriter, items: LangItems) -> XmpWriter:
    """``dc:description``: an account of the resource."""
    return writer.set_property(DUBLIN_CORE, "description", LangAlt(tuple(items)))


def format_(writer: XmpWriter, mime: str) -> XmpWriter:
    """``dc:format``: the MIME type of the resource."""
    return writer.set_property(DUBLIN_CORE, "format", mime)


def identifier(writer: XmpWriter, text: str) -> XmpWriter:
    return writer.set_property(DUBLIN_CORE, "identifier", text)


def language(writer: XmpWriter, langs: Iterable[str]) -> XmpWriter:
    """``dc:language``: RFC 3066 tags of the languages used."""
    return writer.set_property(DUBLIN_CORE, "language", _bag(langs))


def publisher(writer: XmpWriter, names: Iterable[str]) -> XmpWriter:
    return writer.set_property(DUBLIN_CORE, "publisher", _bag(names))


def relation(writer: XmpWriter, relations: Iterable[str]) -> XmpWriter:
    return writer.set_property(DUBLIN_CORE, "relation", _bag(relations))


def rights(writer: XmpWriter, items: LangItems) -> XmpWriter:
    """``dc:rights``: informal rights statements."""
    return writer.set_property(DUBLIN_CORE, "rights", LangAlt(tuple(items)))


def source(writer: XmpWriter, text: str) -> XmpWriter:
    return writer.set_property(DUBLIN_CORE, "source", text)


def subject(writer: XmpWriter, keywords: Iterable[str]) -> XmpWriter:
    """``dc:subject``: keywords describing the topic of the resource."""
    return writer.set_property(DUBLIN_CORE, "subject", _bag(keywords))


def title(writer: XmpWriter, items: LangItems) -> XmpWriter:
    """``dc:title``: the name of the resource, possibly in several languages."""
    return writer.set_property(DUBLIN_CORE, "title", LangAlt(tuple(items)))


def type_(writer: XmpWriter, kinds: Iterable[str]) -> XmpWriter:
    """``dc:type``: nature or genre; use :func:`format_` for the MIME type."""
    return writer.set_property(DUBLIN_CORE, "type", _bag(kinds))


# -- XMP Basic --


def base_url(writer: XmpWriter, url: str) -> XmpWriter:
    return writer.set_property(XMP, "BaseURL", url)


def create_date(writer: XmpWriter, when: DateTime) -> XmpWriter:
    return writer.set_property(XMP, "CreateDate", when)


def creator_tool(writer: XmpWriter, tool: str) -> XmpWriter:
    """``xmp:CreatorTool``: the application that created the resource."""
    return writer.set_property(XMP, "CreatorTool", tool)


def xmp_identifier(writer: XmpWriter, ids: Iterable[str]) -> XmpWriter:
    """``xmp:Identifier``; see :func:`idq_scheme` for the scheme qualifier."""
    return writer.set_property(XMP, "Identifier", _bag(ids))


def label(writer: XmpWriter, text: str) -> XmpWriter:
    return writer.set_property(XMP, "Label", text)


def metadata_date(writer: XmpWriter, when: DateTime) -> XmpWriter:
    return writer.set_property(XMP, "MetadataDate", when)


def modify_date(writer: XmpWriter, when: DateTime) -> XmpWriter:
    return writer.set_property(XMP, "ModifyDate", when)


def nickname(writer: XmpWriter, text: str) -> XmpWriter:
    return writer.set_property(XMP, "Nickname", text)


def rating(writer: XmpWriter, stars: int) -> XmpWriter:
    """``xmp:Rating``: -1 for rejected, 0 for unrated, otherwise 1 to 5.

    Raises:
        ValueError: If ``stars`` is outside -1..5.
    """
    if not -1 <= stars <= 5:
        raise ValueError(f"Invalid rating: {stars} (must be between -1 and 5)")
    return writer.set_property(XMP, "Rating", stars)


# -- XMP Rights Management --


def certificate(writer: XmpWriter, url: str) -> XmpWriter:
    return writer.set_property(XMP_RIGHTS, "Certificate", url)


def marked(writer: XmpWriter, is_marked: bool) -> XmpWriter:
    """``xmpRights:Marked``: False means the resource is public domain."""
    return writer.set_property(XMP_RIGHTS, "Marked", is_marked)


def owner(writer: XmpWriter, owners: Iterable[str]) -> XmpWriter:
    return writer.set_property(XMP_RIGHTS, "Owner", _bag(owners))


def usage_terms(writer: XmpWriter, items: LangItems) -> XmpWriter:
    return writer.set_property(XMP_RIGHTS, "UsageTerms", LangAlt(tuple(items)))


def web_statement(writer: XmpWriter, url: str) -> XmpWriter:
    return writer.set_property(XMP_RIGHTS, "WebStatement", url)


# -- XMP Media Management --


def document_id(writer: XmpWriter, doc_id: str) -> XmpWriter:
    """``xmpMM:DocumentID``: shared by all versions of the document."""
    return writer.set_property(XMP_MEDIA, "DocumentID", doc_id)


def instance_id(writer: XmpWriter, inst_id: str) -> XmpWriter:
    """``xmpMM:InstanceID``: changes every time the document is saved."""
    return writer.set_property(XMP_MEDIA, "InstanceID", inst_id)


def original_document_id(writer: XmpWriter, doc_id: str) -> XmpWriter:
    return writer.set_property(XMP_MEDIA, "OriginalDocumentID", doc_id)


def version_id(writer: XmpWriter, version: str) -> XmpWriter:
    return writer.set_property(XMP_MEDIA, "VersionID", version)


def history(writer: XmpWriter, events: Iterable[Mapping[str, Any]]) -> XmpWriter:
    """``xmpMM:History``: a sequence of ``stEvt`` resource events.

    Each event maps field names such as ``action``, ``when``,
    ``softwareAgent`` or ``instanceID`` to scalar values.
    """
    items = [
        Struct({name: as_value(val) for name, val in event.items()}, RESOURCE_EVENT)
        for event in events
    ]
    return writer.set_property(XMP_MEDIA, "History", Array(ArrayKind.ORDERED, items))


# -- Paged-text --


def num_pages(writer: XmpWriter, count: int) -> XmpWriter:
    return writer.set_property(XMP_PAGED, "NPages", count)


def max_page_size(
    writer: XmpWriter, width: float, height: float, unit: str = "mm"
) -> XmpWriter:
    """``xmpTPg:MaxPageSize`` as an ``stDim`` struct."""
    dims = Struct(
        {"w": as_value(width), "h": as_value(height), "unit": as_value(unit)},
        DIMENSIONS,
    )
    return writer.set_property(XMP_PAGED, "MaxPageSize", dims)


def plate_names(writer: XmpWriter, names: Iterable[str]) -> XmpWriter:
    return writer.set_property(XMP_PAGED, "PlateNames", _seq(names))


# -- Adobe PDF --


def keywords(writer: XmpWriter, text: str) -> XmpWriter:
    """``pdf:Keywords``: the keywords as one string."""
    return writer.set_property(ADOBE_PDF, "Keywords", text)


def pdf_version(writer: XmpWriter, version: str) -> XmpWriter:
    return writer.set_property(ADOBE_PDF, "PDFVersion", version)


def producer(writer: XmpWriter, name: str) -> XmpWriter:
    """``pdf:Producer``: the application that wrote the PDF."""
    return writer.set_property(ADOBE_PDF, "Producer", name)


def trapped(writer: XmpWriter, is_trapped: bool) -> XmpWriter:
    return writer.set_property(ADOBE_PDF, "Trapped", is_trapped)


# -- PDF/A and PDF/X identification --


def pdfa_part(writer: XmpWriter, part: int) -> XmpWriter:
    """``pdfaid:part``, e.g. 2 for PDF/A-2."""
    return writer.set_property(PDFA_ID, "part", part)


def pdfa_conformance(writer: XmpWriter, conformance: str) -> XmpWriter:
    """``pdfaid:conformance``: A, B or U."""
    return writer.set_property(PDFA_ID, "conformance", conformance.upper())


def pdfx_version(writer: XmpWriter, version: str) -> XmpWriter:
    return writer.set_property(PDFX_ID, "GTS_PDFXVersion", version)


def idq_scheme(writer: XmpWriter, scheme: str) -> XmpWriter:
    """``xmpidq:Scheme``: qualifies the scheme of ``xmp:Identifier``."""
    return writer.set_property(XMP_IDQ, "Scheme", scheme)
