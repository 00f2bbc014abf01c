# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""XMP namespaces and per-packet prefix bookkeeping."""

import logging
from dataclasses import dataclass

from .escape import check_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Namespace:
    """An XML namespace with the prefix it would like to be written with.

    The URI is the identity of a namespace; the prefix is only a
    preference and may be replaced by a minted one inside a packet.
    """

    prefix: str
    uri: str

    def __post_init__(self) -> None:
        check_name(self.prefix, "namespace prefix")
        check_uri(self.uri)


def check_uri(uri: str) -> str:
    """Return ``uri`` if a prefix may be bound to it.

    Raises:
        ValueError: If ``uri`` is empty or not a string. XML does not allow
            binding a prefix to the empty namespace name.
    """
    if not isinstance(uri, str) or not uri:
        raise ValueError(f"Invalid namespace URI: {uri!r}")
    return uri


XML_URI = "http://www.w3.org/XML/1998/namespace"
XMLNS_URI = "http://www.w3.org/2000/xmlns/"

META = Namespace("x", "adobe:ns:meta/")
RDF = Namespace("rdf", "http://www.w3.org/1999/02/22-rdf-syntax-ns#")
DUBLIN_CORE = Namespace("dc", "http://purl.org/dc/elements/1.1/")
XMP = Namespace("xmp", "http://ns.adobe.com/xap/1.0/")
XMP_RIGHTS = Namespace("xmpRights", "http://ns.adobe.com/xap/1.0/rights/")
XMP_MEDIA = Namespace("xmpMM", "http://ns.adobe.com/xap/1.0/mm/")
XMP_JOB_MANAGEMENT = Namespace("xmpBJ", "http://ns.adobe.com/xap/1.0/bj/")
XMP_PAGED = Namespace("xmpTPg", "http://ns.adobe.com/xap/1.0/t/pg/")
XMP_DYNAMIC_MEDIA = Namespace("xmpDM", "http://ns.adobe.com/xmp/1.0/DynamicMedia/")
XMP_COLORANT = Namespace("xmpG", "http://ns.adobe.com/xap/1.0/g/")
XMP_IMAGE = Namespace("xmpGImg", "http://ns.adobe.com/xap/1.0/g/img/")
XMP_IDQ = Namespace("xmpidq", "http://ns.adobe.com/xmp/Identifier/qual/1.0/")
RESOURCE_REF = Namespace("stRef", "http://ns.adobe.com/xap/1.0/sType/ResourceRef#")
RESOURCE_EVENT = Namespace(
    "stEvt", "http://ns.adobe.com/xap/1.0/sType/ResourceEvent#"
)
VERSION = Namespace("stVer", "http://ns.adobe.com/xap/1.0/sType/Version#")
JOB = Namespace("stJob", "http://ns.adobe.com/xap/1.0/sType/Job#")
FONT = Namespace("stFnt", "http://ns.adobe.com/xap/1.0/sType/Font#")
DIMENSIONS = Namespace("stDim", "http://ns.adobe.com/xap/1.0/sType/Dimensions#")
ADOBE_PDF = Namespace("pdf", "http://ns.adobe.com/pdf/1.3/")
PHOTOSHOP = Namespace("photoshop", "http://ns.adobe.com/photoshop/1.0/")
PDFA_ID = Namespace("pdfaid", "http://www.aiim.org/pdfa/ns/id/")
PDFX_ID = Namespace("pdfxid", "http://www.npes.org/pdfx/ns/id/")
PDFA_EXTENSION = Namespace("pdfaExtension", "http://www.aiim.org/pdfa/ns/extension/")
PDFA_SCHEMA = Namespace("pdfaSchema", "http://www.aiim.org/pdfa/ns/schema#")
PDFA_PROPERTY = Namespace("pdfaProperty", "http://www.aiim.org/pdfa/ns/property#")
PDFA_TYPE = Namespace("pdfaType", "http://www.aiim.org/pdfa/ns/type#")
PDFA_FIELD = Namespace("pdfaField", "http://www.aiim.org/pdfa/ns/field#")

# Process-wide prefix preferences, keyed by URI
_PREFERRED_PREFIXES: dict[str, str] = {
    ns.uri: ns.prefix
    for ns in (
        META,
        RDF,
        DUBLIN_CORE,
        XMP,
        XMP_RIGHTS,
        XMP_MEDIA,
        XMP_JOB_MANAGEMENT,
        XMP_PAGED,
        XMP_DYNAMIC_MEDIA,
        XMP_COLORANT,
        XMP_IMAGE,
        XMP_IDQ,
        RESOURCE_REF,
        RESOURCE_EVENT,
        VERSION,
        JOB,
        FONT,
        DIMENSIONS,
        ADOBE_PDF,
        PHOTOSHOP,
        PDFA_ID,
        PDFX_ID,
        PDFA_EXTENSION,
        PDFA_SCHEMA,
        PDFA_PROPERTY,
        PDFA_TYPE,
        PDFA_FIELD,
    )
}

# Prefixes bound by the packet envelope or by XML itself
_RESERVED_PREFIXES = {
    "x": META.uri,
    "rdf": RDF.uri,
    "xml": XML_URI,
    "xmlns": XMLNS_URI,
}

_FALLBACK_PREFIX = "ns"


def register_namespace(prefix: str, uri: str) -> Namespace:
    """Record the preferred prefix for a namespace URI.

    Packets started after this call use ``prefix`` for ``uri`` when no
    other prefix is requested and the prefix is still free in the packet.

    Raises:
        InvalidName: If ``prefix`` is not a legal XML name.
        ValueError: If ``uri`` is empty, or ``prefix`` or ``uri`` belongs to
            the packet envelope.
    """
    check_name(prefix, "namespace prefix")
    check_uri(uri)
    if prefix in _RESERVED_PREFIXES or uri in _RESERVED_PREFIXES.values():
        raise ValueError(f"Namespace {prefix}={uri} is reserved")
    _PREFERRED_PREFIXES[uri] = prefix
    return Namespace(prefix, uri)


def preferred_prefix(uri: str) -> str | None:
    """Return the process-wide preferred prefix for ``uri``, if any."""
    return _PREFERRED_PREFIXES.get(uri)


class NamespaceRegistry:
    """Namespaces declared by one packet, in registration order.

    A URI is declared under exactly one prefix. When the requested prefix
    is already bound to another URI, the registry mints ``prefix2``,
    ``prefix3``, ... and uses the first free one, so the same sequence of
    registrations always yields the same prefixes.
    """

    def __init__(self) -> None:
        self._by_prefix: dict[str, str] = {}
        self._by_uri: dict[str, str] = {}

    def resolve_or_register(self, candidate_prefix: str | None, uri: str) -> str:
        """Return the prefix ``uri`` is declared under, declaring it if needed.

        Args:
            candidate_prefix: Prefix to use if the URI is new. ``None`` uses
                the process-wide preference for the URI, or ``"ns"``.
            uri: Namespace URI.

        Returns:
            The prefix bound to ``uri`` in this packet.

        Raises:
            InvalidName: If ``candidate_prefix`` is not a legal XML name.
            ValueError: If ``uri`` is empty.
        """
        check_uri(uri)
        if uri in _RESERVED_PREFIXES.values():
            return next(p for p, u in _RESERVED_PREFIXES.items() if u == uri)

        existing = self._by_uri.get(uri)
        if existing is not None:
            return existing

        if candidate_prefix is None:
            candidate_prefix = preferred_prefix(uri) or _FALLBACK_PREFIX
        check_name(candidate_prefix, "namespace prefix")

        prefix = candidate_prefix
        counter = 1
        while prefix in self._by_prefix or prefix in _RESERVED_PREFIXES:
            counter += 1
            prefix = f"{candidate_prefix}{counter}"
        if prefix != candidate_prefix:
            logger.debug(
                "Prefix %r is taken, declaring %s as %r",
                candidate_prefix,
                uri,
                prefix,
            )

        self._by_prefix[prefix] = uri
        self._by_uri[uri] = prefix
        return prefix

    def resolve(self, namespace: Namespace) -> str:
        """Shorthand for :meth:`resolve_or_register` with a Namespace."""
        return self.resolve_or_register(namespace.prefix, namespace.uri)

    def declarations(self) -> list[tuple[str, str]]:
        """Return ``(prefix, uri)`` pairs in registration order."""
        return list(self._by_prefix.items())

    def __contains__(self, uri: object) -> bool:
        return uri in self._by_uri

    def __len__(self) -> int:
        return len(self._by_prefix)
