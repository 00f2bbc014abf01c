# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""PDF/A extension schema descriptions.

PDF/A requires every property outside the predefined XMP schemas to be
described in a ``pdfaExtension:schemas`` bag inside the packet itself.
:func:`write_extension_schemas` writes that bag from plain dataclasses.
Descriptions of the common schemas are available ready-made, e.g.
:func:`pdfaid_schema`; their ``properties`` list can be trimmed to the
properties a document actually uses.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .element import ArrayWriter, StructWriter
from .namespaces import (
    ADOBE_PDF,
    PDFA_EXTENSION,
    PDFA_FIELD,
    PDFA_ID,
    PDFA_PROPERTY,
    PDFA_SCHEMA,
    PDFA_TYPE,
    XMP,
    XMP_MEDIA,
    Namespace,
)
from .packet import XmpWriter
from .values import ArrayKind

logger = logging.getLogger(__name__)


@dataclass
class ExtensionProperty:
    """One property of an extension schema.

    Attributes:
        name: Local name of the property.
        value_type: XMP value type, e.g. ``Text``, ``Integer`` or a type
            declared in the same schema.
        internal: True if the property is derived from the document
            content, False if it is entered by a user.
        description: Human-readable description.
    """

    name: str
    value_type: str = "Text"
    internal: bool = False
    description: str = ""

    @property
    def category(self) -> str:
        return "internal" if self.internal else "external"


@dataclass
class ExtensionField:
    """A field of a structured extension value type."""

    name: str
    value_type: str = "Text"
    description: str = ""


@dataclass
class ExtensionValueType:
    """A structured value type declared by an extension schema."""

    type_name: str
    namespace: Namespace
    description: str = ""
    fields: list[ExtensionField] = field(default_factory=list)


@dataclass
class ExtensionSchema:
    """Description of one custom namespace and its properties."""

    namespace: Namespace
    properties: list[ExtensionProperty] = field(default_factory=list)
    value_types: list[ExtensionValueType] = field(default_factory=list)
    schema: str | None = None

    @property
    def schema_name(self) -> str:
        return self.schema or f"{self.namespace.prefix} schema"


def pdfaid_schema(corrigendum: bool = False) -> ExtensionSchema:
    """Describe the PDF/A identification schema.

    Args:
        corrigendum: Also describe ``pdfaid:corr``.
    """
    properties = [
        ExtensionProperty("part", "Integer", True, "Part of PDF/A standard"),
        ExtensionProperty("amd", "Text", True, "Amendment of PDF/A standard"),
    ]
    if corrigendum:
        properties.append(
            ExtensionProperty("corr", "Text", True, "Corrigendum of PDF/A standard")
        )
    properties.append(
        ExtensionProperty(
            "conformance", "Text", True, "Conformance level of PDF/A standard"
        )
    )
    return ExtensionSchema(PDFA_ID, properties)


def adobe_pdf_schema() -> ExtensionSchema:
    """Describe the Adobe PDF schema properties."""
    return ExtensionSchema(
        ADOBE_PDF,
        [
            ExtensionProperty(
                "Keywords", "Text", False, "Keywords associated with the document"
            ),
            ExtensionProperty(
                "PDFVersion",
                "Text",
                True,
                "Version of the PDF specification to which the document conforms",
            ),
            ExtensionProperty(
                "Producer",
                "Text",
                True,
                "Name of the application that created the PDF document",
            ),
            ExtensionProperty(
                "Trapped", "Text", True, "Whether the document has been trapped"
            ),
        ],
    )


def xmp_schema() -> ExtensionSchema:
    """Describe the XMP Basic properties added after PDF/A-1 (XMP 2005)."""
    return ExtensionSchema(
        XMP,
        [
            ExtensionProperty(
                "Label", "Text", False, "A user-defined label for the resource"
            ),
            ExtensionProperty(
                "Rating", "Integer", False, "A user-assigned rating of the resource"
            ),
        ],
    )


def xmp_media_management_schema() -> ExtensionSchema:
    """Describe the XMP Media Management properties added after PDF/A-1."""
    return ExtensionSchema(
        XMP_MEDIA,
        [
            ExtensionProperty(
                "InstanceID",
                "Text",
                True,
                "UUID based identifier for specific incarnation of a document",
            ),
            ExtensionProperty(
                "Ingredients",
                "ResourceRef",
                True,
                "List of ingredients that were used to create a document",
            ),
            ExtensionProperty(
                "OriginalDocumentID",
                "Text",
                True,
                "UUID based identifier for original document from which a "
                "document is derived",
            ),
            ExtensionProperty(
                "Pantry",
                "ResourceRef",
                True,
                "List of ingredients that were used to create a document",
            ),
        ],
    )


def _write_property(props: ArrayWriter, prop: ExtensionProperty) -> None:
    with props.item() as item, item.struct(PDFA_PROPERTY) as stc:
        stc.field_value("name", prop.name)
        stc.field_value("valueType", prop.value_type)
        stc.field_value("category", prop.category)
        stc.field_value("description", prop.description)


def _write_value_type(types: ArrayWriter, value_type: ExtensionValueType) -> None:
    with types.item() as item, item.struct(PDFA_TYPE) as stc:
        stc.field_value("type", value_type.type_name)
        stc.field_value("namespaceURI", value_type.namespace.uri)
        stc.field_value("prefix", value_type.namespace.prefix)
        stc.field_value("description", value_type.description)
        if value_type.fields:
            with stc.field("field") as elem, elem.array(ArrayKind.ORDERED) as seq:
                for fld in value_type.fields:
                    with seq.item() as fld_item, fld_item.struct(PDFA_FIELD) as f:
                        f.field_value("name", fld.name)
                        f.field_value("valueType", fld.value_type)
                        f.field_value("description", fld.description)


def _write_schema(stc: StructWriter, schema: ExtensionSchema) -> None:
    stc.field_value("schema", schema.schema_name)
    stc.field_value("namespaceURI", schema.namespace.uri)
    stc.field_value("prefix", schema.namespace.prefix)

    if schema.properties:
        with stc.field("property") as elem, elem.array(ArrayKind.ORDERED) as seq:
            for prop in schema.properties:
                _write_property(seq, prop)

    if schema.value_types:
        with stc.field("valueType") as elem, elem.array(ArrayKind.ORDERED) as seq:
            for value_type in schema.value_types:
                _write_value_type(seq, value_type)


def write_extension_schemas(
    writer: XmpWriter, schemas: Iterable[ExtensionSchema]
) -> XmpWriter:
    """Write the ``pdfaExtension:schemas`` property.

    Args:
        writer: Packet to write into.
        schemas: Schemas to describe, written in the given order.

    Returns:
        The writer, for chaining.
    """
    schemas = list(schemas)
    with writer.element("schemas", PDFA_EXTENSION) as elem:
        with elem.array(ArrayKind.UNORDERED) as bag:
            for schema in schemas:
                with bag.item() as item, item.struct(PDFA_SCHEMA) as stc:
                    _write_schema(stc, schema)
    logger.debug("Described %d PDF/A extension schema(s)", len(schemas))
    return writer
