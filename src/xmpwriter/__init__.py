# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""xmpwriter - Write XMP metadata packets, step by step."""

from importlib.metadata import PackageNotFoundError, version

from .element import ArrayWriter, Element, StructWriter, WriterState
from .escape import EscapeContext, escape, is_xml_name
from .exceptions import InvalidName, StructuralMisuse, XmpWriterError
from .namespaces import Namespace, NamespaceRegistry, register_namespace
from .packet import DEFAULT_PADDING, XmpWriter
from .values import (
    DEFAULT_LANGUAGE,
    Array,
    ArrayKind,
    DateTime,
    LangAlt,
    Struct,
    Text,
    Value,
)

try:
    __version__ = version("xmpwriter")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "XmpWriter",
    "Element",
    "StructWriter",
    "ArrayWriter",
    "WriterState",
    "DEFAULT_PADDING",
    "Namespace",
    "NamespaceRegistry",
    "register_namespace",
    "Value",
    "Text",
    "LangAlt",
    "Struct",
    "Array",
    "ArrayKind",
    "DateTime",
    "DEFAULT_LANGUAGE",
    "EscapeContext",
    "escape",
    "is_xml_name",
    "XmpWriterError",
    "StructuralMisuse",
    "InvalidName",
]
