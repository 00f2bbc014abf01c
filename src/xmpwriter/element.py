# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Scoped writers for XMP elements, structs and arrays.

Every writer appends to the output buffer of the :class:`~xmpwriter.packet.XmpWriter`
it was created from. A writer that hands out a child writer is locked until
that child is closed, so at most one writer in a chain can append at any
time. Closing a writer writes its end tag and unlocks its parent; writers
are context managers that close themselves when the ``with`` block ends
without an exception.

Example::

    with writer.element("MaxPageSize", XMP_PAGED) as elem:
        with elem.struct(DIMENSIONS) as dims:
            dims.field_value("w", 210.0)
            dims.field_value("h", 297.0)
            dims.field_value("unit", "mm")
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

from .escape import EscapeContext, check_name, escape
from .exceptions import StructuralMisuse
from .namespaces import RDF, Namespace
from .values import (
    Array,
    ArrayKind,
    LangAlt,
    Struct,
    Text,
    Value,
    as_value,
    format_scalar,
)

if TYPE_CHECKING:
    from .packet import XmpWriter

logger = logging.getLogger(__name__)


class WriterState(Enum):
    """Lifecycle of a scoped writer."""

    OPEN = "open"
    PENDING = "pending"
    CLOSED = "closed"


class _Content(Enum):
    SCALAR = "scalar"
    STRUCT = "struct"
    ARRAY = "array"


def check_value(value: Value) -> None:
    """Validate a whole value tree before any of it is written.

    Raises:
        InvalidName: If a struct field name is not a legal XML name.
        StructuralMisuse: If a language alternative has two default entries.
            An empty language tag counts as a default entry.
        TypeError: If the tree contains something that is not a Value, or
            a language alternative entry that cannot be written.
    """
    if isinstance(value, Text):
        if not isinstance(value.value, str):
            raise TypeError(f"Text holds {type(value.value).__name__}, not str")
    elif isinstance(value, LangAlt):
        for lang, text in value.items:
            if lang is not None and not isinstance(lang, str):
                raise TypeError(
                    f"Language tag is {type(lang).__name__}, not str or None"
                )
            format_scalar(text)
        _check_single_default(value.items)
    elif isinstance(value, Struct):
        for name, child in value.fields.items():
            check_name(name, "field name")
            check_value(child)
    elif isinstance(value, Array):
        for child in value.items:
            check_value(child)
    else:
        raise TypeError(f"Not an XMP value: {value!r}")


def _check_single_default(items: Iterable[tuple[str | None, str]]) -> None:
    # xml:lang="" declares "no language" as well
    defaults = sum(1 for lang, _text in items if not lang)
    if defaults > 1:
        raise StructuralMisuse(
            f"Language alternative has {defaults} default entries, at most one "
            "is allowed"
        )


class _Scope:
    """Exclusive-access bookkeeping shared by the packet and its writers."""

    def __init__(self) -> None:
        self._child: "_Writer | None" = None
        self._closed = False

    @property
    def state(self) -> WriterState:
        if self._closed:
            return WriterState.CLOSED
        if self._child is not None:
            return WriterState.PENDING
        return WriterState.OPEN

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_writable(self) -> None:
        if self._closed:
            raise StructuralMisuse(f"{self!r} is already closed")
        if self._child is not None:
            raise StructuralMisuse(
                f"{self!r} is locked until {self._child!r} is closed"
            )

    def _adopt(self, child: "_Writer") -> None:
        self._child = child

    def _release(self, child: "_Writer") -> None:
        if self._child is not child:
            raise StructuralMisuse(f"{child!r} is not the open child of {self!r}")
        self._child = None


class _Writer(_Scope):
    """A writer bound to one region of the packet buffer."""

    def __init__(self, packet: "XmpWriter", parent: _Scope) -> None:
        super().__init__()
        self._packet = packet
        self._parent = parent

    def _emit(self, text: str) -> None:
        self._packet._emit(text)

    def _write_end(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Write the end tag(s) and hand control back to the parent.

        Raises:
            StructuralMisuse: If the writer is already closed or one of its
                children is still open.
        """
        self._check_writable()
        self._write_end()
        self._closed = True
        self._parent._release(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # On error the writer stays open, so the packet cannot be finished
        # with a half-written element in it.
        if exc_type is not None:
            logger.debug("%r left open after %s", self, exc_type.__name__)
        elif not self._closed:
            self.close()


class Element(_Writer):
    """Writer for one property, struct field or array item.

    The first content written decides what the element holds: text, a
    struct, or an array. A second content write of any kind is rejected.
    """

    def __init__(
        self,
        packet: "XmpWriter",
        parent: _Scope,
        name: str,
        namespace: Namespace,
        attrs: Iterable[tuple[str, str]] = (),
        field_namespace: Namespace | None = None,
    ) -> None:
        super().__init__(packet, parent)
        check_name(name, "element name")
        attr_text = "".join(
            f' {key}="{escape(val, EscapeContext.ATTRIBUTE)}"' for key, val in attrs
        )
        self._namespace = namespace
        # Struct fields below an rdf:li belong to the property, not to RDF
        self._field_namespace = field_namespace or namespace
        self._tag = f"{packet._prefix(namespace)}:{name}"
        self._content: _Content | None = None

        # One write, so a failed start leaves no partial tag behind
        self._emit(f"<{self._tag}{attr_text}")

    @property
    def tag(self) -> str:
        """The prefixed tag name, e.g. ``dc:title``."""
        return self._tag

    def __repr__(self) -> str:
        return f"<Element {self._tag} {self.state.value}>"

    def _claim(self, content: _Content) -> None:
        self._check_writable()
        if self._content is not None:
            raise StructuralMisuse(
                f"{self._tag} already holds {self._content.value} content, "
                f"cannot also write {content.value} content"
            )
        self._content = content

    def value(self, value: Any) -> "Element":
        """Write a simple value as the element's text.

        Args:
            value: ``str``, ``bool``, ``int``, ``float``, ``DateTime``,
                ``datetime`` or an enum member with one of those values.
        """
        text = escape(format_scalar(value))
        self._claim(_Content.SCALAR)
        self._emit(f">{text}")
        return self

    def struct(self, namespace: Namespace | None = None) -> "StructWriter":
        """Start a struct value; fields default to the property's namespace."""
        self._claim(_Content.STRUCT)
        self._emit(' rdf:parseType="Resource">')
        child = StructWriter(self._packet, self, namespace or self._field_namespace)
        self._adopt(child)
        return child

    def array(self, kind: ArrayKind) -> "ArrayWriter":
        """Start an array value of the given kind."""
        self._claim(_Content.ARRAY)
        self._emit(">")
        child = ArrayWriter(self._packet, self, kind, self._field_namespace)
        self._adopt(child)
        return child

    def unordered_array(self, items: Iterable[Any]) -> None:
        self.write(Array.of(ArrayKind.UNORDERED, items))

    def ordered_array(self, items: Iterable[Any]) -> None:
        self.write(Array.of(ArrayKind.ORDERED, items))

    def alternative_array(self, items: Iterable[Any]) -> None:
        self.write(Array.of(ArrayKind.ALTERNATIVE, items))

    def language_alternative(
        self, items: Iterable[tuple[str | None, str]]
    ) -> None:
        """Write an ``rdf:Alt`` of language-tagged text.

        Raises:
            StructuralMisuse: If more than one entry has no language.
        """
        self.write(LangAlt(tuple(items)))

    def write(self, value: Value) -> None:
        """Serialize a complete value tree into this element.

        The tree is validated first, so an invalid value leaves nothing
        behind in the packet.
        """
        check_value(value)
        self._write_value(value)

    def _write_value(self, value: Value) -> None:
        if isinstance(value, Text):
            self.value(value.value)
        elif isinstance(value, LangAlt):
            with self.array(ArrayKind.ALTERNATIVE) as array:
                for lang, text in value.items:
                    array.add(text, lang=lang)
        elif isinstance(value, Struct):
            with self.struct(value.namespace) as stc:
                for name, field_value in value.fields.items():
                    with stc.field(name) as elem:
                        elem._write_value(field_value)
        elif isinstance(value, Array):
            with self.array(value.kind) as array:
                for item in value.items:
                    with array.item() as elem:
                        elem._write_value(item)
        else:
            raise TypeError(f"Not an XMP value: {value!r}")

    def _write_end(self) -> None:
        if self._content is None:
            self._emit("/>")
        else:
            self._emit(f"</{self._tag}>")


class StructWriter(_Writer):
    """Writer for the fields of a struct (``rdf:parseType="Resource"``)."""

    def __init__(
        self, packet: "XmpWriter", parent: _Scope, namespace: Namespace
    ) -> None:
        super().__init__(packet, parent)
        self._namespace = namespace

    def __repr__(self) -> str:
        return f"<StructWriter {self._namespace.prefix} {self.state.value}>"

    @property
    def namespace(self) -> Namespace:
        return self._namespace

    def field(self, name: str, namespace: Namespace | None = None) -> Element:
        """Start a field element; close it before starting the next one."""
        self._check_writable()
        child = Element(self._packet, self, name, namespace or self._namespace)
        self._adopt(child)
        return child

    def field_value(
        self, name: str, value: Any, namespace: Namespace | None = None
    ) -> "StructWriter":
        """Write a complete field in one call."""
        value = as_value(value)
        check_value(value)
        with self.field(name, namespace) as elem:
            elem._write_value(value)
        return self

    def _write_end(self) -> None:
        # Fields sit directly inside the parseType="Resource" element
        pass


class ArrayWriter(_Writer):
    """Writer for the ``rdf:li`` items of an RDF container."""

    def __init__(
        self,
        packet: "XmpWriter",
        parent: _Scope,
        kind: ArrayKind,
        field_namespace: Namespace,
    ) -> None:
        super().__init__(packet, parent)
        self._kind = kind
        self._field_namespace = field_namespace
        self._count = 0
        self._emit(f"<rdf:{kind.rdf_type}>")

    def __repr__(self) -> str:
        return f"<ArrayWriter rdf:{self._kind.rdf_type} {self.state.value}>"

    @property
    def kind(self) -> ArrayKind:
        return self._kind

    def __len__(self) -> int:
        return self._count

    def item(self, lang: str | None = None) -> Element:
        """Start an ``rdf:li`` item, tagged with ``xml:lang`` if given."""
        self._check_writable()
        if lang is not None and not isinstance(lang, str):
            raise TypeError(f"Language tag is {type(lang).__name__}, not str")
        attrs = [("xml:lang", lang)] if lang is not None else []
        child = Element(
            self._packet, self, "li", RDF, attrs, self._field_namespace
        )
        self._adopt(child)
        self._count += 1
        return child

    def add(self, value: Any, lang: str | None = None) -> "ArrayWriter":
        """Write a complete item in one call."""
        value = as_value(value)
        check_value(value)
        with self.item(lang) as elem:
            elem._write_value(value)
        return self

    def _write_end(self) -> None:
        self._emit(f"</rdf:{self._kind.rdf_type}>")
