# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""XML text escaping and name checks for XMP serialization."""

import re
from enum import Enum

from .exceptions import InvalidName

# Characters that XML 1.0 cannot represent at all: C0 controls other
# than tab/LF/CR, lone surrogates and the two non-characters U+FFFE/U+FFFF.
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_NAME_START_CHARS = (
    "A-Z_a-z"
    "\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u02ff\u0370-\u037d\u037f-\u1fff"
    "\u200c-\u200d\u2070-\u218f\u2c00-\u2fef\u3001-\ud7ff\uf900-\ufdcf"
    "\ufdf0-\ufffd\U00010000-\U000effff"
)
_NAME_CHARS = _NAME_START_CHARS + "\\-.0-9\u00b7\u0300-\u036f\u203f-\u2040"

# XML namespace-aware name without a colon (NCName)
_NCNAME_RE = re.compile(f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*")


class EscapeContext(Enum):
    """Where escaped text ends up in the document."""

    ELEMENT = "element"
    ATTRIBUTE = "attribute"


_ELEMENT_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        # Parsers fold a literal CR into LF
        "\r": "&#13;",
    }
)

# Attribute values are delimited with double quotes; whitespace is written
# as character references so attribute-value normalization keeps it intact.
_ATTRIBUTE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "\t": "&#9;",
        "\n": "&#10;",
        "\r": "&#13;",
    }
)


def escape(text: str, context: EscapeContext = EscapeContext.ELEMENT) -> str:
    """Convert raw text into text that is safe to place in an XMP packet.

    The input is always treated as raw text: ``"&amp;"`` becomes
    ``"&amp;amp;"``. Characters that XML 1.0 cannot carry are dropped.

    Args:
        text: Caller-supplied text.
        context: Element content or a double-quoted attribute value.

    Returns:
        The escaped text.
    """
    text = _XML_ILLEGAL_RE.sub("", text)
    if context is EscapeContext.ATTRIBUTE:
        return text.translate(_ATTRIBUTE_TABLE)
    return text.translate(_ELEMENT_TABLE)


def is_xml_name(name: str) -> bool:
    """Return True if ``name`` is usable as an unprefixed XML tag name."""
    return isinstance(name, str) and _NCNAME_RE.fullmatch(name) is not None


def check_name(name: str, what: str = "name") -> str:
    """Validate an element or prefix name.

    Args:
        name: Local name or namespace prefix.
        what: Description used in the error message.

    Returns:
        The name, unchanged.

    Raises:
        InvalidName: If the name is not a colon-free XML name.
    """
    if not is_xml_name(name):
        raise InvalidName(f"Invalid XML {what}: {name!r}")
    return name
