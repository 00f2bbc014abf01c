# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for xmpwriter."""


class XmpWriterError(Exception):
    """Base exception for all xmpwriter errors."""


class StructuralMisuse(XmpWriterError):
    """A writer was used in a way that would produce malformed XMP.

    Raised for writes on a closed or busy writer, incompatible content
    writes on one element, and language alternatives with more than one
    default entry.
    """


class InvalidName(XmpWriterError):
    """A property, field or prefix name is not a legal XML name."""
