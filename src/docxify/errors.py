"""Error hierarchy for docxify.

Every public error class inherits from DocxifyError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Only hard failures are raised.  Per-construct problems met while building
a document (an image that cannot be fetched, an SVG, a token kind with no
handler) are recorded as :class:`~docxify.models.ConversionWarning` values
instead and never abort a conversion.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class DocxifyError(Exception):
    """Base exception for all docxify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class DocxifyValidationError(DocxifyError):
    """The caller supplied unusable input (e.g. empty markdown).

    Context keys: ``field``, ``name``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class DocxifyConversionError(DocxifyError):
    """Base class for errors during Markdown to document conversion."""

    def __init__(
        self,
        code: str = ErrorCode.CONVERSION_ERROR,
        message: str = "Conversion error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class DocxifyEncodingError(DocxifyConversionError):
    """The encoder could not serialise a finished document model.

    This is the only error that is fatal to a whole conversion.  The
    original diagnostic is kept in ``message`` and as ``cause``.

    Context keys: ``blocks``, ``block_index``, ``block_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.ENCODING_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
