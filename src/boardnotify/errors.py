"""Full error hierarchy for boardnotify.

Every public error class inherits from BoardNotifyError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Per-diff rendering failures are never raised out of a batch conversion;
they are collected by :class:`MultiError` and surfaced as a single
:class:`NotifyBatchError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the library can raise."""

    TEMPLATE_COMPILE_ERROR = "TEMPLATE_COMPILE_ERROR"
    TEMPLATE_EXECUTION_ERROR = "TEMPLATE_EXECUTION_ERROR"
    DIFF_VALIDATION_ERROR = "DIFF_VALIDATION_ERROR"
    RENDER_ERROR = "RENDER_ERROR"
    BATCH_ERROR = "BATCH_ERROR"
    DELIVERY_ERROR = "DELIVERY_ERROR"
    DELIVERY_AUTH_ERROR = "DELIVERY_AUTH_ERROR"
    DELIVERY_NOT_FOUND = "DELIVERY_NOT_FOUND"
    DELIVERY_VALIDATION_ERROR = "DELIVERY_VALIDATION_ERROR"
    DELIVERY_SERVER_ERROR = "DELIVERY_SERVER_ERROR"
    DELIVERY_NETWORK_ERROR = "DELIVERY_NETWORK_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class BoardNotifyError(Exception):
    """Base exception for all boardnotify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
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


# ---------------------------------------------------------------------------
# Template errors
# ---------------------------------------------------------------------------

class TemplateError(BoardNotifyError):
    """Base class for template compilation and rendering errors.

    Context keys: ``template``, ``language``.
    """

    def __init__(
        self,
        code: str = ErrorCode.TEMPLATE_EXECUTION_ERROR,
        message: str = "Template error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class TemplateCompileError(TemplateError):
    """A template source could not be parsed.

    Failed compiles are never cached, so the next lookup with the same
    ``(name, language)`` key compiles again.

    Context keys: ``template``, ``language``, ``lineno``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TEMPLATE_COMPILE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class TemplateExecutionError(TemplateError):
    """A compiled template failed while rendering (e.g. data shape mismatch).

    Context keys: ``template``, ``card_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TEMPLATE_EXECUTION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------

class DiffValidationError(BoardNotifyError):
    """A diff tree is malformed: cyclic, too deep, or of the wrong shape.

    Context keys: ``path``, ``depth``, ``max_depth``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DIFF_VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class RenderError(BoardNotifyError):
    """An unexpected failure while building the attachment for one card.

    Wraps non-library exceptions so the batch aggregate only ever holds
    :class:`BoardNotifyError` instances.

    Context keys: ``card_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RENDER_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Aggregate errors
# ---------------------------------------------------------------------------

class NotifyBatchError(BoardNotifyError):
    """One or more diffs in a batch failed to render.

    Attributes
    ----------
    errors:
        The individual per-diff errors, in the order they occurred.
    """

    def __init__(self, errors: list[BoardNotifyError]) -> None:
        self.errors: list[BoardNotifyError] = list(errors)
        if len(self.errors) == 1:
            summary = "1 error occurred:"
        else:
            summary = f"{len(self.errors)} errors occurred:"
        lines = [summary] + [f"\t* {err}" for err in self.errors]
        super().__init__(
            code=ErrorCode.BATCH_ERROR,
            message="\n".join(lines),
            context={"count": len(self.errors)},
        )

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


class MultiError:
    """Collects errors and converts them to a single aggregate on demand.

    Used by :meth:`DiffConverter.convert` while a batch runs and by
    :attr:`BatchResult.error` to build the aggregate.
    """

    __slots__ = ("_errors",)

    def __init__(self, errors: Iterable[BoardNotifyError] = ()) -> None:
        self._errors: list[BoardNotifyError] = list(errors)

    def append(self, err: BoardNotifyError) -> None:
        self._errors.append(err)

    @property
    def errors(self) -> list[BoardNotifyError]:
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def error_or_none(self) -> NotifyBatchError | None:
        """Return a :class:`NotifyBatchError` or ``None`` if nothing was appended."""
        if not self._errors:
            return None
        return NotifyBatchError(self._errors)


# ---------------------------------------------------------------------------
# Delivery errors
# ---------------------------------------------------------------------------

class DeliveryError(BoardNotifyError):
    """Base class for webhook delivery failures.

    Context keys: ``status_code``, ``body``.
    """

    def __init__(
        self,
        code: str = ErrorCode.DELIVERY_ERROR,
        message: str = "Delivery error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class DeliveryAuthError(DeliveryError):
    """The webhook endpoint returned 401 or 403."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DELIVERY_AUTH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class DeliveryNotFoundError(DeliveryError):
    """The webhook endpoint returned 404 (hook removed or mistyped)."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DELIVERY_NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class DeliveryValidationError(DeliveryError):
    """The webhook endpoint rejected the payload (400 and other 4xx)."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DELIVERY_VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class DeliveryServerError(DeliveryError):
    """The webhook endpoint returned a 5xx status."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DELIVERY_SERVER_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class DeliveryNetworkError(DeliveryError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url`` (redacted).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DELIVERY_NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
