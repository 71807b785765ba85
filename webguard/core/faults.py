"""Typed fault hierarchy and classification of recovered faults.

Anything a request handler raises is a fault. Faults come in three shapes:

- **Errors**: any ``Exception`` is an error in its own right
- **MappingFault**: a mapping of fields, carrying its error under ``"error"``
- **ValueFault**: an arbitrary value, formatted into a generic error message

``raise_fault`` lets handlers raise non-exception values in one of these
shapes, and ``classify_fault`` turns whatever the fault handler caught into a
``FaultRecord`` holding a concrete error that is safe to log. Classification
never fails and never yields an empty error: a mapping without an exception
under ``"error"`` becomes an ``UnknownFaultError``.
"""

import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NoReturn

from webguard.core.constants import UNKNOWN_FAULT_PREFIX


def safe_str(value: object) -> str:
    """Format a value with str(), falling back when its __str__ raises.

    Args:
        value: Any value, usually an exception or a fault payload.

    Returns:
        str: The formatted value, or a placeholder naming its type.
    """
    try:
        return str(value)
    except Exception:  # noqa: BLE001
        return f"<unprintable {type(value).__name__}>"


class Fault(Exception):
    """Base class for faults raised with a non-exception value.

    Args:
        value: The value the handler faulted with.
    """

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(value)

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.value!r})"


class MappingFault(Fault):
    """Fault carrying a mapping of fields, usually with an ``"error"`` entry."""

    value: Mapping[str, Any]

    @property
    def error(self) -> Exception | None:
        """Return the exception stored under ``"error"``, if any."""
        error = self.value.get("error")
        return error if isinstance(error, Exception) else None


class ValueFault(Fault):
    """Fault carrying an arbitrary value, such as a string or a number."""


class UnknownFaultError(Exception):
    """Raised in place of an error that could not be extracted from a fault.

    Args:
        fault: The fault no error could be extracted from.
    """

    def __init__(self, fault: Fault) -> None:
        self.fault = fault
        super().__init__(f"{UNKNOWN_FAULT_PREFIX}: {safe_str(fault.value)}")


@dataclass(frozen=True)
class FaultRecord:
    """A recovered fault, classified and ready to be logged.

    Attributes:
        error: The classified error; never None.
        fault: The exception that was actually caught.
        stack_trace: Formatted traceback of the caught exception.
    """

    error: Exception
    fault: Exception
    stack_trace: str = field(repr=False)

    @property
    def message(self) -> str:
        """Human-readable error message, even for unprintable errors."""
        return safe_str(self.error)

    @property
    def error_type(self) -> str:
        """Class name of the classified error."""
        return type(self.error).__name__


def raise_fault(value: object) -> NoReturn:
    """Raise ``value`` as a fault in the shape matching its type.

    Args:
        value: An exception, a mapping or any other value.

    Raises:
        Exception: ``value`` itself when it is an exception.
        MappingFault: When ``value`` is a mapping.
        ValueFault: For any other value.
    """
    if isinstance(value, Exception):
        raise value
    if isinstance(value, Mapping):
        raise MappingFault(value)
    raise ValueFault(value)


def _extract_error(exc: Exception) -> Exception:
    if isinstance(exc, MappingFault):
        return exc.error or UnknownFaultError(exc)
    # A ValueFault formats its value, so it is its own error
    return exc


def classify_fault(exc: Exception) -> FaultRecord:
    """Classify a caught exception into a FaultRecord.

    Args:
        exc: The exception caught by the fault handler.

    Returns:
        FaultRecord: Record holding the classified error and stack trace.
    """
    stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return FaultRecord(error=_extract_error(exc), fault=exc, stack_trace=stack_trace)
