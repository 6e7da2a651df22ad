from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional
import traceback as _traceback


class HmmError(Exception):
    """Base class for model, observation and format errors."""


class ModelDomainError(HmmError, ValueError):
    """
    Raised when a model description violates a structural rule.

    Examples are a transition leaving the END state, a transition entering the START state,
    or an emission attached to START or END.
    """


class ObservationLookupError(HmmError, LookupError):
    """Raised when an observation references something the model does not define."""


class UnknownStateError(ObservationLookupError):
    """State name is absent from the model's registry."""


class UnknownSymbolError(ObservationLookupError):
    """Symbol is not part of the model's emission alphabet."""


class ObservationOrderError(HmmError, ValueError):
    """Observation step numbers are not strictly increasing."""


class FormatError(HmmError, ValueError):
    """Raised when model or observation text cannot be tokenized into the expected layout."""


class NotImplementedFeatureError(HmmError, NotImplementedError):
    """Raised by declared entry points that have no implementation yet."""


class StepStatus(str, Enum):
    """Status of a named step in a run."""
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


def failure_kind(exc: BaseException) -> str:
    """
    Name the input a failure blames: ``"model"``, ``"observations"``, ``"format"``, or
    ``"internal"`` when the exception is not an :class:`HmmError`.
    """
    if isinstance(exc, FormatError):
        return "format"
    if isinstance(exc, ModelDomainError):
        return "model"
    if isinstance(exc, (ObservationLookupError, ObservationOrderError)):
        return "observations"
    return "internal"


@dataclass(frozen=True)
class FailureRecord:
    """
    A failed or skipped step.

    ``kind`` is the :func:`failure_kind` of the exception for failures and ``None`` for
    skips; ``caused_by`` names the dependency that made a skipped step pointless.
    """
    step_name: str
    status: StepStatus
    message: str
    kind: Optional[str] = None
    exc_type: Optional[str] = None
    traceback: Optional[str] = None
    context: Optional[Mapping[str, Any]] = None
    caused_by: Optional[str] = None

    @property
    def bad_input(self) -> bool:
        return self.kind is not None and self.kind != "internal"

    @staticmethod
    def from_exception(*, step_name: str, exc: BaseException, context: Optional[Mapping[str, Any]]) -> "FailureRecord":
        return FailureRecord(
            step_name=step_name,
            status=StepStatus.FAILED,
            message=str(exc),
            kind=failure_kind(exc),
            exc_type=type(exc).__name__,
            traceback="".join(_traceback.format_exception(type(exc), exc, exc.__traceback__)),
            context=context,
        )

    @staticmethod
    def skipped(*, step_name: str, caused_by: str, context: Optional[Mapping[str, Any]]) -> "FailureRecord":
        return FailureRecord(
            step_name=step_name,
            status=StepStatus.SKIPPED,
            message=f"Skipped because dependency '{caused_by}' failed or was skipped.",
            context=context,
            caused_by=caused_by,
        )
