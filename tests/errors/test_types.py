import pytest

from hmmpath.errors.types import (
    FailureRecord,
    FormatError,
    HmmError,
    ModelDomainError,
    NotImplementedFeatureError,
    ObservationLookupError,
    ObservationOrderError,
    StepStatus,
    UnknownStateError,
    UnknownSymbolError,
    failure_kind,
)


def test_stepstatus_values_are_stable() -> None:
    assert StepStatus.OK.value == "ok"
    assert StepStatus.FAILED.value == "failed"
    assert StepStatus.SKIPPED.value == "skipped"


@pytest.mark.parametrize(
    "exc_type, builtin",
    [
        (ModelDomainError, ValueError),
        (ObservationLookupError, LookupError),
        (UnknownStateError, LookupError),
        (UnknownSymbolError, LookupError),
        (ObservationOrderError, ValueError),
        (FormatError, ValueError),
        (NotImplementedFeatureError, NotImplementedError),
    ],
)
def test_error_taxonomy_maps_to_builtins(exc_type, builtin) -> None:
    assert issubclass(exc_type, HmmError)
    assert issubclass(exc_type, builtin)


def test_domain_and_lookup_errors_are_distinguishable() -> None:
    assert not issubclass(ModelDomainError, LookupError)
    assert not issubclass(UnknownStateError, ValueError)


def test_failure_record_from_exception_captures_fields() -> None:
    try:
        raise UnknownStateError("Unknown state 'Z'")
    except UnknownStateError as exc:
        rec = FailureRecord.from_exception(
            step_name="load_observations",
            exc=exc,
            context={"observations": "obs.txt"},
        )

    assert rec.step_name == "load_observations"
    assert rec.status == StepStatus.FAILED
    assert rec.message == "Unknown state 'Z'"
    assert rec.exc_type == "UnknownStateError"
    assert rec.context == {"observations": "obs.txt"}
    assert rec.traceback is not None
    assert "UnknownStateError" in rec.traceback
    assert rec.kind == "observations"
    assert rec.bad_input is True


@pytest.mark.parametrize(
    "exc, kind",
    [
        (ModelDomainError("Transition from the ending state is forbidden."), "model"),
        (UnknownSymbolError("symbol 'q'"), "observations"),
        (ObservationOrderError("step 3 after 5"), "observations"),
        (FormatError("obs.txt:2: expected a step number"), "format"),
        (NotImplementedFeatureError("forward-backward"), "internal"),
        (RuntimeError("boom"), "internal"),
    ],
)
def test_failure_kind_names_the_blamed_input(exc, kind) -> None:
    assert failure_kind(exc) == kind


def test_skipped_record_names_its_dependency() -> None:
    rec = FailureRecord.skipped(step_name="decode", caused_by="load_model", context=None)

    assert rec.status == StepStatus.SKIPPED
    assert rec.caused_by == "load_model"
    assert rec.kind is None
    assert rec.bad_input is False
    assert "dependency 'load_model'" in rec.message
