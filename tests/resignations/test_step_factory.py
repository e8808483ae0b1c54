import pytest

from src.hr_exit.hr_exit.core.enums import ExitStep
from src.hr_exit.hr_exit.resignations.factory import ExitStepFactory
from src.hr_exit.hr_exit.resignations.steps.clearance_step import ClearanceStep
from src.hr_exit.hr_exit.resignations.steps.completion_steps import ExitClosureStep
from src.hr_exit.hr_exit.resignations.steps.fnf_step import FnfStep


def test_factory_has_a_handler_for_every_step():
    factory = ExitStepFactory()

    for step in ExitStep:
        assert factory.for_step(step).step == step


def test_factory_returns_expected_handlers():
    factory = ExitStepFactory()

    assert isinstance(factory.for_step(ExitStep.CLEARANCES), ClearanceStep)
    assert isinstance(factory.for_step(ExitStep.FNF), FnfStep)
    assert isinstance(factory.for_step(ExitStep.EXIT_CLOSURE), ExitClosureStep)


def test_factory_refuses_incomplete_handler_map():
    with pytest.raises(ValueError, match="fnf"):
        ExitStepFactory(handlers={ExitStep.CLEARANCES: ClearanceStep()})


def test_step_fields_do_not_overlap():
    factory = ExitStepFactory()
    seen = set()

    for step in ExitStep:
        owned = factory.for_step(step).owned_fields
        assert not (owned & seen)
        seen |= owned


@pytest.mark.parametrize(
    "name,step",
    [
        ("noticePeriod", ExitStep.NOTICE_PERIOD),
        ("noticePeriodComplied", ExitStep.NOTICE_PERIOD),
        ("clearance", ExitStep.CLEARANCES),
        ("fnfStatus", ExitStep.FNF),
        (" exitClosure ", ExitStep.EXIT_CLOSURE),
    ],
)
def test_step_names_are_parsed(name, step):
    assert ExitStep.parse(name) == step


def test_unknown_step_name_raises():
    with pytest.raises(ValueError):
        ExitStep.parse("salary")
