import logging

import pytest

from propmodel.delta_blue import DeltaBlue
from propmodel.graph import (
    Constraint,
    ConstraintGraph,
    ConstraintState,
    CycleError,
    Method,
    Variable,
    VariableKind,
)
from propmodel.priority import Priority


class _Model:
    """A list of values backed by a constraint graph."""

    def __init__(self, values):
        self.values = list(values)
        self.graph = ConstraintGraph()
        for i in range(len(self.values)):
            self.graph.add_variable(Variable(VariableKind.DATA, i, i))

    def var(self, index):
        return self.graph.variable(index)

    def method(self, func, out, *ins):
        def action():
            self.values[out] = func(*(self.values[i] for i in ins))

        return Method(action, self.var(out), tuple(self.var(i) for i in ins))

    def constrain(self, strength, *methods):
        constraint = Constraint(Priority.regular(strength), list(methods))
        self.graph.add_constraint(constraint)
        return constraint

    def finish(self):
        for strength, index in enumerate(range(len(self.values))):
            stay = Constraint(
                Priority.stay(strength), [Method(lambda: None, self.var(index))]
            )
            self.graph.add_constraint(stay)
            self.graph.attach_last_as_stay(index)
        self.graph.collect_potential_outputs()

    def solve(self, solver):
        solver.create_initial_solution()
        self.graph.execute_plan()
        return solver


def _identity(x):
    return x


def _equality_model(a, b):
    model = _Model([a, b])
    model.constrain(1, model.method(_identity, 0, 1), model.method(_identity, 1, 0))
    model.finish()
    return model


def _chain_model(length):
    model = _Model([0] * length)
    model.constrain(2, model.method(lambda: 1, 0))
    for i in range(length - 1):
        model.constrain(
            1, model.method(_identity, i, i + 1), model.method(_identity, i + 1, i)
        )
    model.constrain(3, model.method(lambda: 2, length - 1))
    model.finish()
    return model


def test_initial_solution_writes_weaker_variable():
    model = _equality_model(1, 5)
    model.solve(DeltaBlue(model.graph))
    assert model.values == [5, 5]
    assert model.graph.constraint(0).is_applied()
    assert model.var(0).determined_by is model.graph.constraint(0)


def test_strengthening_stay_reverses_equality():
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    model.values[0] = 9
    solver.update_stay_priority(model.var(0).stay, Priority.stay(2))
    model.graph.execute_plan()
    assert model.values == [9, 9]
    assert model.var(1).determined_by is model.graph.constraint(0)
    assert model.var(0).determined_by is model.var(0).stay


def test_update_stay_priority_rejects_regular_priority():
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    with pytest.raises(ValueError):
        solver.update_stay_priority(model.var(0).stay, Priority.regular(1))


def test_update_stay_priority_rejects_regular_constraint():
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    with pytest.raises(ValueError):
        solver.update_stay_priority(model.graph.constraint(0), Priority.stay(3))


def test_remove_then_add_constraint():
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    solver.remove_constraint_at(0)
    assert model.graph.constraint(0).is_disabled()
    assert model.var(0).determined_by is model.var(0).stay

    model.values[0] = 3
    model.graph.execute_plan()
    assert model.values == [3, 5]

    solver.add_constraint_at(0)
    model.graph.execute_plan()
    assert model.graph.constraint(0).is_applied()
    assert model.values == [5, 5]


def test_removing_stay_is_rejected():
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    with pytest.raises(ValueError):
        solver.remove_constraint(model.var(1).stay)


def test_adding_applied_constraint_changes_nothing(caplog):
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    constraint = model.graph.constraint(0)
    method = constraint.selected_method
    with caplog.at_level(logging.WARNING):
        solver.add_constraint(constraint)
    assert constraint.state is ConstraintState.APPLIED
    assert constraint.selected_method is method
    assert "already added" in caplog.text


def test_chain_follows_strongest_end_constraint():
    model = _chain_model(6)
    solver = model.solve(DeltaBlue(model.graph))
    assert model.values == [1] * 6

    solver.remove_constraint_at(0)
    model.graph.execute_plan()
    assert model.values == [2] * 6
    assert model.graph.constraint(6).is_applied()

    solver.add_constraint_at(0)
    model.graph.execute_plan()
    assert model.values == [1] * 6
    assert model.graph.constraint(6).is_unused()


def test_chain_repeated_toggling_is_stable():
    model = _chain_model(5)
    solver = model.solve(DeltaBlue(model.graph))
    for _ in range(20):
        solver.remove_constraint_at(0)
        model.graph.execute_plan()
        assert model.values == [2] * 5
        solver.add_constraint_at(0)
        model.graph.execute_plan()
        assert model.values == [1] * 5


def test_removing_unused_constraint_disables_it():
    model = _chain_model(4)
    solver = model.solve(DeltaBlue(model.graph))
    end = model.graph.constraint(4)
    assert end.is_unused()
    solver.remove_constraint(end)
    assert end.is_disabled()
    assert end.selected_method is None


def test_conflicting_required_constraint_stays_unused(caplog):
    model = _Model([0])
    model.constrain(0, model.method(lambda: 1, 0))
    second = model.constrain(0, model.method(lambda: 2, 0))
    model.finish()
    with caplog.at_level(logging.WARNING):
        model.solve(DeltaBlue(model.graph))
    assert second.is_unused()
    assert model.values == [1]
    assert "required" in caplog.text


def test_required_cycle_is_detected_on_execution():
    model = _Model([0, 0])
    model.constrain(0, model.method(_identity, 0, 1))
    model.constrain(0, model.method(_identity, 1, 0))
    model.finish()
    with pytest.raises(CycleError):
        model.solve(DeltaBlue(model.graph))


def test_step_counter_advances_on_propagation():
    model = _equality_model(1, 5)
    solver = model.solve(DeltaBlue(model.graph))
    before = model.graph.step
    solver.remove_constraint_at(0)
    assert model.graph.step > before