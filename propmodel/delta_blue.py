"""Incremental constraint solving on a constraint graph."""

from __future__ import annotations

import logging

from .graph import (
    Constraint,
    ConstraintGraph,
    ConstraintState,
    CycleError,
    Variable,
)
from .priority import Priority, Status

logger = logging.getLogger(__name__)


class DeltaBlue:
    """Keeps the solution of a constraint graph up to date as it changes.

    The graph's ``step`` attribute serves as the shared propagation counter.
    """

    def __init__(self, graph: ConstraintGraph) -> None:
        self.graph = graph

    def create_initial_solution(self) -> None:
        """Apply every stay constraint, then add all the others in order.

        Stays go first so that adding regular constraints always starts from
        a consistent solution.
        """
        for constraint in self.graph.constraints:
            if constraint.is_stay():
                self.graph.insert_stay_to_solution(constraint)
        for constraint in self.graph.constraints:
            if not constraint.is_stay():
                self.add_constraint(constraint)

    def add_constraint(self, constraint: Constraint) -> None:
        """Try to bring a disabled constraint into the solution."""
        if not constraint.is_disabled():
            logger.warning("Constraint already added")
            return

        constraint.state = ConstraintState.UNUSED
        if not constraint.is_blocked():
            if constraint.is_required():
                logger.warning("Failed to fulfil the required constraint")
            return

        method = constraint.output_min_priority_method()
        output = method.output

        self._reverse_path(output)

        output.determined_by = constraint
        constraint.select_method(method)
        constraint.state = ConstraintState.APPLIED

        self._propagate(output)

    def add_constraint_at(self, index: int) -> None:
        """Add the constraint stored at `index` in the graph."""
        self.add_constraint(self.graph.constraint(index))

    def remove_constraint(self, constraint: Constraint) -> None:
        """Take a regular constraint out of the solution."""
        if constraint.is_stay():
            raise ValueError("stay constraints cannot be removed")

        if constraint.is_disabled() or constraint.is_unused():
            constraint.select_method(None)
            constraint.state = ConstraintState.DISABLED
            return

        output = constraint.selected_output()
        output.determined_by = None
        constraint.select_method(None)
        constraint.state = ConstraintState.DISABLED

        stay = output.stay
        if stay is None:
            raise ValueError(f"{output} has no stay constraint")
        output.determined_by = stay
        stay.select_method(stay.methods[0])
        stay.state = ConstraintState.APPLIED

        self._propagate(output)

        candidate = self.graph.find_highest_priority_blocked_constraint()
        if candidate is not None:
            candidate.state = ConstraintState.DISABLED
            self.add_constraint(candidate)

    def remove_constraint_at(self, index: int) -> None:
        """Remove the constraint stored at `index` in the graph."""
        self.remove_constraint(self.graph.constraint(index))

    def update_stay_priority(self, stay: Constraint, priority: Priority) -> None:
        """Give a stay constraint a new priority and re-add it."""
        if not stay.is_stay():
            raise ValueError("only stay constraints can be reprioritised")
        if priority.status is not Status.STAY:
            raise ValueError(f"expected a stay priority, got {priority}")

        stay.priority = priority
        if stay.is_applied():
            stay.selected_output().determined_by = None
        stay.select_method(None)
        stay.state = ConstraintState.DISABLED
        self.add_constraint(stay)

    def _propagate(self, variable: Variable) -> None:
        self.graph.step += 1
        self._propagate_from(variable, self.graph.step)
        self.graph.step += 1

    def _propagate_from(self, variable: Variable, step: int) -> None:
        variable.update_priority()
        variable.last_propagation = step

        for constraint in variable.involved_as_potential_output:
            if not constraint.is_applied():
                continue
            following = constraint.selected_output()
            if following is variable:
                continue
            if following.is_processing(step):
                raise CycleError()
            if not following.is_updated_in_step(step):
                self._propagate_from(following, step)
                variable.last_propagation = step + 1

        variable.last_propagation = step + 1

    def _reverse_path(self, variable: Variable) -> None:
        constraint = variable.determined_by
        if constraint is None:
            return

        if constraint.is_reversible_path_source():
            variable.determined_by = None
            constraint.select_method(None)
            constraint.state = ConstraintState.UNUSED
            return

        method = constraint.potential_outputs_min_method(variable)
        if method is None:
            raise ValueError(f"no alternative output for {constraint}")
        self._reverse_path(method.output)
        method.output.determined_by = constraint
        constraint.select_method(method)