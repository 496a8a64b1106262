"""Variables, methods, constraints and the constraint graph that runs them."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Iterable

from .priority import MAX_REGULAR_PRIORITY, MIN_STAY_PRIORITY, Priority, Status


class CycleError(RuntimeError):
    """Raised when the selected methods form a cycle."""

    def __init__(self, message: str = "Cycle is detected in constraint system") -> None:
        super().__init__(message)


class VariableKind(enum.Enum):
    """Group a variable belongs to."""

    DATA = "Data"
    VALUE = "Value"
    OUT = "Out"

    def __str__(self) -> str:
        return self.value


class ConstraintState(enum.Enum):
    """Whether a constraint takes part in the current solution."""

    APPLIED = "Applied"
    UNUSED = "Unused"
    DISABLED = "Disabled"

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class Variable:
    """A node of the constraint graph holding one model value."""

    kind: VariableKind
    index: int
    global_index: int
    priority: Priority = MIN_STAY_PRIORITY
    last_propagation: int = 0
    determined_by: Constraint | None = None
    stay: Constraint | None = None
    involved_as_potential_output: list[Constraint] = field(default_factory=list)

    def update_priority(self) -> None:
        """Recompute the walkabout priority from the determining constraint."""
        constraint = self.determined_by
        if constraint is None:
            raise ValueError(f"{self} is not determined by any constraint")
        self.priority = min(
            constraint.priority, constraint.potential_outputs_min_priority(self)
        )

    def is_updated_in_step(self, step: int) -> bool:
        return self.last_propagation == step + 1

    def is_processing(self, step: int) -> bool:
        return self.last_propagation == step

    def __str__(self) -> str:
        return f"{self.kind}<{self.index}>"


@dataclass(eq=False)
class Method:
    """One way of satisfying a constraint: computes `output` from `inputs`."""

    action: Callable[[], None]
    output: Variable
    inputs: tuple[Variable, ...] = ()

    def __post_init__(self) -> None:
        self.inputs = tuple(self.inputs)

    def execute(self) -> None:
        self.action()

    def output_priority(self) -> Priority:
        return self.output.priority

    def __str__(self) -> str:
        return f"has out {self.output}"


@dataclass(eq=False)
class Constraint:
    """A relation between variables with several methods to enforce it."""

    priority: Priority
    methods: list[Method] = field(default_factory=list)
    state: ConstraintState = ConstraintState.DISABLED
    selected_method: Method | None = None
    last_execution: int = 0

    def add_method(self, method: Method) -> None:
        self.methods.append(method)

    def is_stay(self) -> bool:
        return self.priority.status is Status.STAY

    def is_required(self) -> bool:
        return self.priority.is_required()

    def is_blocked(self) -> bool:
        """Unused, yet stronger than the weakest of its possible outputs."""
        return (
            self.state is ConstraintState.UNUSED
            and self.output_min_priority_variable().priority < self.priority
        )

    def is_reversible_path_source(self) -> bool:
        return self.priority == self.selected_output().priority

    def is_applied(self) -> bool:
        return self.state is ConstraintState.APPLIED

    def is_disabled(self) -> bool:
        return self.state is ConstraintState.DISABLED

    def is_unused(self) -> bool:
        return self.state is ConstraintState.UNUSED

    def is_executed_in_step(self, step: int) -> bool:
        return self.last_execution == step + 1

    def is_processing(self, step: int) -> bool:
        return self.last_execution == step

    def selected_output(self) -> Variable:
        if self.selected_method is None:
            raise ValueError("constraint has no selected method")
        return self.selected_method.output

    def select_method(self, method: Method | None) -> None:
        self.selected_method = method

    def execute(self) -> None:
        if self.selected_method is None:
            raise ValueError("constraint has no selected method")
        self.selected_method.execute()

    def potential_outputs_min_method(self, variable: Variable) -> Method | None:
        """The method with the weakest output other than `variable`, if any."""
        min_priority = MAX_REGULAR_PRIORITY
        found: Method | None = None
        for method in self.methods:
            if method.output is not variable and min_priority > method.output_priority():
                min_priority = method.output_priority()
                found = method
        return found

    def potential_outputs_min_priority(self, variable: Variable) -> Priority:
        method = self.potential_outputs_min_method(variable)
        return MAX_REGULAR_PRIORITY if method is None else method.output_priority()

    def output_min_priority_method(self) -> Method:
        """The method with the weakest output; the last one wins ties."""
        if not self.methods:
            raise ValueError("constraint has no methods")
        min_priority = MAX_REGULAR_PRIORITY
        found = self.methods[0]
        for method in self.methods:
            if min_priority >= method.output_priority():
                min_priority = method.output_priority()
                found = method
        return found

    def output_min_priority_variable(self) -> Variable:
        return self.output_min_priority_method().output

    def __str__(self) -> str:
        text = f"{self.priority}. {self.state}."
        if self.selected_method is not None:
            text += f" Selected method {self.selected_method}"
        return text


class ConstraintGraph:
    """Owns the variables and constraints and the shared propagation step."""

    def __init__(self) -> None:
        self.constraints: list[Constraint] = []
        self.variables: list[Variable] = []
        self.step = 0

    def add_constraint(self, constraint: Constraint) -> None:
        self.constraints.append(constraint)

    def add_variable(self, variable: Variable) -> None:
        self.variables.append(variable)

    def constraint(self, index: int) -> Constraint:
        if not 0 <= index < len(self.constraints):
            raise IndexError(f"no constraint with index {index}")
        return self.constraints[index]

    def variable(self, index: int) -> Variable:
        if not 0 <= index < len(self.variables):
            raise IndexError(f"no variable with index {index}")
        return self.variables[index]

    def find_highest_priority_blocked_constraint(self) -> Constraint | None:
        candidate: Constraint | None = None
        for constraint in self.constraints:
            if constraint.is_blocked() and (
                candidate is None or candidate.priority < constraint.priority
            ):
                candidate = constraint
        return candidate

    def insert_stay_to_solution(self, constraint: Constraint) -> None:
        """Apply a stay constraint directly as the determiner of its variable."""
        constraint.select_method(constraint.methods[0])
        constraint.state = ConstraintState.APPLIED
        output = constraint.selected_output()
        output.determined_by = constraint
        output.update_priority()

    def attach_last_as_stay(self, index: int) -> None:
        if not self.constraints:
            raise IndexError("graph has no constraints")
        self.variable(index).stay = self.constraints[-1]

    def collect_potential_outputs(self) -> None:
        for constraint in self.constraints:
            for method in constraint.methods:
                method.output.involved_as_potential_output.append(constraint)

    def execute_plan(self) -> None:
        """Run every applied constraint once, in dependency order."""
        self.step += 1
        step = self.step
        applied = [c for c in self.constraints if c.is_applied()]

        consumers: list[list[Constraint]] = [[] for _ in self.variables]
        for constraint in applied:
            for variable in constraint.selected_method.inputs:
                consumers[variable.global_index].append(constraint)

        plan: list[Constraint] = []
        for constraint in applied:
            if not constraint.is_executed_in_step(step):
                self._form_plan(consumers, plan, constraint, step)

        for constraint in reversed(plan):
            constraint.execute()
        self.step += 1

    def _form_plan(
        self,
        consumers: list[list[Constraint]],
        plan: list[Constraint],
        constraint: Constraint,
        step: int,
    ) -> None:
        constraint.last_execution = step
        output = constraint.selected_output()
        for following in consumers[output.global_index]:
            if following.is_processing(step):
                raise CycleError()
            if not following.is_executed_in_step(step):
                self._form_plan(consumers, plan, following, step)
        constraint.last_execution = step + 1
        plan.append(constraint)


def iter_applied(constraints: Iterable[Constraint]) -> Iterable[Constraint]:
    """Yield the applied constraints among `constraints`."""
    return (c for c in constraints if c.is_applied())