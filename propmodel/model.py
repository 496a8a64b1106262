"""Building property models and editing them after construction."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from .delta_blue import DeltaBlue
from .graph import Constraint, ConstraintGraph, Method, Variable, VariableKind
from .priority import MAX_REGULAR_PRIORITY, MIN_STAY_PRIORITY, Priority
from .variables import Layout, VarRef


class _Core:
    """Values, graph and solver shared by a builder and the model it yields."""

    def __init__(
        self, data: Sequence[Any], values: Sequence[Any], outs: Sequence[Any]
    ) -> None:
        self.layout = Layout(len(data), len(values), len(outs))
        self.storage: list[Any] = [*data, *values, *outs]
        self.graph = ConstraintGraph()
        for ref in self.layout.refs():
            self.graph.add_variable(
                Variable(ref.kind, ref.index, self.layout.global_index(ref))
            )
        self.solver = DeltaBlue(self.graph)
        self.stay_priority = MIN_STAY_PRIORITY

    def get(self, ref: VarRef) -> Any:
        return self.storage[self.layout.global_index(ref)]

    def put(self, ref: VarRef, value: Any) -> None:
        self.storage[self.layout.global_index(ref)] = value

    def bind(
        self, func: Callable[..., Any], output: VarRef, inputs: Iterable[VarRef]
    ) -> Method:
        out_index = self.layout.global_index(output)
        in_indices = tuple(self.layout.global_index(ref) for ref in inputs)
        storage = self.storage

        def action() -> None:
            storage[out_index] = func(*(storage[i] for i in in_indices))

        return Method(
            action,
            self.graph.variable(out_index),
            tuple(self.graph.variable(i) for i in in_indices),
        )

    def describe(self) -> str:
        layout = self.layout
        groups = (
            ("Data", self.storage[: layout.data_size]),
            (
                "Value",
                self.storage[layout.data_size : layout.data_size + layout.value_size],
            ),
            ("Out", self.storage[layout.data_size + layout.value_size :]),
        )
        lines = [
            f"Variable size: {len(self.graph.variables)}",
            f"Constraint count: {len(self.graph.constraints)}",
            "Variables: ",
        ]
        lines.extend(
            f"\t{name}: " + "".join(f"{item} " for item in items)
            for name, items in groups
        )
        lines.append("Constraints: ")
        lines.extend(
            f"\t{index} {constraint}"
            for index, constraint in enumerate(self.graph.constraints)
        )
        return "\n".join(lines) + "\n"


class PropertyModel:
    """A solved property model; every change re-solves and re-runs it."""

    def __init__(self, core: _Core) -> None:
        self._core = core

    def get(self, ref: VarRef) -> Any:
        """Current value of the variable `ref`."""
        return self._core.get(ref)

    def set(self, ref: VarRef, value: Any) -> None:
        """Assign `value` and make it the most recently edited variable."""
        core = self._core
        core.put(ref, value)
        stay = core.graph.variable(core.layout.global_index(ref)).stay
        if stay is None:
            raise ValueError(f"{ref} has no stay constraint")
        core.solver.update_stay_priority(stay, core.stay_priority)
        core.stay_priority = core.stay_priority.stronger()
        core.graph.execute_plan()

    def add_constraint(self, index: int) -> None:
        """Bring the constraint at `index` back into the solution."""
        self._core.solver.add_constraint_at(index)
        self._core.graph.execute_plan()

    def remove_constraint(self, index: int) -> None:
        """Take the constraint at `index` out of the solution."""
        self._core.solver.remove_constraint_at(index)
        self._core.graph.execute_plan()

    def describe(self) -> str:
        """Text report of the variables and constraints."""
        return self._core.describe()


class Builder:
    """Collects constraints and their methods, then produces a model."""

    def __init__(
        self,
        data: Sequence[Any] = (),
        values: Sequence[Any] = (),
        outs: Sequence[Any] = (),
    ) -> None:
        self._core = _Core(data, values, outs)
        self._pending = Constraint(MAX_REGULAR_PRIORITY)
        self._stay_priority = MIN_STAY_PRIORITY
        self._extracted = False

    def add_new_constraint(self, strength: int) -> None:
        """Start a regular constraint; 0 is the strongest (required)."""
        self._start(Priority.regular(strength))

    def add_method(self, func: Callable[..., Any], output: VarRef, *args: VarRef) -> None:
        """Add to the current constraint a method computing `output` from `args`."""
        self._ensure_open()
        self._pending.add_method(self._core.bind(func, output, args))

    def set(self, ref: VarRef, value: Any) -> None:
        """Set an initial value without solving."""
        self._ensure_open()
        self._core.put(ref, value)

    def extract(self) -> PropertyModel:
        """Finish building, solve the system and return the model."""
        self.add_new_constraint(0)
        layout = self._core.layout
        for kind in (VariableKind.OUT, VariableKind.VALUE, VariableKind.DATA):
            for ref in layout.refs():
                if ref.kind is kind:
                    self._add_stay(ref)
        core = self._core
        core.stay_priority = self._stay_priority
        core.graph.collect_potential_outputs()
        self._extracted = True
        core.solver.create_initial_solution()
        core.graph.execute_plan()
        return PropertyModel(core)

    def describe(self) -> str:
        """Text report of what has been built so far."""
        return self._core.describe()

    def _ensure_open(self) -> None:
        if self._extracted:
            raise RuntimeError("the model has already been extracted")

    def _start(self, priority: Priority) -> None:
        self._ensure_open()
        if self._pending.methods:
            self._core.graph.add_constraint(self._pending)
        self._pending = Constraint(priority)

    def _add_stay(self, ref: VarRef) -> None:
        index = self._core.layout.global_index(ref)
        storage = self._core.storage
        self._start(self._stay_priority)
        self.add_method(lambda: storage[index], ref)
        self.add_new_constraint(0)
        self._core.graph.attach_last_as_stay(index)
        self._stay_priority = self._stay_priority.stronger()