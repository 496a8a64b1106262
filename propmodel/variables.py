"""References to model variables and their placement in the graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .graph import VariableKind


@dataclass(frozen=True)
class VarRef:
    """Names one variable of a model by its group and position in it."""

    kind: VariableKind
    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"variable index must be non-negative, got {self.index}")

    def __str__(self) -> str:
        return f"{self.kind}<{self.index}>"


def data(index: int) -> VarRef:
    """Reference to the data variable at `index`."""
    return VarRef(VariableKind.DATA, index)


def value(index: int) -> VarRef:
    """Reference to the value variable at `index`."""
    return VarRef(VariableKind.VALUE, index)


def out(index: int) -> VarRef:
    """Reference to the output variable at `index`."""
    return VarRef(VariableKind.OUT, index)


@dataclass(frozen=True)
class Layout:
    """Sizes of the three variable groups; data first, then value, then out."""

    data_size: int = 0
    value_size: int = 0
    out_size: int = 0

    def __post_init__(self) -> None:
        for size in (self.data_size, self.value_size, self.out_size):
            if size < 0:
                raise ValueError(f"group size must be non-negative, got {size}")

    @property
    def size(self) -> int:
        return self.data_size + self.value_size + self.out_size

    def _group_size(self, kind: VariableKind) -> int:
        return {
            VariableKind.DATA: self.data_size,
            VariableKind.VALUE: self.value_size,
            VariableKind.OUT: self.out_size,
        }[kind]

    def check(self, ref: VarRef) -> VarRef:
        """Return `ref` if it names a variable of this layout, else raise."""
        if ref.index >= self._group_size(ref.kind):
            raise IndexError(f"{ref} is out of range")
        return ref

    def global_index(self, ref: VarRef) -> int:
        """Position of the variable across all groups."""
        self.check(ref)
        offset = {
            VariableKind.DATA: 0,
            VariableKind.VALUE: self.data_size,
            VariableKind.OUT: self.data_size + self.value_size,
        }[ref.kind]
        return offset + ref.index

    def refs(self) -> Iterator[VarRef]:
        """Every variable of the layout, in global order."""
        for kind, size in (
            (VariableKind.DATA, self.data_size),
            (VariableKind.VALUE, self.value_size),
            (VariableKind.OUT, self.out_size),
        ):
            for index in range(size):
                yield VarRef(kind, index)