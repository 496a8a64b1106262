"""Interactive dialog-resizing model driven from standard input."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, Iterator, TextIO

from .model import Builder, PropertyModel
from .variables import data, value

PROMPT = (
    "_" * 61
    + "\nEnter command (quit / update - update value / add - add constraint"
    " / remove - remove constraint / print - print system state): "
)

_MARKERS = {"D": (data, 2), "V": (value, 4)}


def _abs_from_rel(rel: float, init: float) -> float:
    return rel * init / 100


def _rel_from_abs(absolute: float, init: float) -> float:
    return absolute * 100 / init


def _same(rel: float) -> float:
    return rel


def _create_output(height: float, width: float) -> str:
    return f"{height:f} {width:f}"


def build_dialog_model() -> PropertyModel:
    """Model of a dialog resized by absolute or relative height and width."""
    builder = Builder(
        data=(1500.0, 2100.0), values=(1500.0, 2100.0, 100.0, 100.0), outs=("",)
    )
    builder.add_new_constraint(1)
    builder.add_method(_abs_from_rel, value(0), value(2), data(0))
    builder.add_method(_rel_from_abs, value(2), value(0), data(0))
    builder.add_new_constraint(2)
    builder.add_method(_abs_from_rel, value(1), value(3), data(1))
    builder.add_method(_rel_from_abs, value(3), value(1), data(1))
    builder.add_new_constraint(3)
    builder.add_method(_same, value(2), value(3))
    builder.add_method(_same, value(3), value(2))
    builder.add_new_constraint(0)
    builder.add_method(_create_output, out_ref(), value(0), value(1))
    return builder.extract()


def out_ref():
    """Reference to the dialog's text output."""
    from .variables import out

    return out(0)


def _tokens(stream: Iterable[str]) -> Iterator[str]:
    for line in stream:
        yield from line.split()


def _update(model: PropertyModel, tokens: Iterator[str], stream: TextIO) -> None:
    stream.write("Enter meta marker and index (D/V index): ")
    token = next(tokens)
    marker, rest = token[0], token[1:]
    if marker not in _MARKERS:
        print("Invalid MetaData marker!", file=stream)
        return
    make_ref, size = _MARKERS[marker]
    index = int(rest or next(tokens))
    stream.write("Enter the value: ")
    if not 0 <= index < size:
        print("Index out of range!", file=stream)
        return
    model.set(make_ref(index), float(next(tokens)))


def _run(model: PropertyModel, tokens: Iterator[str], stream: TextIO) -> int:
    stream.write(model.describe())
    stream.write(PROMPT)
    for query in tokens:
        try:
            if query == "quit":
                print("The End.", file=stream)
                return 0
            if query == "update":
                _update(model, tokens, stream)
            elif query in ("add", "remove"):
                stream.write("Enter the constraint index: ")
                index = int(next(tokens))
                if query == "add":
                    model.add_constraint(index)
                else:
                    model.remove_constraint(index)
            elif query == "print":
                stream.write(model.describe())
            else:
                print("Invalid command!", file=stream)
        except StopIteration:
            break
        except (ValueError, IndexError) as error:
            print(error, file=stream)
        stream.write(PROMPT)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the interactive session; returns the exit status."""
    parser = argparse.ArgumentParser(
        prog="propmodel",
        description="Edit a dialog-resizing property model interactively.",
    )
    parser.parse_args(argv)
    try:
        model = build_dialog_model()
        return _run(model, _tokens(sys.stdin), sys.stdout)
    except Exception as error:
        print(error if str(error) else "Unknown error!")
        return 1