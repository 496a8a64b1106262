# propmodel

`propmodel` keeps a set of related values consistent with each other.
You describe the values and the *constraints* that link them; every
constraint offers one or more *methods*, each of which computes one value
from some of the others. When a value changes, the DeltaBlue incremental
solver (`propmodel.delta_blue.DeltaBlue`) chooses which method of each
constraint to run, so that the strongest constraints hold and the values
you set most recently are kept.

It has no dependencies outside the standard library.

## Concepts

- **Variables** come in three groups and are addressed by group and index
  with `data(i)`, `value(i)` and `out(i)` from `propmodel.variables`.
  An index outside its group raises `IndexError`.
- **Constraints** have a strength. Strength `0` is *required*; larger
  numbers are weaker. A constraint with several methods is multi-way: the
  solver may run any one of them.
- **Stay constraints** are added automatically, one for every variable.
  They hold a variable at its current value. Each `PropertyModel.set` gives
  the edited variable a stronger stay than any before it, so recent edits
  win over older values.
- **Priorities** (`propmodel.priority.Priority`) order all of this: every
  stay priority is weaker than every regular one.

## Building a model

Create a `propmodel.model.Builder` with the initial values of the data,
value and out variables, then add constraints and their methods. Each call
to `add_new_constraint(strength)` starts a new constraint; the
`add_method` calls that follow add methods to it. A method is given as the
function, the variable it writes, and the variables whose values are passed
to it, in that order:

```python
from propmodel.model import Builder
from propmodel.variables import data, value


def abs_from_rel(rel, init):
    return rel * init / 100


def rel_from_abs(absolute, init):
    return absolute * 100 / init


builder = Builder(data=(1500.0,), values=(1500.0, 100.0))
builder.add_new_constraint(1)
builder.add_method(abs_from_rel, value(0), value(1), data(0))
builder.add_method(rel_from_abs, value(1), value(0), data(0))

model = builder.extract()
```

`Builder.set(ref, value)` changes an initial value without solving, and
`Builder.describe()` returns a text report of what has been built so far.
`extract()` closes the last constraint, adds the stay constraints, computes
the initial solution, runs it and returns a `PropertyModel`. After that the
builder can no longer be changed: `add_method`, `set` and starting a new
constraint raise `RuntimeError`.

## Using a model

```python
model.set(value(1), 50.0)      # edit a value; dependent values are recomputed
model.get(value(0))            # read any variable
model.remove_constraint(0)     # take a constraint out of the solution
model.add_constraint(0)        # and bring it back
print(model.describe())        # variables, constraints and their states
```

Constraints are numbered in the order they were added; the stay
constraints created by `extract()` come after yours. Stay constraints
cannot be removed: `remove_constraint` raises `ValueError` for them.
Adding a constraint that is already in use, or failing to satisfy a
required one, does not raise; a warning is logged through the
`propmodel.delta_blue` logger instead. If the selected methods would form
a cycle, `propmodel.graph.CycleError` is raised.

## Command line

The package installs a `propmodel` command that opens an interactive
dialog-resizing model (`propmodel.cli.build_dialog_model`): the absolute
and relative height and width of a dialog, linked by constraints, with a
text summary of the absolute sizes as output.

```
propmodel
```

It reads commands from standard input:

- `update` followed by a marker and index (`D 0`, `D 1`, `V 0` … `V 3`)
  and a number sets that variable;
- `add <index>` / `remove <index>` add or remove a constraint;
- `print` shows the state of the system;
- `quit` ends the session.

## What it does not do

Models live only in memory: there is no way to save or load them. The
command line offers only the built-in dialog-resizing model; other models
are built in Python with `Builder`.

## Running the tests

```
pip install -e ".[test]"
pytest
```