"""Column mapping between result rows and scan destinations.

A dataclass field opts into mapping by naming its source column::

    @dataclass
    class Category:
        id: int = column("id", default=0)
        name: str = column("name", default="")

Untagged fields whose type is itself a dataclass are flattened one level, so a
joined projection can populate a nested object in the same pass.
"""
from __future__ import annotations

import dataclasses
import typing
from functools import lru_cache, partial
from typing import Any, Callable, NamedTuple, Optional, Sequence

from .errors import ColumnNotFoundError, DatabaseError

SQL_TAG = "sql"


def column(name: str, **kwargs) -> Any:
    """dataclasses.field() carrying the column tag for ``name``."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[SQL_TAG] = name
    return dataclasses.field(metadata=metadata, **kwargs)


class Var:
    """Box receiving one column positionally, for scans outside of a dataclass."""

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    def __repr__(self) -> str:
        return f"Var({self.value!r})"


class TaggedField(NamedTuple):
    parent: Optional[str]
    parent_type: Optional[type]
    name: str
    column: str


def _is_dataclass_type(tp) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _field_type(cls: type, f: dataclasses.Field):
    """Declared type of an untagged field, or None when it cannot be resolved."""
    if isinstance(f.type, type):
        return f.type
    try:
        hint = typing.get_type_hints(cls).get(f.name)
    except (NameError, TypeError):
        hint = None
    if isinstance(hint, type):
        return hint
    # annotation names a class local to a function; fall back to the default
    if f.default_factory is not dataclasses.MISSING and isinstance(f.default_factory, type):
        return f.default_factory
    if f.default is not dataclasses.MISSING and f.default is not None:
        return type(f.default)
    return None


@lru_cache(maxsize=None)
def _field_plan(cls: type) -> tuple[tuple[str, Optional[str], Optional[type]], ...]:
    """(field name, column tag, nested type) per field; tag and type are None when unknown."""
    plan = []
    for f in dataclasses.fields(cls):
        tag = f.metadata.get(SQL_TAG)
        if tag:
            plan.append((f.name, tag, None))
        else:
            plan.append((f.name, None, _field_type(cls, f)))
    return tuple(plan)


def _expand(plan, resolve) -> tuple[TaggedField, ...]:
    out: list[TaggedField] = []
    for name, tag, ftype in plan:
        if tag:
            out.append(TaggedField(None, None, name, tag))
            continue
        ftype = resolve(name, ftype)
        if not _is_dataclass_type(ftype):
            continue
        for inner in dataclasses.fields(ftype):
            inner_tag = inner.metadata.get(SQL_TAG)
            if inner_tag:
                out.append(TaggedField(name, ftype, inner.name, inner_tag))
    return tuple(out)


@lru_cache(maxsize=None)
def field_table(cls: type) -> tuple[TaggedField, ...]:
    """Tagged fields of ``cls`` in declaration order, nested dataclasses flattened."""
    return _expand(_field_plan(cls), lambda name, ftype: ftype)


def _instance_fields(obj) -> tuple[TaggedField, ...]:
    plan = _field_plan(type(obj))
    if all(tag or ftype is not None for _, tag, ftype in plan):
        return field_table(type(obj))

    def resolve(name, ftype):
        if ftype is not None:
            return ftype
        value = getattr(obj, name, None)
        return type(value) if dataclasses.is_dataclass(value) else None

    return _expand(plan, resolve)


def find(values: Sequence[str], value: str) -> int:
    for i, v in enumerate(values):
        if v == value:
            return i
    return -1


def _owner(obj, tf: TaggedField):
    if tf.parent is None:
        return obj
    nested = getattr(obj, tf.parent, None)
    if nested is None:
        nested = tf.parent_type()
        setattr(obj, tf.parent, nested)
    return nested


def map_columns(columns: Sequence[str], dest: Sequence[Any]) -> tuple[list[Optional[Callable]], list[Any]]:
    """
    Resolve scan destinations against a result's column list.

    Returns ``(slots, targets)``. ``slots`` is aligned with ``columns``: slot ``i`` is the
    setter receiving column ``i`` or None when nothing claims it. ``targets`` holds one
    resolved object per destination (dataclass types are instantiated here).
    The first destination field claiming a column keeps it. A scan made only of `Var`
    boxes must supply exactly one box per column.
    """
    if dest and all(isinstance(d, Var) for d in dest) and len(dest) != len(columns):
        raise DatabaseError(f"expected {len(columns)} destination arguments in scan, not {len(dest)}")
    slots: list[Optional[Callable]] = [None] * len(columns)
    targets: list[Any] = []
    pos = 0
    for d in dest:
        if _is_dataclass_type(d):
            d = d()
        if dataclasses.is_dataclass(d):
            for tf in _instance_fields(d):
                idx = find(columns, tf.column)
                if idx < 0:
                    raise ColumnNotFoundError(tf.column)
                if slots[idx] is None:
                    slots[idx] = partial(setattr, _owner(d, tf), tf.name)
        elif isinstance(d, Var):
            if pos >= len(columns):
                raise DatabaseError(
                    f"expected {len(columns)} destination arguments in scan, not {len(dest)}"
                )
            if slots[pos] is None:
                slots[pos] = partial(setattr, d, "value")
            pos += 1
        else:
            raise TypeError(f"unsupported scan destination {type(d).__name__}")
        targets.append(d)
    return slots, targets
