"""
Destination shapes.

A shape is the static classification of a destination type that selects
how tokens are decoded into it. Shapes are derived purely from declared
types, never from token content, and are cached per type.

Destination locations are plain objects with a ``value`` attribute:

- ``Ref`` is the location handed to the Decoder entry points. It records
  the declared type, since Python values do not carry one.
- ``Ptr`` is an indirection cell. A ``Ptr[T]`` slot holds ``None`` until a
  decode allocates a cell for it.

Width markers (``Int8`` ... ``Uint64``, ``Float32``, ``Float64``) are
``Annotated`` aliases of ``int`` and ``float``.
"""

from __future__ import annotations

import dataclasses
import enum
import typing
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Annotated, Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from pydantic import BaseModel

from strum.core.contracts import TextUnmarshaler
from strum.core.exceptions import InaccessibleMemberError, UnsupportedTypeError
from strum.parsers.timestamps import ZERO_TIME

T = TypeVar("T")

__all__ = [
    "Float32",
    "Float64",
    "FloatSpec",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IntSpec",
    "Member",
    "Ptr",
    "Ref",
    "Shape",
    "ShapeKind",
    "TextUnmarshaler",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "build_aggregate",
    "classify",
    "type_name",
    "validate_line_shape",
    "zero_value",
]


@dataclass(frozen=True)
class IntSpec:
    bits: int = 64
    signed: bool = True


@dataclass(frozen=True)
class FloatSpec:
    bits: int = 64


Int = Annotated[int, IntSpec(64)]
Int8 = Annotated[int, IntSpec(8)]
Int16 = Annotated[int, IntSpec(16)]
Int32 = Annotated[int, IntSpec(32)]
Int64 = Annotated[int, IntSpec(64)]
Uint = Annotated[int, IntSpec(64, signed=False)]
Uint8 = Annotated[int, IntSpec(8, signed=False)]
Uint16 = Annotated[int, IntSpec(16, signed=False)]
Uint32 = Annotated[int, IntSpec(32, signed=False)]
Uint64 = Annotated[int, IntSpec(64, signed=False)]
Float32 = Annotated[float, FloatSpec(32)]
Float64 = Annotated[float, FloatSpec(64)]


class Ptr(Generic[T]):
    """A re-seatable reference to another value, allocated lazily by the decoder."""

    def __init__(self, value: Optional[T] = None):
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ptr):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ptr({self.value!r})"


_MISSING = object()


class Ref(Generic[T]):
    """A caller-owned destination: a declared type and the value currently held.

    Example:
        >>> ref = Ref(list[int])
        >>> ref.value is None
        True
    """

    def __init__(self, type_: Any, value: Any = _MISSING):
        self.type = type_
        self.value = zero_value(type_) if value is _MISSING else value

    def __repr__(self) -> str:
        return f"Ref({type_name(self.type)}, {self.value!r})"


class ShapeKind(enum.Enum):
    # Declaration order is dispatch priority.
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    TEXT = "text"
    BOOL = "bool"
    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    AGGREGATE = "aggregate"
    SEQUENCE = "sequence"
    INDIRECT = "indirect"
    UNSUPPORTED = "unsupported"


# Shapes that take exactly one token.
TOKEN_KINDS = frozenset(
    {
        ShapeKind.DURATION,
        ShapeKind.TIMESTAMP,
        ShapeKind.TEXT,
        ShapeKind.BOOL,
        ShapeKind.STRING,
        ShapeKind.INT,
        ShapeKind.UINT,
        ShapeKind.FLOAT,
    }
)


@dataclass(frozen=True)
class Member:
    """One positional slot of an aggregate."""

    name: str
    type: Any
    accessible: bool = True
    # Accepted by the constructor; an inaccessible member may still be.
    init: bool = True
    default: Optional[Callable[[], Any]] = None

    def zero(self) -> Any:
        if self.default is not None:
            return self.default()
        return zero_value(self.type)


@dataclass(frozen=True, eq=False)
class Shape:
    kind: ShapeKind
    type: Any
    name: str
    # Runtime class for scalars and aggregates.
    base: Optional[type] = None
    bits: int = 0
    # Declared element type for SEQUENCE, pointee type for INDIRECT.
    element: Any = None
    members: Tuple[Member, ...] = ()

    @property
    def takes_token(self) -> bool:
        return self.kind in TOKEN_KINDS


_CACHE: Dict[Any, Shape] = {}


def classify(tp: Any) -> Shape:
    """Return the (cached) shape of a declared type."""
    try:
        return _CACHE[tp]
    except KeyError:
        shape = _classify(tp)
        _CACHE[tp] = shape
        return shape
    except TypeError:
        # Unhashable annotations are classified every time.
        return _classify(tp)


def _unwrap(tp: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if typing.get_origin(tp) is Annotated:
        base, *metadata = typing.get_args(tp)
        return base, tuple(metadata)
    return tp, ()


def _spec(metadata: Tuple[Any, ...], kind: type, default: Any) -> Any:
    for item in metadata:
        if isinstance(item, kind):
            return item
    return default


def _classify(tp: Any) -> Shape:
    name = type_name(tp)
    base, metadata = _unwrap(tp)

    if base is timedelta:
        return Shape(ShapeKind.DURATION, tp, name, base=base)
    if base is datetime:
        return Shape(ShapeKind.TIMESTAMP, tp, name, base=base)

    if isinstance(base, type):
        if callable(getattr(base, "unmarshal_text", None)):
            return Shape(ShapeKind.TEXT, tp, name, base=base)
        if issubclass(base, bool):
            return Shape(ShapeKind.BOOL, tp, name, base=base)
        if issubclass(base, str):
            return Shape(ShapeKind.STRING, tp, name, base=base)
        if issubclass(base, int):
            spec = _spec(metadata, IntSpec, IntSpec())
            kind = ShapeKind.INT if spec.signed else ShapeKind.UINT
            return Shape(kind, tp, name, base=base, bits=spec.bits)
        if issubclass(base, float):
            spec = _spec(metadata, FloatSpec, FloatSpec())
            return Shape(ShapeKind.FLOAT, tp, name, base=base, bits=spec.bits)
        if dataclasses.is_dataclass(base):
            return Shape(ShapeKind.AGGREGATE, tp, name, base=base, members=_dataclass_members(base))
        if issubclass(base, BaseModel):
            return Shape(ShapeKind.AGGREGATE, tp, name, base=base, members=_model_members(base))

    origin = typing.get_origin(base)
    args = typing.get_args(base)
    if origin is list and len(args) == 1:
        return Shape(ShapeKind.SEQUENCE, tp, name, element=args[0])
    if origin is Ptr and len(args) == 1:
        return Shape(ShapeKind.INDIRECT, tp, name, element=args[0])

    return Shape(ShapeKind.UNSUPPORTED, tp, name)


def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError:
        # Forward references we cannot resolve stay as strings and
        # classify as unsupported.
        return {}


def _dataclass_members(cls: type) -> Tuple[Member, ...]:
    hints = _type_hints(cls)
    members = []
    for f in dataclasses.fields(cls):
        default: Optional[Callable[[], Any]] = None
        if f.default is not dataclasses.MISSING:
            default = (lambda value=f.default: value)
        elif f.default_factory is not dataclasses.MISSING:
            default = f.default_factory
        members.append(
            Member(
                name=f.name,
                type=hints.get(f.name, f.type),
                accessible=f.init and not f.name.startswith("_"),
                init=f.init,
                default=default,
            )
        )
    return tuple(members)


def _model_members(cls: type) -> Tuple[Member, ...]:
    members = []
    for name, info in cls.model_fields.items():
        # pydantic moves Annotated metadata (width markers) onto the FieldInfo.
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        default: Optional[Callable[[], Any]] = None
        if not info.is_required():
            default = (lambda info=info: info.get_default(call_default_factory=True))
        members.append(Member(name=name, type=annotation, default=default))
    return tuple(members)


def type_name(tp: Any) -> str:
    """Human readable name of a declared type, used in error messages."""
    base, metadata = _unwrap(tp)
    int_spec = _spec(metadata, IntSpec, None)
    if int_spec is not None:
        return f"{'int' if int_spec.signed else 'uint'}{int_spec.bits}"
    float_spec = _spec(metadata, FloatSpec, None)
    if float_spec is not None:
        return f"float{float_spec.bits}"

    origin = typing.get_origin(base)
    if origin is not None:
        args = ", ".join(type_name(arg) for arg in typing.get_args(base))
        return f"{getattr(origin, '__name__', repr(origin))}[{args}]"
    if isinstance(base, type):
        return base.__name__
    return repr(base)


def zero_value(tp: Any) -> Any:
    """The value a destination of this type holds before anything is decoded into it."""
    shape = classify(tp)
    kind = shape.kind
    if kind is ShapeKind.DURATION:
        return timedelta(0)
    if kind is ShapeKind.TIMESTAMP:
        return ZERO_TIME
    if kind is ShapeKind.TEXT:
        return shape.base()
    if kind in (ShapeKind.BOOL, ShapeKind.STRING, ShapeKind.INT, ShapeKind.UINT, ShapeKind.FLOAT):
        if isinstance(shape.base, type) and issubclass(shape.base, enum.Enum):
            return None
        return shape.base()
    if kind is ShapeKind.AGGREGATE:
        return build_aggregate(shape, {m.name: m.zero() for m in shape.members if m.init})
    return None


def build_aggregate(shape: Shape, values: Dict[str, Any]) -> Any:
    if issubclass(shape.base, BaseModel):
        return shape.base.model_construct(**values)
    return shape.base(**values)


def _resolve(shape: Shape) -> Shape:
    while shape.kind is ShapeKind.INDIRECT:
        shape = classify(shape.element)
    return shape


def validate_line_shape(shape: Shape) -> None:
    """Reject destinations that cannot be decoded, before any input is consumed."""
    target = _resolve(shape)
    if target.kind is ShapeKind.UNSUPPORTED:
        raise UnsupportedTypeError(target.name)

    if target.kind is ShapeKind.AGGREGATE:
        for member in target.members:
            if not member.accessible:
                raise InaccessibleMemberError(target.name, member.name)
            _validate_token_shape(classify(member.type), f"{target.name}.{member.name}")

    elif target.kind is ShapeKind.SEQUENCE:
        _validate_token_shape(classify(target.element), f"elements of {target.name}")


def _validate_token_shape(shape: Shape, where: str) -> None:
    target = _resolve(shape)
    if target.takes_token:
        return
    if target.kind is ShapeKind.UNSUPPORTED:
        raise UnsupportedTypeError(target.name)
    raise UnsupportedTypeError(
        target.name,
        f"unsupported type {target.name} for {where}: nested aggregates and sequences cannot be decoded from one token",
    )
