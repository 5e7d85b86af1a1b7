# devicesdk

Building blocks for IoT device clients: strongly typed device values with a
BSON-like Python form, MQTT topic parsing, and the error types used to report
property store failures.

## Installation

```
pip install devicesdk
```

For running the test suite:

```
pip install "devicesdk[test]"
pytest
```

## Typed values

`devicesdk.types.AstarteType` holds one value together with its `TypeKind`:
double, integer, boolean, long integer, string, binary blob, date-time, the
array form of each, the generic empty array, and unset. Build one from a plain
Python value with `AstarteType.from_value`:

```python
from devicesdk.types import AstarteType, Int64, MappingType, TypeKind

value = AstarteType.from_value(42.4)
value.kind                          # TypeKind.DOUBLE
value.matches(MappingType.DOUBLE)   # True
value.to_float()                    # 42.4

AstarteType.from_value(7).kind              # TypeKind.INTEGER
AstarteType.from_value(Int64(7)).kind       # TypeKind.LONG_INTEGER
AstarteType.from_value([1, 2, 3]).kind      # TypeKind.INTEGER_ARRAY
AstarteType.from_value([]).kind             # TypeKind.EMPTY_ARRAY
```

How plain values are classified:

- `bool` is a boolean; an `int` in the 32-bit range is an integer, a wider one
  (up to 64 bits) or any `Int64` is a long integer; larger integers raise
  `ConversionError`.
- A `float` that is NaN, infinite or subnormal raises `FloatError`.
- `bytes`/`bytearray` is a binary blob; a `datetime` is a date-time, converted to
  UTC (a naive `datetime` is taken as UTC).
- A list or tuple becomes an array; all elements must be of one kind, except
  that integers and long integers together make a long integer array. Mixed
  kinds raise `ConversionError`.

`Int64` is an `int` subclass that marks a value as 64 bits wide and raises
`ValueError` when it does not fit.

An `AstarteType` compares equal to another `AstarteType` of the same kind and
value, and to a plain value that converts to one. Other operations:

- `matches(mapping_type)` tells whether the value can be sent on a mapping of
  that `MappingType`. An integer also matches `DOUBLE` and `LONG_INTEGER`; the
  empty array matches every array mapping type.
- `to_float()` and `to_long()` return the value, widening an integer; other
  kinds raise `ConversionError`.
- `unwrap(kind)` returns the inner value if it is of that `TypeKind`, and raises
  `ConversionError` otherwise.

All conversion errors derive from `AstarteTypeError`: `FloatError`,
`ConversionError`, `FromBsonError` and `FromBsonArrayError`.

## BSON form

`AstarteType.to_bson()` returns plain Python values: `float`, `int`, `Int64` for
long integers, `bool`, `str`, `bytes`, UTC `datetime` truncated to milliseconds,
lists of these, `[]` for the empty array and `None` for unset.

`from_bson(value)` goes the other way. A plain `int` must fit in 32 bits
(otherwise `FromBsonError`); use `Int64` for long integers. Forbidden floats raise
`FloatError`, and unsupported values raise `FromBsonError`. `from_bson_array`
requires every element to have the type of the first one (otherwise
`FromBsonArrayError`) and turns an empty list into the empty-array kind.
`from_bson_vec` converts each element of a list on its own.

```python
from devicesdk.types import AstarteType, TypeKind, from_bson

bson = AstarteType(TypeKind.DOUBLE_ARRAY, []).to_bson()   # []
from_bson(bson).kind                                       # TypeKind.EMPTY_ARRAY
```

## Topics

```python
from devicesdk.topic import parse_topic

parsed = parse_topic("realm/device-0001/com.example.Interface/led/red")
parsed.realm      # "realm"
parsed.device     # "device-0001"
parsed.interface  # "com.example.Interface"
parsed.path       # "/led/red"
```

`parse_topic` returns a `ParsedTopic` named tuple; the path keeps its leading
slash and is not otherwise validated. An empty topic raises `EmptyTopicError`;
a topic without the `<realm>/<device_id>/<interface>/<path>` shape, or with an
empty interface, raises `MalformedTopicError`. Both derive from `TopicError`,
whose `topic` attribute holds the offending topic (empty for an empty one).

## Store errors

`devicesdk.store.error` defines the errors used to report a failed property
store operation: `StorePropError`, `LoadPropError`, `DeletePropError`,
`ClearError` and `LoadAllError`, all subclasses of `StoreError`. Each is built
from the underlying exception, which is kept as `source` and as `__cause__`:

```python
from devicesdk.store.error import LoadPropError

try:
    raise LoadPropError(OSError("disk unavailable"))
except LoadPropError as err:
    str(err)        # "could not load property"
    err.source      # OSError('disk unavailable')
```

## What this package does not do

It has no property store: nothing here saves, loads or deletes property values,
in memory or on disk. It also does not connect to a broker or send and receive
messages; it only provides the value types, topic parsing and store error types
that such a client would use.