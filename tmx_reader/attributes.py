"""
Attribute extraction for TMX elements.

=============================================================================
HOW ATTRIBUTES ARE READ
=============================================================================

Every TMX element carries an unordered bag of attributes:

    <layer name="Ground" opacity="0.5" visible="0" locked="1">

Each constructor declares which attributes it wants as an AttributeSchema:

    LAYER_ATTRS = AttributeSchema(
        optionals=[("opacity", as_float), ("visible", as_flag)],
        required=[("name", as_str)],
        error="layer must have a name",
    )

    (opacity, visible), (name,) = LAYER_ATTRS.extract(attrs)

extract() walks the attribute list once. For each attribute whose name is
in the schema it runs the coercer, a function from the raw string to a
typed value or None. Attributes the schema does not mention ("locked"
above) are ignored, so newer Tiled versions do not break older readers.

After the scan:
- a required field that is still None raises MalformedAttributes
- an optional field that is None is simply absent; the caller picks
  the default

A coercer never raises. "abc" for an int field is the same as a missing
attribute: fatal when required, silently absent when optional.

=============================================================================
"""

from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .errors import MalformedAttributes

Coercer = Callable[[str], Optional[Any]]
Attributes = Iterable[Tuple[str, str]]

U32_MAX = 0xFFFFFFFF


# =============================================================================
# COERCERS
# =============================================================================

def as_str(value: str) -> Optional[str]:
    return value


def as_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def as_uint(value: str) -> Optional[int]:
    """Unsigned 32-bit integer, the type of ids, sizes and GIDs."""
    number = as_int(value)
    if number is None or not 0 <= number <= U32_MAX:
        return None
    return number


def as_float(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


def as_flag(value: str) -> Optional[bool]:
    """
    Tiled writes booleans on elements as "0"/"1".

    Any integer is accepted; only 1 means True. Non-numeric text is
    treated as absent.
    """
    number = as_int(value)
    if number is None:
        return None
    return number == 1


# =============================================================================
# SCHEMA
# =============================================================================

class AttributeSchema:
    """
    Declarative description of the attributes one element needs.

    Parameters:
    -----------
    optionals : list of (name, coercer)
        Attributes that may be absent or malformed
    required : list of (name, coercer)
        Attributes that must be present and coerce successfully
    error : str
        Message of the MalformedAttributes raised when a required
        attribute is missing
    """

    def __init__(self, optionals: Sequence[Tuple[str, Coercer]] = (),
                 required: Sequence[Tuple[str, Coercer]] = (),
                 error: str = "missing required attributes"):
        self.optionals = list(optionals)
        self.required = list(required)
        self.error = error

        # name -> (is_required, slot); built once per schema, not per element
        self._slots = {}
        for slot, (name, coercer) in enumerate(self.optionals):
            self._slots[name] = (False, slot, coercer)
        for slot, (name, coercer) in enumerate(self.required):
            self._slots[name] = (True, slot, coercer)

    def extract(self, attrs: Attributes) -> Tuple[tuple, tuple]:
        """
        Pull the schema's fields out of an attribute list in one pass.

        Returns:
        --------
        (optional_values, required_values) : tuple of tuples
            Both in schema order. Optional values may be None; required
            values never are.

        Raises:
        -------
        MalformedAttributes : if a required field is absent or malformed
        """
        optional_values: List[Optional[Any]] = [None] * len(self.optionals)
        required_values: List[Optional[Any]] = [None] * len(self.required)

        for name, raw in attrs:
            entry = self._slots.get(name)
            if entry is None:
                continue
            is_required, slot, coercer = entry
            if is_required:
                required_values[slot] = coercer(raw)
            else:
                optional_values[slot] = coercer(raw)

        if any(value is None for value in required_values):
            raise MalformedAttributes(self.error)

        return tuple(optional_values), tuple(required_values)
