"""Alias table: device integer codes <-> human-readable value names.

For every property code the table holds an ordered tuple of names. The
position of a name in that tuple is the integer the device uses on the wire::

    "Mod": ("auto", "cool", "dry", "fan", "heat")
             0       1       2      3      4

Flag properties (e.g. ``Add0.5``) carry 0/1 and translate to booleans.
Properties the table does not know pass through as raw integers.

The table must match the device firmware; mismatches are not detected and
show up either as :class:`OutOfRangeError` or as a wrong label.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Union

from ..exceptions import OutOfRangeError, UnknownValueError

Value = Union[int, str, bool]

_OFF_ON = ("off", "on")

DEFAULT_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "Pow": _OFF_ON,
    "Mod": ("auto", "cool", "dry", "fan", "heat"),
    "TemUn": ("celsius", "fahrenheit"),
    "WdSpd": ("auto", "low", "medium-low", "medium", "medium-high", "high"),
    "Air": _OFF_ON,
    "Blo": _OFF_ON,
    "Health": _OFF_ON,
    "SwhSlp": _OFF_ON,
    "Lig": _OFF_ON,
    "SwingLfRig": (
        "default", "full swing", "pos 1", "pos 2", "pos 3", "pos 4", "pos 5",
    ),
    "SwUpDn": (
        "default",
        "full swing",
        "upmost position",
        "middle-up position",
        "middle position",
        "middle-low position",
        "lowest position",
        "downmost region",
        "middle-low region",
        "middle region",
        "middle-up region",
        "upmost region",
    ),
    "Quiet": _OFF_ON,
    "Tur": _OFF_ON,
    "SvSt": _OFF_ON,
    "StHt": _OFF_ON,
})

DEFAULT_FLAGS: frozenset[str] = frozenset({"Add0.5"})


class AliasTable:
    """Immutable bidirectional alias lookup.

    Usage::

        table = AliasTable()
        table.resolve("Mod", 1)            # "cool"
        table.reverse_resolve("Mod", "heat")  # 4
    """

    __slots__ = ("_aliases", "_reverse", "_flags")

    def __init__(
        self,
        aliases: Mapping[str, Iterable[str]] = DEFAULT_ALIASES,
        flags: Iterable[str] = DEFAULT_FLAGS,
    ) -> None:
        frozen = {code: tuple(names) for code, names in aliases.items()}
        self._aliases = MappingProxyType(frozen)
        self._reverse = MappingProxyType({
            code: MappingProxyType({name: i for i, name in enumerate(names)})
            for code, names in frozen.items()
        })
        self._flags = frozenset(flags)

    def __contains__(self, code: object) -> bool:
        return code in self._aliases

    def __repr__(self) -> str:
        return f"AliasTable(codes={len(self._aliases)}, flags={sorted(self._flags)})"

    def codes(self) -> list[str]:
        return list(self._aliases)

    def values(self, code: str) -> tuple[str, ...]:
        """Value names for ``code``, in wire order."""
        if code not in self._aliases:
            raise UnknownValueError(f"Unknown property '{code}'")
        return self._aliases[code]

    def is_flag(self, code: str) -> bool:
        return code in self._flags

    def resolve(self, code: str, index: int) -> str:
        """Return the name at ``index`` in the value list of ``code``.

        Raises:
            OutOfRangeError: If ``code`` is unknown or ``index`` is outside
                ``0 <= index < len(values)``.
        """
        names = self._aliases.get(code)
        if names is None:
            raise OutOfRangeError(f"No aliases for property '{code}'")
        if not 0 <= index < len(names):
            raise OutOfRangeError(
                f"Value {index} out of range for '{code}' (0-{len(names) - 1})"
            )
        return names[index]

    def reverse_resolve(self, code: str, name: str) -> int:
        """Return the wire integer for ``name``. Exact, case-sensitive match.

        Raises:
            UnknownValueError: If ``name`` is not an alias of ``code``.
        """
        index = self._reverse.get(code, {}).get(name)
        if index is None:
            raise UnknownValueError(
                f"Unknown value '{name}' for '{code}'. "
                f"Valid: {list(self._aliases.get(code, ()))}"
            )
        return index

    def translate(self, code: str, value: int) -> Value:
        """Device integer -> human-readable value.

        Flags become booleans, aliased properties become names, anything
        else is returned unchanged.
        """
        if code in self._flags:
            return bool(value)
        if code in self._aliases:
            return self.resolve(code, value)
        return value

    def encode(self, code: str, value: Value) -> int:
        """Human-readable value -> device integer."""
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, str):
            return self.reverse_resolve(code, value)
        return int(value)

    def as_dict(self) -> dict[str, list[str]]:
        return {code: list(names) for code, names in self._aliases.items()}
