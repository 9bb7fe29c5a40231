"""
Console Variables
=================

Named, string-valued settings the console can read and write.

The dispatcher falls back to this table when the first token of a
line is not a command:

    > sv.rate            prints   sv.rate = 60
    > sv.rate 30         sets     sv.rate to "30"

Values are stored as the literal token text. Typed accessors
(``int_value``, ``float_value``) parse on demand and fall back to 0 so a
bad value typed at the console never raises inside game code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass
class ConfigVar:
    """A single console variable.

    Attributes
    ----------
    name : str
        Lowercase lookup key.
    default : str
        Value restored by ``VariableStore.reset()``.
    description : str
        Shown nowhere by the core; available to UIs.
    changed : bool
        Raised on every assignment so owners can poll for edits.
        Owners clear it themselves.
    """
    name: str
    default: str = ""
    description: str = ""
    changed: bool = False
    _value: str = field(default="", init=False, repr=False)

    def __post_init__(self):
        self.name = self.name.lower()
        self._value = self.default

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, new_value: str) -> None:
        self._value = str(new_value)
        self.changed = True

    @property
    def int_value(self) -> int:
        try:
            return int(self._value)
        except ValueError:
            try:
                return int(float(self._value))
            except ValueError:
                return 0

    @property
    def float_value(self) -> float:
        try:
            return float(self._value)
        except ValueError:
            return 0.0


class VariableStore:
    """Lowercase name → ConfigVar mapping."""

    def __init__(self):
        self._vars: dict[str, ConfigVar] = {}

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[ConfigVar]:
        return iter(self._vars.values())

    def register(self, name: str, default: str = "", description: str = "") -> ConfigVar:
        """Create and store a variable.

        Raises
        ------
        ValueError
            If a variable with that name already exists.
        """
        key = name.lower()
        if key in self._vars:
            raise ValueError(f"Variable name collision: '{key}' is already registered")
        var = ConfigVar(name=key, default=str(default), description=description)
        self._vars[key] = var
        return var

    def get(self, name: str) -> Optional[ConfigVar]:
        return self._vars.get(name.lower())

    def names(self) -> list[str]:
        return list(self._vars)

    def items(self) -> list[tuple[str, ConfigVar]]:
        return list(self._vars.items())

    def set(self, name: str, value: str) -> bool:
        """Assign ``value`` to an existing variable. False if unknown."""
        var = self.get(name)
        if var is None:
            return False
        var.value = value
        return True

    def reset(self) -> None:
        """Put every variable back to its default value."""
        for var in self._vars.values():
            var.value = var.default
            var.changed = False
