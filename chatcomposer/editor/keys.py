"""
Key events as the host delivers them.

Modifiers accept either a mapping ({"shift": True}) or a list of names
(["shift", "ctrl"]), which is what browser hooks usually forward.
"""

from __future__ import annotations
from typing import Any

from pydantic import BaseModel, Field, model_validator


MODIFIER_NAMES = ("shift", "ctrl", "alt", "meta")

MODIFIER_ALIASES = {
    "control": "ctrl",
    "cmd": "meta",
    "command": "meta",
    "option": "alt",
}


class Modifiers(BaseModel):
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @model_validator(mode="before")
    @classmethod
    def _from_names(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, str):
            data = [data]
        if isinstance(data, (list, tuple, set, frozenset)):
            values = {}
            for name in data:
                if not isinstance(name, str):
                    raise ValueError(f"Modifier names must be strings, got {name!r}")
                name = MODIFIER_ALIASES.get(name.lower(), name.lower())
                if name not in MODIFIER_NAMES:
                    raise ValueError(f"Unknown modifier {name!r}")
                values[name] = True
            return values
        return data

    @property
    def command(self) -> bool:
        """Ctrl on most platforms, Cmd on macOS."""
        return self.ctrl or self.meta

    @property
    def any(self) -> bool:
        return self.shift or self.ctrl or self.alt or self.meta


class KeyEvent(BaseModel):
    key: str
    modifiers: Modifiers = Field(default_factory=Modifiers)
