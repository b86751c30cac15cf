from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .rules import Rule


class Presence(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


class Kind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    ANY = "any"


_KIND_ERRORS = {
    Kind.STRING: "must be a string",
    Kind.INTEGER: "must be an integer",
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    presence: Presence = Presence.OPTIONAL
    kind: Kind = Kind.STRING
    rules: Tuple[Rule, ...] = field(default_factory=tuple)

    def type_error(self, value: Any) -> Optional[str]:
        if self.kind == Kind.STRING and not isinstance(value, str):
            return _KIND_ERRORS[self.kind]
        # bool is an int subclass; "1700000000000" is not a timestamp
        if self.kind == Kind.INTEGER and (isinstance(value, bool) or not isinstance(value, int)):
            return _KIND_ERRORS[self.kind]
        return None

    def check(self, value: Any) -> List[str]:
        """Return every reason ``value`` violates this spec (type first, then rules)."""
        reason = self.type_error(value)
        if reason is not None:
            return [reason]
        return [r for r in (rule(value) for rule in self.rules) if r is not None]


def required(name: str, *rules: Rule, kind: Kind = Kind.STRING) -> FieldSpec:
    return FieldSpec(name=name, presence=Presence.REQUIRED, kind=kind, rules=tuple(rules))


def optional(name: str, *rules: Rule, kind: Kind = Kind.STRING) -> FieldSpec:
    return FieldSpec(name=name, presence=Presence.OPTIONAL, kind=kind, rules=tuple(rules))


def forbidden(name: str) -> FieldSpec:
    return FieldSpec(name=name, presence=Presence.FORBIDDEN, kind=Kind.ANY)


SchemaFor = Callable[[Any], Sequence[FieldSpec]]
