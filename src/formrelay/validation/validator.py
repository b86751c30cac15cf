from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from formrelay.utils.logger_util import get_logger, logging
from .schema import Presence, SchemaFor
logger=get_logger(__name__,logging.DEBUG)


@dataclass(frozen=True)
class Valid:
    values: Dict[str, Any] = field(default_factory=dict)
    ok: bool = True


@dataclass(frozen=True)
class Invalid:
    message: str
    ok: bool = False


ValidationOutcome = Union[Valid, Invalid]


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


class Validator:
    """Apply the schema selected by a discriminant to decoded input.

    Validation is exhaustive: every offending field is reported, joined into a
    single message. Keys the active schema doesn't declare are rejected.
    """

    def __init__(self, schema_for: SchemaFor):
        self.schema_for = schema_for

    def validate(self, data: Any, discriminant: Any = None) -> ValidationOutcome:
        if not isinstance(data, dict):
            return Invalid('"value" must be of type object')

        specs = self.schema_for(discriminant)
        declared = {spec.name for spec in specs}
        errors: List[str] = []
        values: Dict[str, Any] = {}

        for spec in specs:
            if spec.presence == Presence.FORBIDDEN:
                if spec.name in data:
                    errors.append(f'"{spec.name}" is not allowed')
                continue
            value = data.get(spec.name)
            if _is_absent(value):
                # empty optional values are treated as not sent
                if spec.presence == Presence.REQUIRED:
                    errors.append(f'"{spec.name}" is required')
                continue
            reasons = spec.check(value)
            if reasons:
                errors.extend(f'"{spec.name}" {reason}' for reason in reasons)
            else:
                values[spec.name] = value

        for key in data:
            if key not in declared:
                errors.append(f'"{key}" is not allowed')

        if errors:
            logger.debug("validation failed with %s error(s) for discriminant=%r", len(errors), discriminant)
            return Invalid(". ".join(errors))
        return Valid(values)
