from .schema import FieldSpec, Kind, Presence, forbidden, optional, required
from .validator import Invalid, Valid, ValidationOutcome, Validator

__all__ = [
    "FieldSpec",
    "Kind",
    "Presence",
    "forbidden",
    "optional",
    "required",
    "Invalid",
    "Valid",
    "ValidationOutcome",
    "Validator",
]
