"""
modules/validation package: input guards run before any optimization work.
"""
from modules.validation.input_validator import (
    ValidationResult,
    parse_preferences,
    validate_preferences,
    validate_destination_ids,
    validate_coordinates,
    validate_destination,
    validate_attraction,
    filter_valid,
)

__all__ = [
    "ValidationResult",
    "parse_preferences",
    "validate_preferences",
    "validate_destination_ids",
    "validate_coordinates",
    "validate_destination",
    "validate_attraction",
    "filter_valid",
]
