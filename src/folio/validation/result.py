"""Validation result: immutable container for validated data or errors."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating form data against a set of rules.

    The result is falsy when invalid, so you can write::

        result = validate(data, rules)
        if not result:
            session.flash("errors", result.errors)

    ``errors`` maps field names to lists of messages::

        {"name": ["Name is required."],
         "email": ["Please enter a valid email address."]}
    """

    data: dict[str, str]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid
