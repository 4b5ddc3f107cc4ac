"""Form validation: composable rules, clean results.

Usage::

    from folio.validation import email, max_length, required, validate

    result = validate(data, {
        "name": [required("Name is required."), max_length(100)],
        "email": [required("Email is required."), email()],
    })
    if not result:
        ...  # result.errors
"""

from collections.abc import Mapping

from folio.validation.result import ValidationResult
from folio.validation.rules import Validator, email, is_email, max_length, min_length, required

__all__ = [
    "ValidationResult",
    "Validator",
    "email",
    "is_email",
    "max_length",
    "min_length",
    "required",
    "validate",
]


def validate(
    data: Mapping[str, str],
    rules: dict[str, list[Validator]],
) -> ValidationResult:
    """Validate data against a set of rules.

    Validators for a field run in order and stop at the first failure, so
    each invalid field carries exactly one message (no length complaint for
    an empty value).

    Args:
        data: Any mapping of field names to string values.
        rules: Field name to a list of validators.

    Returns:
        A ``ValidationResult`` with cleaned values for fields that passed
        and messages for fields that did not.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, str] = {}

    for field_name, validators in rules.items():
        value = data.get(field_name) or ""

        for validator in validators:
            error = validator(value)
            if error is not None:
                errors[field_name] = [error]
                break
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)
