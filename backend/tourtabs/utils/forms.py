from typing import Dict

from pydantic import ValidationError


def validation_errors(e: ValidationError) -> Dict[str, str]:
    """First message per field; model-level errors are keyed ``form``."""
    errors: Dict[str, str] = {}
    for err in e.errors():
        field = str(err["loc"][0]) if err["loc"] else "form"
        errors.setdefault(field, err["msg"].removeprefix("Value error, "))
    return errors
