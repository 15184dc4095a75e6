from typing import Any, Iterable, List, Mapping

from .errors import ValidationError

# Fields whose values, when present and not null, must be strings
OPTIONAL_STR_FIELDS = [
    "title",
    "company_name",
    "job_role",
    "job_location_slug",
    "custom_link",
]


def is_numeric_id(v: Any) -> bool:
    # bool is an int subclass but never a valid id
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def is_valid_job(record: Any) -> bool:
    """A job is usable when it is a mapping carrying a numeric id."""
    return isinstance(record, Mapping) and is_numeric_id(record.get("id"))


def validate_job(record: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    Only the id decides whether a record is kept; the remaining checks report
    shape problems that the display layer tolerates.
    """
    if not isinstance(record, Mapping):
        return ["Job record must be an object"]

    errors: List[str] = []
    if "id" not in record or record["id"] is None:
        errors.append("Missing required field: id")
    elif not is_numeric_id(record["id"]):
        errors.append("Field 'id' must be a number")

    for f in OPTIONAL_STR_FIELDS:
        if record.get(f) is not None and not isinstance(record[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    details = record.get("primary_details")
    if details is not None and not isinstance(details, Mapping):
        errors.append("Field 'primary_details' must be an object if provided")

    creatives = record.get("creatives")
    if creatives is not None and not isinstance(creatives, list):
        errors.append("Field 'creatives' must be a list if provided")

    return errors


def require_valid_job(record: Any) -> None:
    """Raise ValidationError unless the record has a numeric id."""
    if not is_valid_job(record):
        # the id (or object shape) problem is always reported first
        raise ValidationError(validate_job(record)[0])


def filter_valid_jobs(results: Iterable[Any]) -> List[dict]:
    """Keep records with a numeric id, in their original order."""
    return [item for item in results if is_valid_job(item)]
