"""
Display fields derived from raw job records.

Job records are loosely shaped: the same piece of information can live in
several places. Each display field is described by an ordered list of
extraction rules and the first rule that yields a value wins.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class FieldRule:
    name: str
    extract: Callable[[Mapping[str, Any]], Any]


def _path(job: Mapping[str, Any], *keys: str) -> Any:
    value: Any = job
    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _first_creative(job: Mapping[str, Any]) -> Mapping[str, Any]:
    creatives = job.get("creatives")
    if isinstance(creatives, list) and creatives and isinstance(creatives[0], Mapping):
        return creatives[0]
    return {}


def _present(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() != ""
    return value is not None and value is not False


def _salary_bounds(job: Mapping[str, Any]) -> Optional[Tuple[Any, Any]]:
    low, high = job.get("salary_min"), job.get("salary_max")
    if low is None or high is None:
        return None
    return low, high


def _salary_range(job: Mapping[str, Any]) -> Optional[str]:
    bounds = _salary_bounds(job)
    return f"₹{bounds[0]} - ₹{bounds[1]}" if bounds else None


def _salary_span(job: Mapping[str, Any]) -> Optional[str]:
    # detail and share text use the compact form
    bounds = _salary_bounds(job)
    return f"₹{bounds[0]}-{bounds[1]}" if bounds else None


def _salary_text(job: Mapping[str, Any]) -> Any:
    salary = _path(job, "primary_details", "Salary")
    # "-" is the API's placeholder for an undisclosed salary
    return None if salary == "-" else salary


def _tel_link_number(job: Mapping[str, Any]) -> Optional[str]:
    link = job.get("custom_link")
    if isinstance(link, str) and link.startswith("tel:"):
        return link[4:]
    return None


LOCATION_RULES = (
    FieldRule("primary_details.Place", lambda job: _path(job, "primary_details", "Place")),
    FieldRule("job_location_slug", lambda job: job.get("job_location_slug")),
)

SALARY_RULES = (
    FieldRule("salary_min/salary_max", _salary_range),
    FieldRule("primary_details.Salary", _salary_text),
)

DETAIL_SALARY_RULES = (
    FieldRule("salary_min/salary_max", _salary_span),
    FieldRule("primary_details.Salary", _salary_text),
)

PHONE_RULES = (
    FieldRule("custom_link tel:", _tel_link_number),
    FieldRule("whatsapp_no", lambda job: job.get("whatsapp_no")),
)

IMAGE_RULES = (
    FieldRule("creatives[0].thumb_url", lambda job: _first_creative(job).get("thumb_url")),
    FieldRule("creatives[0].file", lambda job: _first_creative(job).get("file")),
)


def first_match(
    job: Mapping[str, Any],
    rules: Sequence[FieldRule],
    fallback: Optional[str] = NOT_AVAILABLE,
) -> Optional[str]:
    """Apply rules in order and return the first present value as text."""
    for rule in rules:
        value = rule.extract(job)
        if _present(value):
            return str(value)
    return fallback


def detail(job: Mapping[str, Any], *keys: str, fallback: str = NOT_AVAILABLE) -> str:
    value = _path(job, *keys)
    return str(value) if _present(value) else fallback


def location(job: Mapping[str, Any]) -> str:
    return first_match(job, LOCATION_RULES)


def salary(job: Mapping[str, Any]) -> str:
    return first_match(job, SALARY_RULES)


def detail_salary(job: Mapping[str, Any]) -> str:
    return first_match(job, DETAIL_SALARY_RULES)


def phone(job: Mapping[str, Any]) -> str:
    return first_match(job, PHONE_RULES)


def image_url(job: Mapping[str, Any]) -> Optional[str]:
    return first_match(job, IMAGE_RULES, fallback=None)


def description_text(job: Mapping[str, Any]) -> Optional[str]:
    """Plain text of ``other_details``; markup is stripped, line breaks kept."""
    raw = job.get("other_details")
    if not _present(raw):
        return None
    text = BeautifulSoup(str(raw), "html.parser").get_text("\n")
    lines = [" ".join(line.split()) for line in text.splitlines()]
    text = "\n".join(line for line in lines if line)
    return text or None


def call_url(job: Mapping[str, Any]) -> Optional[str]:
    number = first_match(job, PHONE_RULES, fallback=None)
    return f"tel:{number}" if number else None


def whatsapp_link(job: Mapping[str, Any]) -> Optional[str]:
    link = _path(job, "contact_preference", "whatsapp_link")
    return link if isinstance(link, str) and link.strip() else None


def call_button_label(job: Mapping[str, Any]) -> str:
    button_text = job.get("button_text")
    if isinstance(button_text, str) and "Call" in button_text:
        return button_text
    return f"Call ({phone(job)})"


@dataclass(frozen=True)
class JobCard:
    id: Any
    title: str
    company: str
    location: str
    salary: str
    phone: str
    image_url: Optional[str]


@dataclass(frozen=True)
class JobDetails:
    id: Any
    title: str
    company: str
    location: str
    salary: str
    job_role: str
    experience: str
    qualification: str
    description: Optional[str]
    phone: str
    call_url: Optional[str]
    call_label: Optional[str]
    whatsapp_link: Optional[str]


def job_card(job: Mapping[str, Any]) -> JobCard:
    return JobCard(
        id=job.get("id"),
        title=detail(job, "title", fallback="No Title"),
        company=detail(job, "company_name"),
        location=location(job),
        salary=salary(job),
        phone=phone(job),
        image_url=image_url(job),
    )


def job_details(job: Mapping[str, Any]) -> JobDetails:
    url = call_url(job)
    return JobDetails(
        id=job.get("id"),
        title=detail(job, "title", fallback="Job Title Not Available"),
        company=detail(job, "company_name"),
        location=location(job),
        salary=detail_salary(job),
        job_role=detail(job, "job_role"),
        experience=detail(job, "primary_details", "Experience"),
        qualification=detail(job, "primary_details", "Qualification"),
        description=description_text(job),
        phone=phone(job),
        call_url=url,
        call_label=call_button_label(job) if url else None,
        whatsapp_link=whatsapp_link(job),
    )


def share_message(job: Mapping[str, Any]) -> str:
    """Text handed to the share sheet for one job."""
    details = job_details(job)
    contact = details.phone if details.phone != NOT_AVAILABLE else "See app for details"
    return (
        "Check out this job opportunity:\n\n"
        f"*{details.title}* at {details.company}\n"
        f"Location: {details.location}\n"
        f"Salary: {details.salary}\n\n"
        f"Contact: {contact}"
    )


def share_title(job: Mapping[str, Any]) -> str:
    return f"Job Opportunity: {job_details(job).title}"
