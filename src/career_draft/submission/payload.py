"""Flatten a draft into the document shape the career endpoints store."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from career_draft.models.draft import CareerDraft, Salary


def salary_amount(value: str) -> int | float | None:
    """Numeric salary, or None for a blank or non-numeric entry."""
    text = (value or "").replace(",", "").strip()
    if not text:
        return None
    try:
        amount = float(text)
    except ValueError:
        return None
    if math.isnan(amount) or math.isinf(amount):
        return None
    return int(amount) if amount.is_integer() else amount


CURRENCY_SYMBOLS: dict[str, str] = {
    "PHP": "₱",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AUD": "A$",
    "SGD": "S$",
    "JPY": "¥",
}


def format_salary_value(value: str, currency: str = "PHP") -> str:
    """Display form of one salary amount: symbol plus thousands separators.

    A blank value shows as "-"; a non-numeric one is shown as typed.
    """
    if not (value or "").strip():
        return "-"
    amount = salary_amount(value)
    if amount is None:
        return value
    code = (currency or "").strip().upper() or "PHP"
    number = f"{amount:,}" if isinstance(amount, int) else f"{amount:,.2f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    return f"{symbol}{number}" if symbol else f"{number} {code}"


def salary_display(salary: Salary) -> tuple[str, str]:
    """(minimum, maximum) as shown to recruiters; both read "Negotiable" when negotiable."""
    if salary.is_negotiable:
        return "Negotiable", "Negotiable"
    return (
        format_salary_value(salary.minimum, salary.currency),
        format_salary_value(salary.maximum, salary.currency),
    )


def _person(user: Mapping[str, Any] | None) -> dict[str, Any]:
    user = user or {}
    return {"image": user.get("image"), "name": user.get("name"), "email": user.get("email")}


def format_career_payload(
    draft: CareerDraft,
    status: str,
    org_id: str | None,
    user: Mapping[str, Any] | None = None,
    career: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the add/update payload.

    ``career`` is the stored posting being edited, if any: its ``_id`` and
    original ``createdBy``/``lastEditedBy`` are carried over.
    """
    career = career or {}
    members = [m.model_dump(mode="json", by_alias=True) for m in draft.team.members]

    payload: dict[str, Any] = {}
    if career.get("_id"):
        payload["_id"] = career["_id"]
    payload.update(
        {
            "jobTitle": draft.job_title,
            "description": draft.description,
            "workSetup": draft.work_setup,
            "workSetupRemarks": draft.work_setup_remarks,
            "cvSecretPrompt": draft.cv_secret_prompt,
            "aiInterviewSecretPrompt": draft.ai_interview_secret_prompt,
            "questions": [g.model_dump(mode="json", by_alias=True) for g in draft.question_groups],
            "lastEditedBy": career.get("lastEditedBy") or _person(user),
            "createdBy": career.get("createdBy") or _person(user),
            "screeningSetting": draft.screening_setting,
            "requireVideo": draft.require_video,
            "orgID": org_id,
            "salaryNegotiable": draft.salary.is_negotiable,
            "minimumSalary": salary_amount(draft.salary.minimum),
            "maximumSalary": salary_amount(draft.salary.maximum),
            "salaryCurrency": draft.salary.currency,
            "country": draft.location.country,
            "province": draft.location.province,
            "location": draft.location.city,
            "status": status,
            "employmentType": draft.employment_type,
            "teamMembers": members,
            "team": {"members": members},
        }
    )
    return payload
