from datetime import date
from typing import Dict, List, Optional

SEMESTER_OPTIONS: List[Dict[str, str]] = [
    {"value": "1st", "label": "1st Semester"},
    {"value": "2nd", "label": "2nd Semester"},
]

SEMESTERS = [option["value"] for option in SEMESTER_OPTIONS]

REJECTION_REASONS = [
    "Incomplete requirements",
    "Does not meet criteria",
    "Invalid documents",
    "Duplicate application",
    "Other",
]

GRADE_LEVELS = ["11", "12"]


def default_school_year(today: Optional[date] = None) -> str:
    """
    School year a new record defaults to.

    January to March still belongs to the year that started last June, so it
    resolves to ``{last}-{current}``; every other month resolves to
    ``{current}-{next}``.
    """
    today = today or date.today()
    if 1 <= today.month <= 3:
        return f"{today.year - 1}-{today.year}"
    return f"{today.year}-{today.year + 1}"


def school_year_options(today: Optional[date] = None) -> List[Dict[str, str]]:
    today = today or date.today()
    this_year = today.year
    last_year = this_year - 1
    return [
        {"value": f"{last_year}-{this_year}", "label": f"{last_year}-{this_year}"},
        {"value": f"{this_year}-{this_year + 1}", "label": f"{this_year}-{this_year + 1}"},
    ]
