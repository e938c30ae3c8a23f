from datetime import date

from registrar.config.school import SEMESTERS, default_school_year, school_year_options


def test_january_to_march_belongs_to_the_previous_school_year():
    assert default_school_year(date(2026, 1, 10)) == "2025-2026"
    assert default_school_year(date(2026, 3, 31)) == "2025-2026"


def test_april_onwards_starts_a_new_school_year():
    assert default_school_year(date(2026, 4, 1)) == "2026-2027"
    assert default_school_year(date(2026, 10, 17)) == "2026-2027"


def test_school_year_options_cover_last_and_current():
    values = [option["value"] for option in school_year_options(date(2026, 10, 17))]
    assert values == ["2025-2026", "2026-2027"]


def test_semesters():
    assert SEMESTERS == ["1st", "2nd"]
