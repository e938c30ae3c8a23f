import pytest

from registrar.common.listing import contains_text, distinct_values, paginate, total_pages


@pytest.mark.parametrize("total, page_size, expected", [
    (0, 10, 0),
    (1, 10, 1),
    (10, 10, 1),
    (11, 10, 2),
    (25, 10, 3),
])
def test_total_pages_is_ceiling(total, page_size, expected):
    assert total_pages(total, page_size) == expected


def test_pages_reconstruct_the_input_in_order():
    items = list(range(23))
    pages = [paginate(items, page=p, page_size=10) for p in range(1, total_pages(len(items), 10) + 1)]

    assert [len(p.items) for p in pages] == [10, 10, 3]
    assert [item for p in pages for item in p.items] == items
    assert all(p.total == 23 for p in pages)


def test_page_past_the_end_is_empty():
    result = paginate(["a", "b"], page=5, page_size=10)
    assert result.items == []
    assert result.total_pages == 1


def test_page_numbers_start_at_one():
    with pytest.raises(ValueError):
        paginate([1, 2, 3], page=0)
    with pytest.raises(ValueError):
        paginate([1, 2, 3], page=1, page_size=0)


def test_contains_text_is_case_insensitive_and_blank_matches_all():
    assert contains_text("Dela Cruz, Juan", "cruz")
    assert contains_text("Dela Cruz, Juan", "  ")
    assert not contains_text(None, "juan")


def test_distinct_values_keeps_first_seen_order():
    rows = [{"sy": "2025-2026"}, {"sy": None}, {"sy": "2024-2025"}, {"sy": "2025-2026"}]
    assert distinct_values(rows, lambda r: r["sy"]) == ["2025-2026", "2024-2025"]
