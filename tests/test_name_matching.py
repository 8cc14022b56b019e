try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from ops_dashboard.schemas import Ticket
from ops_dashboard.services.name_matching import (
    MatchMode,
    display_name,
    index_tickets_by_engineer,
    match_tickets,
)


def _ticket(name: str, reg: str = "AB12 CDE", fine: float = 65.0) -> Ticket:
    return Ticket(vehicle_reg=reg, fine_amount=fine, engineer_name=name, admin_fee=25.0)


@pytest.mark.parametrize(
    ("full_name", "expected"),
    [
        ("John Smith", "Smith"),
        ("Ali Mohammed Khan", "Mohammed"),
        ("  Harry  ", "Harry"),
        ("", ""),
    ],
)
def test_display_name(full_name: str, expected: str) -> None:
    assert display_name(full_name) == expected


def test_index_normalizes_names() -> None:
    first = _ticket(" John Smith ")
    second = _ticket("john smith", reg="XY99 ZZZ")

    index = index_tickets_by_engineer([first, second])

    assert list(index) == ["john smith"]
    assert index["john smith"] == [first, second]


def test_exact_lookup_matches_normalized_sheet_name() -> None:
    ticket = _ticket("john smith")
    index = index_tickets_by_engineer([ticket])

    assert match_tickets("John Smith", index) == [ticket]
    assert match_tickets("John Smith", index, MatchMode.EXACT) == [ticket]


def test_heuristic_pass_matches_on_display_name() -> None:
    ticket = _ticket("smith")
    index = index_tickets_by_engineer([ticket])

    assert match_tickets("John Smith", index) == [ticket]
    assert match_tickets("John Smith", index, "exact") == []


def test_heuristic_pass_matches_ticket_first_word_inside_display_name() -> None:
    ticket = _ticket("harry p")
    index = index_tickets_by_engineer([ticket])

    assert match_tickets("Tom Harry", index) == [ticket]


def test_heuristic_does_not_duplicate_or_mutate_index() -> None:
    exact = _ticket("john smith")
    fuzzy = _ticket("smith j", reg="XY99 ZZZ")
    index = index_tickets_by_engineer([exact, fuzzy])

    matched = match_tickets("John Smith", index)

    assert matched == [exact, fuzzy]
    assert index["john smith"] == [exact]
    assert match_tickets("John Smith", index) == [exact, fuzzy]


def test_blank_ticket_names_never_match() -> None:
    index = index_tickets_by_engineer([_ticket(""), _ticket("   ")])

    assert match_tickets("John Smith", index) == []


def test_unrelated_names_do_not_match() -> None:
    index = index_tickets_by_engineer([_ticket("dave jones")])

    assert match_tickets("John Smith", index) == []
