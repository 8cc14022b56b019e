"""
Associate fine records with engineers.

The tickets tab stores the engineer as free text, while engineers are
identified by the name of their payslip tab. The two rarely agree exactly, so
matching runs in two passes:

1. exact lookup of the normalized (lower-cased, trimmed) tab name;
2. for every other ticket name, a containment check: the ticket name contains
   the engineer's display name, or the display name contains the ticket
   name's first word.

The second pass is a heuristic. It produces false positives when short names
collide as substrings ("Al" matches "Alan") and false negatives when the two
spellings share no token. Deployments that need stricter behaviour can use
``MatchMode.EXACT``, which stops after the first pass.

Two departures from the dashboard this replaces. Fuzzy matches are collected
in a fresh list, so the shared index is never modified; previously they were
appended to the exact-match list stored in the index, so one engineer's
matches leaked into the next. Tickets with a blank name are skipped by the
containment check; previously their empty first word was "contained" in
every display name, so they were charged to every engineer.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping

from ops_dashboard.schemas import Ticket


class MatchMode(str, Enum):
    HEURISTIC = "heuristic"
    EXACT = "exact"


def normalize_name(name: str) -> str:
    return name.strip().lower()


def display_name(full_name: str) -> str:
    """Label used in the UI for an engineer.

    Tab names are written "<first> <second> ..." and the team is known by the
    second word. Single-word names fall back to that word; blank names are
    returned unchanged.
    """
    parts = full_name.split()
    if len(parts) >= 2:
        return parts[1]
    if parts:
        return parts[0]
    return full_name


def index_tickets_by_engineer(tickets: Iterable[Ticket]) -> dict[str, list[Ticket]]:
    """Group tickets under their normalized engineer name, preserving order."""
    index: dict[str, list[Ticket]] = {}
    for ticket in tickets:
        index.setdefault(normalize_name(ticket.engineer_name), []).append(ticket)
    return index


def _names_overlap(ticket_name: str, engineer_display: str) -> bool:
    first_word = ticket_name.split(" ")[0]
    return engineer_display in ticket_name or first_word in engineer_display


def match_tickets(
    engineer_name: str,
    index: Mapping[str, list[Ticket]],
    mode: MatchMode | str = MatchMode.HEURISTIC,
) -> list[Ticket]:
    """Return the tickets attributed to ``engineer_name``.

    The index is never mutated; a ticket appears at most once in the result.
    Tickets with a blank engineer name never match.
    """
    normalized = normalize_name(engineer_name)
    matched: list[Ticket] = list(index.get(normalized, [])) if normalized else []
    if MatchMode(mode) is MatchMode.EXACT:
        return matched

    engineer_display = display_name(engineer_name).lower()
    if not engineer_display:
        return matched

    seen = {id(ticket) for ticket in matched}
    for ticket_name, tickets in index.items():
        if not ticket_name or ticket_name == normalized:
            continue
        if not _names_overlap(ticket_name, engineer_display):
            continue
        for ticket in tickets:
            if id(ticket) not in seen:
                seen.add(id(ticket))
                matched.append(ticket)
    return matched


__all__ = [
    "MatchMode",
    "display_name",
    "index_tickets_by_engineer",
    "match_tickets",
    "normalize_name",
]
