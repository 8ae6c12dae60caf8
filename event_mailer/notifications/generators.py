"""Content generators for the dynamic parts of notification bodies.

Each generator turns caller-supplied records into a GeneratedFragment of
HTML table rows (or list items), rendered from the autoescaping partials in
``email_templates/rows``. Records are emitted in the order given. An empty
or missing record set yields an empty fragment, which conditional blocks
treat as falsy.

Field labels are derived from raw field names with format_label(); no field
is filtered out here. Callers that must hide internal fields should drop
them before calling.
"""

from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .formatting import ValueFormatter, format_label
from .models import Attachment, GeneratedFragment
from .template_store import get_fragment_renderer


def _cell_value(value: Any, formatter: ValueFormatter) -> str:
    if isinstance(value, date):
        return formatter.long_date(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Phone and jersey numbers must not be digit-grouped
        return str(value)
    return formatter.format(value)


def _section(
    title: str, fields: Mapping[str, Any], formatter: ValueFormatter
) -> Dict[str, Any]:
    rows: List[Tuple[str, str]] = [
        (format_label(key), _cell_value(value, formatter)) for key, value in fields.items()
    ]
    return {"title": title, "fields": rows}


def coach_rows(
    coach_fields: Optional[Mapping[str, Any]], formatter: Optional[ValueFormatter] = None
) -> GeneratedFragment:
    """Rows for the coach section of a registration confirmation."""
    if not coach_fields:
        return GeneratedFragment("")
    formatter = formatter or ValueFormatter()
    return get_fragment_renderer().render(
        "detail_sections.html.j2",
        sections=[_section("Coach Information", coach_fields, formatter)],
    )


def player_rows(
    players: Optional[Sequence[Mapping[str, Any]]], formatter: Optional[ValueFormatter] = None
) -> GeneratedFragment:
    """One header row plus one row per field, for each player."""
    if not players:
        return GeneratedFragment("")
    formatter = formatter or ValueFormatter()
    sections = [
        _section(f"Player {index} Information", player, formatter)
        for index, player in enumerate(players, 1)
    ]
    return get_fragment_renderer().render("detail_sections.html.j2", sections=sections)


def sports_cost_rows(
    sports_players: Optional[Iterable[Any]],
    rate: int,
    sport_name: Callable[[str], str] = str,
    formatter: Optional[ValueFormatter] = None,
) -> GeneratedFragment:
    """Fee breakdown per sport with a total row.

    Each record needs ``sport`` and ``players`` attributes. The total is the
    sum of the line amounts shown above it.

    Args:
        sports_players: Records of players entered per sport
        rate: Fee per player
        sport_name: Maps a sport key to its display name
        formatter: Currency formatter
    """
    records = list(sports_players or [])
    if not records:
        return GeneratedFragment("")
    formatter = formatter or ValueFormatter()

    lines = []
    total = 0
    for record in records:
        line_amount = record.players * rate
        total += line_amount
        lines.append(
            {
                "sport": sport_name(record.sport),
                "players": record.players,
                "amount": formatter.currency(line_amount),
            }
        )

    return get_fragment_renderer().render(
        "sports_cost.html.j2", lines=lines, total=formatter.currency(total)
    )


def accommodation_rows(
    people: Optional[int], price: Optional[int], formatter: Optional[ValueFormatter] = None
) -> GeneratedFragment:
    """Single accommodation line; empty unless both people and price are set."""
    if not people or not price:
        return GeneratedFragment("")
    formatter = formatter or ValueFormatter()
    return get_fragment_renderer().render(
        "accommodation.html.j2",
        people=people,
        price=formatter.currency(price),
        amount=formatter.currency(people * price),
    )


def attachment_list(attachments: Optional[Iterable[Attachment]]) -> GeneratedFragment:
    """List items naming the non-inline attachments of a message."""
    names = [a.filename for a in attachments or () if not a.is_inline]
    if not names:
        return GeneratedFragment("")
    return get_fragment_renderer().render("attachment_list.html.j2", names=names)
