"""Tests for the table row and list generators."""

import re
from datetime import date

import pytest

from event_mailer.domain.models import SportPlayers
from event_mailer.notifications.formatting import ValueFormatter
from event_mailer.notifications.generators import (
    accommodation_rows,
    attachment_list,
    coach_rows,
    player_rows,
    sports_cost_rows,
)
from event_mailer.notifications.models import Attachment, GeneratedFragment

SPORT_NAMES = {"Chess_Mixed": "Chess (Mixed)", "Football_Men": "Football (Men)"}


@pytest.fixture
def formatter():
    return ValueFormatter()


def cell_amounts(html):
    """Rupee amounts in the order they appear."""
    return [int(amount.replace(",", "")) for amount in re.findall(r"₹([\d,]+)", html)]


class TestCoachAndPlayerRows:
    """Test registration detail rows."""

    def test_coach_rows(self, formatter):
        rows = coach_rows({"name": "Ravi Kumar", "contactNumber": 9876543210}, formatter)

        assert isinstance(rows, GeneratedFragment)
        assert "Coach Information" in rows
        assert "<strong>Name</strong>" in rows
        assert "Ravi Kumar" in rows
        assert "<strong>Contact Number</strong>" in rows
        # Phone numbers are not digit-grouped
        assert "9876543210" in rows

    def test_player_rows_numbered_in_order(self, formatter):
        players = [
            {"name": "Asha", "dateOfBirth": date(2004, 3, 9)},
            {"name": "Bilal", "category1": "U21"},
        ]

        rows = player_rows(players, formatter)

        assert rows.index("Player 1 Information") < rows.index("Asha")
        assert rows.index("Asha") < rows.index("Player 2 Information")
        assert rows.index("Player 2 Information") < rows.index("Bilal")
        assert "March 9, 2004" in rows
        assert "Category 1" in rows

    def test_values_are_escaped(self, formatter):
        rows = player_rows([{"name": "<b>Eve</b>"}], formatter)

        assert "&lt;b&gt;Eve&lt;/b&gt;" in rows
        assert "<b>Eve</b>" not in rows

    def test_all_fields_are_shown(self, formatter):
        """Internal-looking fields are not filtered out."""
        rows = player_rows([{"name": "Asha", "ownerId": "u-42"}], formatter)

        assert "Owner Id" in rows
        assert "u-42" in rows

    def test_empty_input(self, formatter):
        assert coach_rows({}, formatter) == ""
        assert coach_rows(None, formatter) == ""
        assert player_rows([], formatter) == ""


class TestSportsCostRows:
    """Test fee breakdown rows."""

    def test_three_players_at_fixed_rate(self, formatter):
        """3 players at 800 each shows a line and a total of 2,400."""
        rows = sports_cost_rows(
            [SportPlayers(sport="Chess_Mixed", players=3)], 800, SPORT_NAMES.get, formatter
        )

        assert "Chess (Mixed)" in rows
        assert "3 Players" in rows
        assert "Total Registration Fee:" in rows
        assert cell_amounts(rows) == [2400, 2400]

    @pytest.mark.parametrize(
        "counts",
        [[1], [2, 5], [1, 1, 1, 1], [16, 3, 9]],
    )
    def test_total_equals_sum_of_lines(self, counts, formatter):
        records = [SportPlayers(sport=f"Sport_{i}", players=n) for i, n in enumerate(counts)]

        amounts = cell_amounts(sports_cost_rows(records, 800, formatter=formatter))

        *lines, total = amounts
        assert lines == [n * 800 for n in counts]
        assert total == sum(lines)

    def test_singular_player(self):
        rows = sports_cost_rows([SportPlayers(sport="Chess_Mixed", players=1)], 800)

        assert "1 Player<" in rows

    def test_unknown_sport_shows_key(self):
        rows = sports_cost_rows([SportPlayers(sport="Kabaddi", players=2)], 800)

        assert "Kabaddi" in rows

    def test_sport_names_are_escaped(self):
        rows = sports_cost_rows(
            [SportPlayers(sport="Chess_Mixed", players=2)], 800, lambda key: "Chess & Go"
        )

        assert "Chess &amp; Go" in rows

    def test_empty(self):
        assert sports_cost_rows([], 800) == ""


class TestAccommodationRows:
    def test_line_amount(self, formatter):
        rows = accommodation_rows(4, 1500, formatter)

        assert "<td" in rows and ">4</td>" in rows
        assert cell_amounts(rows) == [1500, 6000]

    @pytest.mark.parametrize("people, price", [(None, 1500), (4, None), (0, 1500)])
    def test_missing_values(self, people, price):
        assert accommodation_rows(people, price) == ""


class TestAttachmentList:
    def test_lists_regular_attachments_only(self):
        attachments = [
            Attachment(filename="payment-proof.png", content=b"png"),
            Attachment(filename="logo.png", content=b"png", content_id="logo"),
        ]

        items = attachment_list(attachments)

        assert items == "<li>payment-proof.png</li>\n"

    def test_empty(self):
        assert attachment_list([]) == ""
        assert attachment_list(None) == ""
