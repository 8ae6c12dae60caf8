"""Tests for the placeholder engine.

Covers:
- Scalar substitution and escaping
- Conditional blocks with and without else branches
- Defaults for missing or blank values
- Malformed template detection
- Single-pass substitution (values are never re-scanned)
"""

from datetime import date

import pytest
from markupsafe import Markup

from event_mailer.notifications.formatting import Money
from event_mailer.notifications.models import GeneratedFragment, MalformedTemplate
from event_mailer.notifications.placeholders import (
    Conditional,
    Literal,
    PlaceholderEngine,
    Scalar,
    is_truthy,
    parse_template,
)

UNIVERSITY_BLOCK = (
    "{{#if universityName}}<p>{{universityName}}</p>"
    "{{else}}<p>Not provided yet</p>{{/if}}"
)


@pytest.fixture
def engine():
    return PlaceholderEngine()


class TestParseTemplate:
    """Test the node tree produced by the parser."""

    def test_literal_and_scalars(self):
        nodes = parse_template("Hi {{ name }}, welcome to {{eventName}}!")

        assert nodes == (
            Literal("Hi "),
            Scalar("name"),
            Literal(", welcome to "),
            Scalar("eventName"),
            Literal("!"),
        )

    def test_conditional_with_else(self):
        nodes = parse_template("{{#if a}}yes {{x}}{{else}}no{{/if}}")

        assert nodes == (
            Conditional("a", (Literal("yes "), Scalar("x")), (Literal("no"),)),
        )

    def test_text_without_markers(self):
        assert parse_template("<p>plain</p>") == (Literal("<p>plain</p>"),)

    def test_unknown_brace_syntax_is_literal(self):
        """Only recognised markers are parsed; anything else stays text."""
        assert parse_template("{{ not a marker }}") == (Literal("{{ not a marker }}"),)

    @pytest.mark.parametrize(
        "raw, message",
        [
            ("{{#if}}x{{/if}}", "requires a single condition name"),
            ("{{#if a b}}x{{/if}}", "requires a single condition name"),
            ("{{#if a}}{{#if b}}x{{/if}}{{/if}}", "cannot be nested"),
            ("x{{else}}y", "outside of a conditional block"),
            ("{{#if a}}x{{else}}y{{else}}z{{/if}}", "Duplicate"),
            ("x{{/if}}", "without a matching"),
            ("{{#if a}}never closed", "never closed"),
        ],
    )
    def test_malformed_templates(self, raw, message):
        with pytest.raises(MalformedTemplate, match=message):
            parse_template(raw)

    def test_malformed_template_reports_line(self):
        with pytest.raises(MalformedTemplate) as exc_info:
            parse_template("<html>\n<body>\n{{#if hasLogo}}\n<img>\n</body>")

        assert exc_info.value.line == 3
        assert "(line 3)" in str(exc_info.value)


class TestRender:
    """Test rendering against a context."""

    def test_scalar_substitution(self, engine):
        assert engine.render("<p>{{name}}</p>", {"name": "Ada"}) == "<p>Ada</p>"

    def test_missing_scalar_renders_empty(self, engine):
        assert engine.render("<p>{{name}}</p>", {}) == "<p></p>"

    def test_blank_value_takes_else_branch(self, engine):
        """A blank university renders the fallback paragraph."""
        context = {"name": "Ada", "universityName": ""}

        assert engine.render(UNIVERSITY_BLOCK, context) == "<p>Not provided yet</p>"

    def test_present_value_takes_true_branch(self, engine):
        context = {"universityName": "Plaksha"}

        assert engine.render(UNIVERSITY_BLOCK, context) == "<p>Plaksha</p>"

    def test_missing_condition_key_never_raises(self, engine):
        """Unknown condition keys are falsy; a block without else disappears."""
        assert engine.render("a{{#if ghost}}b{{/if}}c", {}) == "ac"
        assert engine.render("{{#if ghost}}b{{else}}d{{/if}}", {}) == "d"

    def test_adjacent_blocks_sharing_a_name(self, engine):
        raw = "{{#if flag}}A{{/if}}{{#if flag}}B{{else}}C{{/if}}"

        assert engine.render(raw, {"flag": True}) == "AB"
        assert engine.render(raw, {"flag": False}) == "C"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, False),
            (False, False),
            ("", False),
            ("   ", False),
            ([], False),
            (0, False),
            (Markup(""), False),
            (Money(0), False),
            ("x", True),
            (True, True),
            (1, True),
            (GeneratedFragment("<tr></tr>"), True),
        ],
    )
    def test_truthiness(self, value, expected):
        assert is_truthy(value) is expected

    def test_values_are_escaped(self, engine):
        rendered = engine.render("<p>{{name}}</p>", {"name": "<script>alert(1)</script>"})

        assert rendered == "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>"

    def test_autoescape_can_be_disabled_per_call(self, engine):
        rendered = engine.render("{{name}} & co", {"name": "Tom & Jerry"}, autoescape=False)

        assert rendered == "Tom & Jerry & co"

    def test_generated_fragments_are_inserted_verbatim(self, engine):
        fragment = GeneratedFragment("<tr><td>Player 1</td></tr>")

        rendered = engine.render("<table>{{rows}}</table>", {"rows": fragment})

        assert rendered == "<table><tr><td>Player 1</td></tr></table>"

    def test_values_are_not_rescanned(self, engine):
        """A value that looks like a placeholder is emitted as text."""
        rendered = engine.render("{{note}}", {"note": "{{secret}}", "secret": "leaked"})

        assert rendered == "{{secret}}"

    def test_values_are_formatted_by_type(self, engine):
        context = {"amount": Money(2400), "paid": date(2026, 10, 19), "types": ["A", "B"]}

        rendered = engine.render("{{amount}} on {{paid}} for {{types}}", context)

        assert rendered == "₹2,400 on October 19, 2026 for A, B"

    def test_defaults_fill_missing_and_blank_scalars(self, engine):
        defaults = {"name": "there", "universityName": "Not provided yet"}

        assert engine.render("Hi {{name}}", {}, defaults=defaults) == "Hi there"
        assert engine.render("Hi {{name}}", {"name": "  "}, defaults=defaults) == "Hi there"
        assert engine.render("Hi {{name}}", {"name": "Ada"}, defaults=defaults) == "Hi Ada"

    def test_defaults_do_not_affect_conditions(self, engine):
        defaults = {"universityName": "Default U"}

        rendered = engine.render(UNIVERSITY_BLOCK, {"universityName": ""}, defaults=defaults)

        assert rendered == "<p>Not provided yet</p>"

    def test_rerender_is_noop(self, engine):
        """Rendering already-rendered output with the same context changes nothing."""
        context = {"name": "Ada", "universityName": "", "rows": GeneratedFragment("<tr></tr>")}
        raw = "<h1>Hi {{name}}</h1>" + UNIVERSITY_BLOCK + "<table>{{rows}}</table>"

        once = engine.render(raw, context)

        assert engine.render(once, context) == once

    def test_malformed_template_raises_from_render(self, engine):
        with pytest.raises(MalformedTemplate):
            engine.render("{{#if a}}open", {"a": True})
