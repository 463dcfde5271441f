"""Tests for render/sections.py"""

from slowfetch.colors import Palette
from slowfetch.config import ColorConfig
from slowfetch.render.sections import (
    Section,
    format_line,
    format_sections,
    sections_content_width,
    sections_height,
)
from slowfetch.render.width import strip_ansi, visible_width


class TestSection:
    """Tests for Section dataclass."""

    def test_of_keeps_order(self):
        """Test rows keep insertion order."""
        section = Section.of("Core", [("OS", "Linux"), ("Kernel", "6.9")])
        assert section.lines == (("OS", "Linux"), ("Kernel", "6.9"))

    def test_default_lines(self):
        """Test a section without rows."""
        assert Section("Empty").lines == ()


class TestFormatLine:
    """Tests for format_line."""

    def test_plain(self):
        """Test plain key/value row."""
        assert format_line("OS", "Linux") == "OS: Linux"

    def test_colored(self):
        """Test key and value are colored independently."""
        line = format_line("OS", "Linux", Palette.from_config(ColorConfig()))
        assert strip_ansi(line) == "OS: Linux"
        assert line.count("\x1b[0m") == 2


class TestFormatSections:
    """Tests for format_sections."""

    def test_single_section(self, core_section):
        """Test one section renders as one box."""
        rows = format_sections([core_section])
        assert rows == [
            "╭── Core ───╮",
            "│ OS: Linux │",
            "╰───────────╯",
        ]
        assert {visible_width(row) for row in rows} == {13}

    def test_uniform_width(self, sample_sections):
        """Test all boxes share the widest section's width."""
        rows = format_sections(sample_sections)
        widths = {visible_width(row) for row in rows}
        assert widths == {sections_content_width(sample_sections) + 4}
        assert len(rows) == sections_height(sample_sections)

    def test_order_and_titles(self, sample_sections):
        """Test boxes appear in input order with titles in the top border."""
        rows = format_sections(sample_sections)
        assert " Core " in rows[0]
        assert " Hardware " in rows[5]

    def test_shared_width(self, core_section):
        """Test forced width larger than content."""
        rows = format_sections([core_section], shared_width=20)
        assert {visible_width(row) for row in rows} == {24}

    def test_shared_width_smaller_than_content(self, core_section):
        """Test content width wins over a smaller forced width."""
        rows = format_sections([core_section], shared_width=2)
        assert {visible_width(row) for row in rows} == {13}

    def test_left_aligned(self):
        """Test shorter rows are padded on the right."""
        rows = format_sections([Section.of("S", [("A", "1"), ("Long", "value")])])
        assert rows[1] == "│ A: 1        │"
        assert rows[2] == "│ Long: value │"

    def test_section_without_rows(self):
        """Test a section with zero rows renders borders only."""
        rows = format_sections([Section("Lonely")])
        assert rows == ["╭ Lonely ╮", "╰────────╯"]

    def test_no_sections(self):
        """Test empty input gives no rows."""
        assert format_sections([]) == []

    def test_palette_keeps_width(self, sample_sections):
        """Test colors do not change geometry."""
        palette = Palette.from_config(ColorConfig())
        plain = format_sections(sample_sections)
        colored = format_sections(sample_sections, palette=palette)
        assert [strip_ansi(row) for row in colored] == plain


class TestSectionMetrics:
    """Tests for sections_content_width / sections_height."""

    def test_content_width_uses_title(self):
        """Test long title counts toward width."""
        assert sections_content_width([Section.of("A very long title", [("a", "b")])]) == 17

    def test_content_width_ignores_escapes(self):
        """Test colored values are measured by visible width."""
        section = Section.of("T", [("\x1b[1mKey\x1b[0m", "\x1b[32mval\x1b[0m")])
        assert sections_content_width([section]) == len("Key: val")

    def test_empty(self):
        """Test no sections."""
        assert sections_content_width([]) == 0
        assert sections_height([]) == 0

    def test_height(self, sample_sections):
        """Test height is rows + borders per section."""
        assert sections_height(sample_sections) == (3 + 2) + (2 + 2)
