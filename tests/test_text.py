"""Tests for the block-font text rasterizer."""

import pytest

from voxsign.text import (
    CHAR_HEIGHT,
    CHAR_WIDTH,
    PIXEL_FONT,
    PLACEHOLDER_GLYPH,
    SPACE_WIDTH,
    get_supported_characters,
    glyph,
    rasterize_text,
    render_line,
    text_width,
    wrap_text,
)


class TestPixelFont:
    """Test the PIXEL_FONT table."""

    def test_font_has_letters_and_digits(self):
        for c in 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789':
            assert c in PIXEL_FONT, f"Missing glyph {c}"

    def test_glyph_rows_have_fixed_size(self):
        for char, rows in PIXEL_FONT.items():
            assert len(rows) == CHAR_HEIGHT, f"Bad height for {char}"
            for row in rows:
                assert len(row) == CHAR_WIDTH, f"Bad row width for {char}: {row}"
                assert set(row) <= {'#', '.'}

    def test_every_glyph_draws_something(self):
        for char in PIXEL_FONT:
            assert any(glyph(char).pixels), f"Glyph {char} is blank"

    def test_space_is_blank_and_narrow(self):
        space = glyph(' ')
        assert space.width == SPACE_WIDTH
        assert space.height == CHAR_HEIGHT
        assert not any(space.pixels)

    def test_lowercase_uses_uppercase_glyph(self):
        assert glyph('a') == glyph('A')

    def test_unknown_character_uses_placeholder(self):
        assert glyph('~').to_rows() == list(PLACEHOLDER_GLYPH)

    def test_supported_characters(self):
        supported = get_supported_characters()
        assert 'A' in supported and '9' in supported and ' ' in supported


class TestTextWidth:

    def test_empty(self):
        assert text_width('') == 0

    def test_single_glyph(self):
        assert text_width('H') == 5

    def test_letter_spacing(self):
        assert text_width('HI') == 11
        assert text_width('PATH') == 23

    def test_space(self):
        # A, B, space, C, D plus four gaps
        assert text_width('AB CD') == 27


class TestWrap:

    def test_fits_on_one_line(self):
        assert wrap_text('HI THERE', 100) == ['HI THERE']

    def test_breaks_between_words(self):
        assert wrap_text('AB CD', 11) == ['AB', 'CD']

    def test_newline_forces_break(self):
        assert wrap_text('AB\nCD', 100) == ['AB', 'CD']

    def test_blank_lines_are_dropped(self):
        assert wrap_text('AB\n\n  \nCD', 100) == ['AB', 'CD']

    def test_long_word_is_split(self):
        # Seven glyphs (41 px) fit in 44 px, eight (47 px) do not.
        assert wrap_text('GEARSTED PATH', 44) == ['GEARSTE', 'D PATH']

    def test_lines_respect_max_width(self):
        for line in wrap_text('THE QUICK BROWN FOX JUMPS OVER THE LAZY DOG', 30):
            assert text_width(line) <= 30

    def test_narrow_width_still_makes_progress(self):
        assert wrap_text('ABC', 2) == ['A', 'B', 'C']


def test_render_line_places_glyphs_with_spacing():
    line = render_line('HI')
    assert line.width == 11
    assert line.height == CHAR_HEIGHT
    rows = line.to_rows()
    assert rows[0] == '#...#.#####'
    assert rows[3] == '#####...#..'
    assert rows[6] == '#...#.#####'


class TestRasterizeText:

    def test_blank_text(self):
        raster = rasterize_text('   ', 40)
        assert raster.lines == ()
        assert raster.total_height == 0

    def test_single_line(self):
        raster = rasterize_text('HI', 44)
        assert len(raster.lines) == 1
        assert raster.lines[0].width == 11
        assert raster.total_height == 7

    def test_total_height_counts_line_spacing(self):
        raster = rasterize_text('AB CD', 11)
        assert len(raster.lines) == 2
        assert raster.total_height == 7 + 1 + 7

    @pytest.mark.parametrize("max_width", [12, 30, 60])
    def test_lines_bounded(self, max_width):
        raster = rasterize_text('GEARSTED PATH TO THE MINES', max_width)
        assert all(line.width <= max_width for line in raster.lines)
