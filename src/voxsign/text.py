"""Pixel text rasterization with a 5x7 block font.

:func:`rasterize_text` turns a string into one :class:`PixelBitmap` per line,
wrapping words so that no line exceeds ``max_width`` pixels (a single glyph
wider than ``max_width`` still gets a line of its own).

Example usage:

    from voxsign.text import rasterize_text

    raster = rasterize_text("GEARSTED PATH", max_width=44)
    for line in raster.lines:
        print("\\n".join(line.to_rows()))
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Iterator, List, Tuple

from voxsign.params import PixelBitmap

CHAR_WIDTH = 5
CHAR_HEIGHT = 7
LETTER_SPACING = 1
LINE_SPACING = 1
SPACE_WIDTH = 3

# Rows run top to bottom; '#' marks an occupied pixel.
PIXEL_FONT = {
    'A': (".###.", "#...#", "#...#", "#####", "#...#", "#...#", "#...#"),
    'B': ("####.", "#...#", "#...#", "####.", "#...#", "#...#", "####."),
    'C': (".####", "#....", "#....", "#....", "#....", "#....", ".####"),
    'D': ("####.", "#...#", "#...#", "#...#", "#...#", "#...#", "####."),
    'E': ("#####", "#....", "#....", "####.", "#....", "#....", "#####"),
    'F': ("#####", "#....", "#....", "####.", "#....", "#....", "#...."),
    'G': (".####", "#....", "#....", "#.###", "#...#", "#...#", ".###."),
    'H': ("#...#", "#...#", "#...#", "#####", "#...#", "#...#", "#...#"),
    'I': ("#####", "..#..", "..#..", "..#..", "..#..", "..#..", "#####"),
    'J': ("#####", "...#.", "...#.", "...#.", "...#.", "#..#.", ".##.."),
    'K': ("#...#", "#..#.", "#.#..", "##...", "#.#..", "#..#.", "#...#"),
    'L': ("#....", "#....", "#....", "#....", "#....", "#....", "#####"),
    'M': ("#...#", "##.##", "#.#.#", "#.#.#", "#...#", "#...#", "#...#"),
    'N': ("#...#", "##..#", "#.#.#", "#..##", "#...#", "#...#", "#...#"),
    'O': (".###.", "#...#", "#...#", "#...#", "#...#", "#...#", ".###."),
    'P': ("####.", "#...#", "#...#", "####.", "#....", "#....", "#...."),
    'Q': (".###.", "#...#", "#...#", "#...#", "#.#.#", "#..#.", ".##.#"),
    'R': ("####.", "#...#", "#...#", "####.", "#.#..", "#..#.", "#...#"),
    'S': (".####", "#....", "#....", ".###.", "....#", "....#", "####."),
    'T': ("#####", "..#..", "..#..", "..#..", "..#..", "..#..", "..#.."),
    'U': ("#...#", "#...#", "#...#", "#...#", "#...#", "#...#", ".###."),
    'V': ("#...#", "#...#", "#...#", "#...#", "#...#", ".#.#.", "..#.."),
    'W': ("#...#", "#...#", "#...#", "#.#.#", "#.#.#", "##.##", "#...#"),
    'X': ("#...#", "#...#", ".#.#.", "..#..", ".#.#.", "#...#", "#...#"),
    'Y': ("#...#", "#...#", ".#.#.", "..#..", "..#..", "..#..", "..#.."),
    'Z': ("#####", "....#", "...#.", "..#..", ".#...", "#....", "#####"),
    '0': (".###.", "#...#", "#..##", "#.#.#", "##..#", "#...#", ".###."),
    '1': ("..#..", ".##..", "..#..", "..#..", "..#..", "..#..", ".###."),
    '2': (".###.", "#...#", "....#", "...#.", "..#..", ".#...", "#####"),
    '3': ("####.", "....#", "....#", ".###.", "....#", "....#", "####."),
    '4': ("...#.", "..##.", ".#.#.", "#..#.", "#####", "...#.", "...#."),
    '5': ("#####", "#....", "####.", "....#", "....#", "#...#", ".###."),
    '6': (".###.", "#....", "#....", "####.", "#...#", "#...#", ".###."),
    '7': ("#####", "....#", "...#.", "..#..", "..#..", "..#..", "..#.."),
    '8': (".###.", "#...#", "#...#", ".###.", "#...#", "#...#", ".###."),
    '9': (".###.", "#...#", "#...#", ".####", "....#", "....#", ".###."),
    '-': (".....", ".....", ".....", ".###.", ".....", ".....", "....."),
    '_': (".....", ".....", ".....", ".....", ".....", ".....", "#####"),
    '.': (".....", ".....", ".....", ".....", ".....", ".....", "..#.."),
    ',': (".....", ".....", ".....", ".....", ".....", "..#..", ".#..."),
    ':': (".....", "..#..", ".....", ".....", ".....", "..#..", "....."),
    '/': ("....#", "....#", "...#.", "..#..", ".#...", "#....", "#...."),
    '(': ("...#.", "..#..", ".#...", ".#...", ".#...", "..#..", "...#."),
    ')': (".#...", "..#..", "...#.", "...#.", "...#.", "..#..", ".#..."),
    '!': ("..#..", "..#..", "..#..", "..#..", "..#..", ".....", "..#.."),
    '?': (".###.", "#...#", "....#", "...#.", "..#..", ".....", "..#.."),
    "'": ("..#..", "..#..", ".....", ".....", ".....", ".....", "....."),
    '+': (".....", "..#..", "..#..", "#####", "..#..", "..#..", "....."),
    '&': (".##..", "#..#.", "#.#..", ".#...", "#.#.#", "#..#.", ".##.#"),
}

# Drawn for characters the font does not cover.
PLACEHOLDER_GLYPH = (".....", ".###.", ".###.", ".###.", ".###.", ".###.", ".....")


@dataclass(frozen=True)
class TextRaster:
    """Rasterized text: one bitmap per line plus the stacked height.

    ``total_height`` counts :data:`LINE_SPACING` between consecutive lines.
    """

    lines: Tuple[PixelBitmap, ...]
    total_height: int


TextRasterizer = Callable[[str, int], TextRaster]


@lru_cache(maxsize=None)
def glyph(char: str) -> PixelBitmap:
    """Return the bitmap for ``char``; space is a blank :data:`SPACE_WIDTH` cell."""
    if char == ' ':
        return PixelBitmap.blank(SPACE_WIDTH, CHAR_HEIGHT)
    rows = PIXEL_FONT.get(char.upper(), PLACEHOLDER_GLYPH)
    return PixelBitmap.from_rows(rows)


def get_supported_characters() -> str:
    return ''.join(sorted(PIXEL_FONT)) + ' '


def text_width(text: str) -> int:
    """Pixel width of ``text`` on a single line."""
    if not text:
        return 0
    return sum(glyph(ch).width for ch in text) + LETTER_SPACING * (len(text) - 1)


def _split_word(word: str, max_width: int) -> Iterator[str]:
    if text_width(word) <= max_width:
        yield word
        return
    chunk = ""
    for ch in word:
        if chunk and text_width(chunk + ch) > max_width:
            yield chunk
            chunk = ""
        chunk += ch
    if chunk:
        yield chunk


def wrap_text(text: str, max_width: int) -> List[str]:
    """Greedy word wrap; newlines always start a new line, blank lines are dropped."""
    lines: List[str] = []
    for paragraph in text.splitlines():
        current = ""
        for word in paragraph.split():
            for piece in _split_word(word, max_width):
                candidate = f"{current} {piece}" if current else piece
                if current and text_width(candidate) > max_width:
                    lines.append(current)
                    current = piece
                else:
                    current = candidate
        if current:
            lines.append(current)
    return lines


def render_line(line: str) -> PixelBitmap:
    width = text_width(line)
    pixels = [False] * (width * CHAR_HEIGHT)
    cursor = 0
    for ch in line:
        g = glyph(ch)
        for gx, gy in g.occupied():
            pixels[gy * width + cursor + gx] = True
        cursor += g.width + LETTER_SPACING
    return PixelBitmap(width=width, height=CHAR_HEIGHT, pixels=tuple(pixels))


def rasterize_text(text: str, max_width: int) -> TextRaster:
    """Rasterize ``text`` into wrapped lines no wider than ``max_width`` where possible."""
    lines = tuple(render_line(line) for line in wrap_text(text, max_width))
    if not lines:
        return TextRaster(lines=(), total_height=0)
    total = sum(line.height for line in lines) + LINE_SPACING * (len(lines) - 1)
    return TextRaster(lines=lines, total_height=total)
