# framebuf.py

# Copyright (C) 2025 The Chip8Py authors. License: GNU GPL Version 3
# See README.md and LICENSE in the Chip8Py distribution.

# This file is part of Chip8Py. Chip8Py is free software: you can
# redistribute it and/or modify it under the terms of the GNU General
# Public License as published by the Free Software Foundation, either
# version 3 of the License, or (at your option) any later version.
# Chip8Py is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details. You should have received
# a copy of the GNU General Public License along with Chip8Py. If
# not, see <https://www.gnu.org/licenses/>.

# framebuf.py defines access to the display bitmap, a packed
# monochrome frame buffer of 64x32 pixels held in es.display.

import architecture as arch

# -------------------------------------------------------------
# Memory map of the frame buffer
# -------------------------------------------------------------

# The buffer is row-major with one bit per pixel, 8 bytes per row.
# Pixel (row, col) is in byte row*8 + col//8. Within the byte the
# leftmost pixel is the most significant bit, which is the order
# sprite bytes are drawn in:
#
#   col     0 1 2 3 4 5 6 7
#   bit     7 6 5 4 3 2 1 0

def pixel_location(row, col):
    a = row * arch.DISPLAY_BYTES_PER_ROW + col // 8
    i = arch.column_bit(col % 8)
    return a, i

# -------------------------------------------------------------
# Pixel access
# -------------------------------------------------------------

# frame_pixel reads from any buffer in this layout, such as a snapshot
# handed to a renderer

def frame_pixel(frame, row, col):
    a, i = pixel_location(row, col)
    return arch.get_bit_in_byte_le(frame[a], i)

def read_pixel(es, row, col):
    return frame_pixel(es.display, row, col)

def write_pixel(es, row, col, b):
    a, i = pixel_location(row, col)
    es.display[a] = arch.put_bit_in_byte_le(es.display[a], i, b)

# Invert one pixel and return its previous value

def flip_pixel(es, row, col):
    a, i = pixel_location(row, col)
    old = arch.get_bit_in_byte_le(es.display[a], i)
    es.display[a] ^= arch.mask_to_set_bit_le(i)
    return old

def clear_display(es):
    for a in range(arch.DISPLAY_SIZE_BYTES):
        es.display[a] = 0

# -------------------------------------------------------------
# Sprites
# -------------------------------------------------------------

# A sprite is a sequence of bytes, one per row, 8 pixels wide. Each set
# bit is XORed onto the display at (x, y) plus its offset; coordinates
# that fall off an edge wrap around to the opposite edge. The result is
# 1 if any pixel that was on is turned off, 0 otherwise.

def draw_sprite(es, x, y, rows):
    collision = 0
    for r, bits in enumerate(rows):
        row = (y + r) % arch.DISPLAY_HEIGHT
        for k in range(arch.SPRITE_WIDTH):
            if arch.get_bit_in_byte_le(bits, arch.column_bit(k)):
                col = (x + k) % arch.DISPLAY_WIDTH
                if flip_pixel(es, row, col):
                    collision = 1
    return collision

# -------------------------------------------------------------
# Reading the whole buffer
# -------------------------------------------------------------

def display_rows(es):
    """Return the display as a list of rows, each a list of 0/1 pixels."""
    return [[read_pixel(es, row, col) for col in range(arch.DISPLAY_WIDTH)]
            for row in range(arch.DISPLAY_HEIGHT)]

def snapshot(es):
    return bytes(es.display)

def show_display(es, on="#", off="."):
    xs = []
    for pixels in display_rows(es):
        xs.append("".join(on if p else off for p in pixels))
    return "\n".join(xs)
