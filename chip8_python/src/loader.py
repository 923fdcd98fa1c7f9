# loader.py

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

# ----------------------------------------------------------------------
# loader.py reads program images and boots them: the machine is reset,
# the font is installed in the interpreter area, and the image is
# copied to the load address.
# ----------------------------------------------------------------------

import common
import architecture as arch
import arithmetic as arith
import emulator as em
import state as st

# ----------------------------------------------------------------------
# Program images
# ----------------------------------------------------------------------

# A program image is raw bytes with no header, loaded at 0x200. The
# largest image fills memory from the load address to the end.

def max_image_size(address=arch.PROGRAM_START_ADDRESS):
    return arch.MEMORY_SIZE - address

def read_image(path):
    with open(path, "rb") as f:
        image = f.read()
    common.mode.devlog(f"read_image {path}: {len(image)} bytes")
    return image

def words_to_image(words):
    """Pack 16-bit instruction words into a big-endian byte image."""
    image = bytearray()
    for w in words:
        w = arith.limit16(w)
        image.append(w >> 8)
        image.append(w & 0xFF)
    return bytes(image)

# ----------------------------------------------------------------------
# Booting
# ----------------------------------------------------------------------

def install_font(es):
    a = arch.FONT_START_ADDRESS
    es.memory[a:a + len(arch.font_sprites)] = bytes(arch.font_sprites)

def check_image(image, address=arch.PROGRAM_START_ADDRESS):
    if address < 0 or len(image) > max_image_size(address):
        raise ValueError(f"program image of {len(image)} bytes does not fit"
                         f" at {arith.word_to_hex4(address)}"
                         f" (limit {max(0, max_image_size(address))} bytes)")

def load_image(es, image, address=arch.PROGRAM_START_ADDRESS):
    check_image(image, address)
    es.memory[address:address + len(image)] = image

def boot(es, image, address=arch.PROGRAM_START_ADDRESS):
    """Reset the machine, install the font, load image, and set pc.

    Raises ValueError, with es untouched, if the image does not fit.
    """
    check_image(image, address)
    em.proc_reset(es)
    install_font(es)
    load_image(es, image, address)
    es.pc = address
    es.cur_instr_addr = address
    es.status = st.STATUS_READY
    common.mode.devlog(f"boot: {len(image)} bytes at {arith.word_to_hex4(address)}")
