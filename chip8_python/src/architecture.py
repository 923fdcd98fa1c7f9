# architecture.py

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

# --------------------------------------------------------------------
# architecture.py defines global constants and tables specifying
# memory layout, instruction tags, opcode tables, the built-in font,
# and the keypad layout
# --------------------------------------------------------------------

# --------------------------------------------------------------------
# Bit indexing
# --------------------------------------------------------------------

# Bits in a byte are indexed from the least significant end: bit 0 is
# the rightmost bit and bit 7 the leftmost. Sprite rows and display
# bytes are drawn left to right starting from bit 7, so the functions
# that work in screen order take a column offset and convert it.

def get_bit_in_byte_le(w, i):
    return (w >> i) & 0x01

def put_bit_in_byte_le(x, i, b):
    return x & mask_to_clear_bit_le(i) if b == 0 else x | mask_to_set_bit_le(i)

def mask_to_clear_bit_le(i):
    return ~(1 << i) & 0xFF

def mask_to_set_bit_le(i):
    return (1 << i) & 0xFF

# Bit index of the pixel at column offset k (0..7) within a byte

def column_bit(k):
    return 7 - k

# --------------------------------------------------------------------
# Architecture constants
# --------------------------------------------------------------------

MEMORY_SIZE = 4096
PROGRAM_START_ADDRESS = 0x200

N_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_SIZE = 16
N_KEYS = 16

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_BYTES_PER_ROW = DISPLAY_WIDTH // 8
DISPLAY_SIZE_BYTES = DISPLAY_HEIGHT * DISPLAY_WIDTH // 8

SPRITE_WIDTH = 8

# --------------------------------------------------------------------
# Built-in font
# --------------------------------------------------------------------

# Sprites for the hexadecimal digits 0-f, 4 pixels wide and 5 rows
# high, stored in the interpreter area. Fx29 points I at a digit.

FONT_START_ADDRESS = 0x050
FONT_CHAR_SIZE = 5

font_sprites = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # a
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # b
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # c
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # d
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # e
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # f
]

def font_address(digit):
    return FONT_START_ADDRESS + FONT_CHAR_SIZE * (digit & 0x0F)

# --------------------------------------------------------------------
# Instruction fields
# --------------------------------------------------------------------

# An instruction word is split into nibbles op x y n, where op selects
# the family. kk is the low byte and nnn the low 12 bits.
#
#   op   x    y    n
#   |----|----|----|----|
#             |---kk----|
#        |------nnn-----|

def field_op(w):
    return (w >> 12) & 0x0F

def field_x(w):
    return (w >> 8) & 0x0F

def field_y(w):
    return (w >> 4) & 0x0F

def field_n(w):
    return w & 0x000F

def field_kk(w):
    return w & 0x00FF

def field_nnn(w):
    return w & 0x0FFF

# --------------------------------------------------------------------
# Instruction tags
# --------------------------------------------------------------------

# Decoding an instruction word yields one of these tags. Every tag has
# exactly one handler in the emulator's dispatch table; words that
# decode to no tag are reported as unrecognized instructions.

iSYS = "SYS"            # 0nnn
iCLS = "CLS"            # 00e0
iRET = "RET"            # 00ee
iJP = "JP"              # 1nnn
iCALL = "CALL"          # 2nnn
iSE_BYTE = "SE_BYTE"    # 3xkk
iSNE_BYTE = "SNE_BYTE"  # 4xkk
iSE_REG = "SE_REG"      # 5xy0
iLD_BYTE = "LD_BYTE"    # 6xkk
iADD_BYTE = "ADD_BYTE"  # 7xkk
iLD_REG = "LD_REG"      # 8xy0
iOR = "OR"              # 8xy1
iAND = "AND"            # 8xy2
iXOR = "XOR"            # 8xy3
iADD_REG = "ADD_REG"    # 8xy4
iSUB = "SUB"            # 8xy5
iSHR = "SHR"            # 8xy6
iSUBN = "SUBN"          # 8xy7
iSHL = "SHL"            # 8xye
iSNE_REG = "SNE_REG"    # 9xy0
iLD_I = "LD_I"          # annn
iJP_V0 = "JP_V0"        # bnnn
iRND = "RND"            # cxkk
iDRW = "DRW"            # dxyn
iSKP = "SKP"            # ex9e
iSKNP = "SKNP"          # exa1
iLD_VX_DT = "LD_VX_DT"  # fx07
iLD_VX_K = "LD_VX_K"    # fx0a
iLD_DT_VX = "LD_DT_VX"  # fx15
iLD_ST_VX = "LD_ST_VX"  # fx18
iADD_I = "ADD_I"        # fx1e
iLD_F = "LD_F"          # fx29
iLD_B = "LD_B"          # fx33
iLD_MEM = "LD_MEM"      # fx55
iLD_REGS = "LD_REGS"    # fx65

instruction_tags = [
    iSYS, iCLS, iRET, iJP, iCALL,
    iSE_BYTE, iSNE_BYTE, iSE_REG, iLD_BYTE, iADD_BYTE,
    iLD_REG, iOR, iAND, iXOR, iADD_REG, iSUB, iSHR, iSUBN, iSHL,
    iSNE_REG, iLD_I, iJP_V0, iRND, iDRW, iSKP, iSKNP,
    iLD_VX_DT, iLD_VX_K, iLD_DT_VX, iLD_ST_VX, iADD_I,
    iLD_F, iLD_B, iLD_MEM, iLD_REGS
]

# --------------------------------------------------------------------
# Opcode tables
# --------------------------------------------------------------------

# Families whose tag depends only on the top nibble

family_primary = {
    0x1: iJP,
    0x2: iCALL,
    0x3: iSE_BYTE,
    0x4: iSNE_BYTE,
    0x6: iLD_BYTE,
    0x7: iADD_BYTE,
    0xA: iLD_I,
    0xB: iJP_V0,
    0xC: iRND,
    0xD: iDRW,
}

# Family 0 is selected by the whole low 12 bits; anything other than
# the two listed words is the legacy machine-code call, a no-op here

family_0 = {
    0x0E0: iCLS,
    0x0EE: iRET,
}

# Families 5 and 9 require n == 0

family_5 = {0x0: iSE_REG}
family_9 = {0x0: iSNE_REG}

# Family 8 is selected by n

family_8 = {
    0x0: iLD_REG,
    0x1: iOR,
    0x2: iAND,
    0x3: iXOR,
    0x4: iADD_REG,
    0x5: iSUB,
    0x6: iSHR,
    0x7: iSUBN,
    0xE: iSHL,
}

# Families e and f are selected by kk

family_e = {
    0x9E: iSKP,
    0xA1: iSKNP,
}

family_f = {
    0x07: iLD_VX_DT,
    0x0A: iLD_VX_K,
    0x15: iLD_DT_VX,
    0x18: iLD_ST_VX,
    0x1E: iADD_I,
    0x29: iLD_F,
    0x33: iLD_B,
    0x55: iLD_MEM,
    0x65: iLD_REGS,
}

# --------------------------------------------------------------------
# Keypad layout
# --------------------------------------------------------------------

# The hexadecimal keypad
#
#   1 2 3 c
#   4 5 6 d
#   7 8 9 e
#   a 0 b f
#
# is mapped onto the left-hand block of a host keyboard.

host_key_rows = ["1234", "qwer", "asdf", "zxcv"]
keypad_rows = [[0x1, 0x2, 0x3, 0xC],
               [0x4, 0x5, 0x6, 0xD],
               [0x7, 0x8, 0x9, 0xE],
               [0xA, 0x0, 0xB, 0xF]]

host_key_map = {host_key_rows[r][c]: keypad_rows[r][c]
                for r in range(4) for c in range(4)}

def host_key_to_keypad(ch):
    """Return the keypad index for a host key character, or None."""
    return host_key_map.get(ch.lower()) if ch else None
