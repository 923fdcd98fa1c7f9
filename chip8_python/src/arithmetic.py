# arithmetic.py

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

# ------------------------------------------------------------------------
# arithmetic.py defines arithmetic for the architecture using Python
# integers. This includes byte and word representation, hexadecimal
# conversion, and the 8-bit operations required by the instruction set.
# ------------------------------------------------------------------------

byte_mask = 0x00FF
addr_mask = 0x0FFF
word16mask = 0xFFFF

# ------------------------------------------------------------------------
# Ensuring validity of words
# ------------------------------------------------------------------------

# Registers hold 8-bit bytes, addresses in instructions are 12 bits,
# and the index register and program counter are 16 bits. All values
# are represented as nonnegative integers; arithmetic that leaves the
# range wraps around by masking.

def limit8(x):
    return x & byte_mask

def limit12(x):
    return x & addr_mask

def limit16(x):
    return x & word16mask

word_true = 1
word_false = 0

def bool_to_word(x):
    return word_true if x else word_false

# ------------------------------------------------------------------------
# Hexadecimal notation
# ------------------------------------------------------------------------

hex_digit = ['0', '1', '2', '3', '4', '5', '6', '7', '8', '9', 'a', 'b', 'c', 'd', 'e', 'f']

def byte_to_hex2(x):
    y = limit8(x)
    return hex_digit[y >> 4] + hex_digit[y & 0x0F]

def word_to_hex3(x):
    y = limit12(x)
    return hex_digit[(y >> 8) & 0x0F] + byte_to_hex2(y)

def word_to_hex4(x):
    y = limit16(x)
    return byte_to_hex2(y >> 8) + byte_to_hex2(y)

# ------------------------------------------------------------------------
# Addresses
# ------------------------------------------------------------------------

def incr_address(x, i):
    return limit16(x + i)

# ------------------------------------------------------------------------
# Operations for the instructions
# ------------------------------------------------------------------------

# Operations that write the flag register return [primary, secondary]:
# primary is the new value of the destination register and secondary
# is the new value of VF. Both are computed from the operands before
# either register is written, so the caller may store them in any
# order even when the destination is VF itself.

def op_add_byte(a, k):
    return limit8(a + k)

def op_or(a, b):
    primary = a | b
    return primary

def op_and(a, b):
    primary = a & b
    return primary

def op_xor(a, b):
    primary = a ^ b
    return primary

def op_add(a, b):
    sum_val = a + b
    primary = limit8(sum_val)
    secondary = bool_to_word(sum_val > byte_mask)
    return [primary, secondary]

def op_sub(a, b):
    primary = limit8(a - b)
    secondary = bool_to_word(a > b)
    return [primary, secondary]

# subn subtracts in the reverse direction: b - a

def op_subn(a, b):
    primary = limit8(b - a)
    secondary = bool_to_word(b > a)
    return [primary, secondary]

def op_shr(a):
    primary = a >> 1
    secondary = a & 0x01
    return [primary, secondary]

def op_shl(a):
    primary = limit8(a << 1)
    secondary = (a >> 7) & 0x01
    return [primary, secondary]

# Binary coded decimal: hundreds, tens, ones

def op_bcd(a):
    return [a // 100, (a // 10) % 10, a % 10]
