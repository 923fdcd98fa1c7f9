# state.py

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

# -------------------------------------------------------------------------
# state.py defines the machine state, the status of a run, and the
# result record returned by each instruction cycle.
# -------------------------------------------------------------------------

import random

import common
import architecture as arch
import arithmetic as arith

# -------------------------------------------------------------------------
# Run status
# -------------------------------------------------------------------------

# The status describes the condition of the machine as seen by the
# driver. The engine only sets RUNNING, BLOCKED and ERROR; the driver
# decides when a session is READY or HALTED.

STATUS_RESET = 0    # after construction or reset
STATUS_READY = 1    # after boot
STATUS_RUNNING = 2  # executing instructions
STATUS_BLOCKED = 3  # waiting for a key (fx0a)
STATUS_HALTED = 4   # stopped by the driver
STATUS_ERROR = 5    # last cycle failed

def show_status(s):
    if s == STATUS_RESET:
        return "Reset"
    elif s == STATUS_READY:
        return "Ready"
    elif s == STATUS_RUNNING:
        return "Running"
    elif s == STATUS_BLOCKED:
        return "Blocked"
    elif s == STATUS_HALTED:
        return "Halted"
    elif s == STATUS_ERROR:
        return "Error"
    else:
        return ""

# -------------------------------------------------------------------------
# Outcome of an instruction cycle
# -------------------------------------------------------------------------

# The kind of a StepResult. Only EX_OK completes the instruction;
# EX_BLOCKED leaves pc on an fx0a that is still waiting for a key, and
# the rest are failures reported to the driver.

EX_OK = 0
EX_UNKNOWN_INSTRUCTION = 1
EX_STACK_OVERFLOW = 2
EX_STACK_UNDERFLOW = 3
EX_ADDRESS_ERROR = 4
EX_BLOCKED = 5

def show_kind(k):
    if k == EX_OK:
        return "ok"
    elif k == EX_UNKNOWN_INSTRUCTION:
        return "unknown instruction"
    elif k == EX_STACK_OVERFLOW:
        return "stack overflow"
    elif k == EX_STACK_UNDERFLOW:
        return "stack underflow"
    elif k == EX_ADDRESS_ERROR:
        return "address error"
    elif k == EX_BLOCKED:
        return "blocked"
    else:
        return ""

error_kinds = [EX_UNKNOWN_INSTRUCTION, EX_STACK_OVERFLOW,
               EX_STACK_UNDERFLOW, EX_ADDRESS_ERROR]

class StepResult:
    """Result of one fetch-decode-execute cycle.

    kind is one of the EX_ constants, address is where the instruction
    was fetched from, and code is the instruction word (None when the
    fetch itself failed).
    """

    def __init__(self, kind, address, code=None, tag=None):
        self.kind = kind
        self.address = address
        self.code = code
        self.tag = tag

    @property
    def ok(self):
        return self.kind == EX_OK

    @property
    def is_error(self):
        return self.kind in error_kinds

    def show(self):
        code = arith.word_to_hex4(self.code) if self.code is not None else "----"
        return f"{show_kind(self.kind)} at {arith.word_to_hex4(self.address)} instr={code}"

    def __repr__(self):
        return f"StepResult({self.show()})"

# -------------------------------------------------------------------------
# Machine state
# -------------------------------------------------------------------------

def default_random_byte():
    return random.randrange(256)

class MachineState:
    """All state of one emulated CHIP-8 session.

    The state object is created by the driver and passed to every
    emulator operation; nothing in the emulator keeps a machine of its
    own. random_byte is the entropy source used by cxkk, a callable
    returning an integer in 0..255.
    """

    def __init__(self, random_byte=None):
        self.random_byte = random_byte if random_byte is not None else default_random_byte
        self.memory = bytearray(arch.MEMORY_SIZE)
        self.V = bytearray(arch.N_REGISTERS)
        self.stack = [0] * arch.STACK_SIZE
        self.keypad = bytearray(arch.N_KEYS)
        self.display = bytearray(arch.DISPLAY_SIZE_BYTES)
        self.clear()

    def clear(self):
        for a in range(arch.MEMORY_SIZE):
            self.memory[a] = 0
        for i in range(arch.N_REGISTERS):
            self.V[i] = 0
        for i in range(arch.STACK_SIZE):
            self.stack[i] = 0
        for i in range(arch.N_KEYS):
            self.keypad[i] = 0
        for a in range(arch.DISPLAY_SIZE_BYTES):
            self.display[a] = 0
        self.I = 0
        self.pc = arch.PROGRAM_START_ADDRESS
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.status = STATUS_RESET
        self.instr_count = 0
        self.cur_instr_addr = arch.PROGRAM_START_ADDRESS
        common.mode.devlog("machine state cleared")

    # Keypad access for input providers

    def press_key(self, k):
        self.keypad[k & 0x0F] = 1

    def release_key(self, k):
        self.keypad[k & 0x0F] = 0

    def release_all_keys(self):
        for i in range(arch.N_KEYS):
            self.keypad[i] = 0

