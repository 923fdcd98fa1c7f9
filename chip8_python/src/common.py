# common.py

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
# common.py holds the logging mode and the run-time defaults shared by
# the emulator, the command line tool, and the GUI.
# ----------------------------------------------------------------------

CHIP8PY_VERSION = "0.1.0"

# ----------------------------------------------------------------------
# Run-time defaults
# ----------------------------------------------------------------------

# The timers count down at 60 Hz. Drivers execute a slice of
# instructions for every timer tick; 10 instructions per frame gives
# the conventional instruction rate of roughly 600 Hz.

frame_rate = 60
default_instructions_per_frame = 10
default_cycle_limit = 100000

# Each CHIP-8 pixel is drawn as a square of default_scale screen pixels

default_scale = 10

# ----------------------------------------------------------------------
# Logging
# ----------------------------------------------------------------------

# devlog produces the instruction trace and is off unless requested
# with --verbose; errlog reports failed instruction cycles and is on by
# default.

class Mode:
    def __init__(self):
        self.trace = False
        self.show_err = True

    def set_trace(self):
        self.trace = True

    def clear_trace(self):
        self.trace = False

    def devlog(self, xs):
        if self.trace:
            print(xs)

    def errlog(self, xs):
        if self.show_err:
            print(xs)

mode = Mode()

