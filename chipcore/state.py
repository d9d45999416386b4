#!/usr/bin/env python3

"""
Machine State

Everything a running program can change lives in one State object: the V
registers, memory, the index register, the program counter, the call stack,
both timers, the keypad and the framebuffer.  There is no behaviour here
beyond resetting to power-on values.

A CPU owns exactly one State, and nothing is shared between instances, so any
number of machines can run side by side.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE, FONT, FONT_BASE, PROGRAM_BASE, STACK_SIZE
from .framebuffer import Framebuffer
from .keypad import Keypad
from .ram import RAM
from .stack import Stack
from .timers import Timers


class State:
    def __init__(self, allow_wrapping=False):
        self.registers = memoryview(bytearray(16))
        self.memory = RAM(MEM_SIZE)
        self.index = 0
        self.program_counter = PROGRAM_BASE
        self.stack = Stack(STACK_SIZE)
        self.timers = Timers()
        self.keypad = Keypad()
        self.framebuffer = Framebuffer(allow_wrapping=allow_wrapping)
        self.reset()

    def reset(self):
        self.registers[:] = bytes(16)
        self.memory.clear()
        self.memory.write_block(FONT_BASE, FONT)
        self.index = 0
        self.program_counter = PROGRAM_BASE
        self.stack.clear()
        self.timers.reset()
        self.keypad.clear()
        self.framebuffer.clear()

    @property
    def stack_pointer(self):
        return self.stack.pointer

    @property
    def delay_timer(self):
        return self.timers.delay_timer

    @delay_timer.setter
    def delay_timer(self, value):
        self.timers.delay_timer = value & 0xFF

    @property
    def sound_timer(self):
        return self.timers.sound_timer

    @sound_timer.setter
    def sound_timer(self, value):
        self.timers.sound_timer = value & 0xFF
