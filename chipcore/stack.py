#!/usr/bin/env python3

"""
Stack Emulator

The call stack is not part of system RAM, as there is no specified location
for it and programs cannot read it.  It is a fixed array of return addresses
with an explicit stack pointer, which counts the entries in use.

Overflowing (a CALL with every entry in use) or underflowing (a RET with no
entries) raises rather than reading or writing outside the array.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class StackOverflow(StackError):
    pass


class StackUnderflow(StackError):
    pass


class Stack:
    def __init__(self, size):
        self.size = size
        self.items = [0] * size
        self.pointer = 0

    def push(self, item):
        if self.pointer >= self.size:
            raise StackOverflow("Stack overflow ({} levels)".format(self.size))

        self.items[self.pointer] = item
        self.pointer += 1

    def pop(self):
        if self.pointer <= 0:
            raise StackUnderflow("Stack underflow")

        self.pointer -= 1
        return self.items[self.pointer]

    def clear(self):
        self.items[:] = [0] * self.size
        self.pointer = 0

    def get_items(self):
        # For debugging
        return self.items[:self.pointer]
