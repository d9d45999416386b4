#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes, and fast
zeroing of memory blocks.  The same class backs both the 4K system memory and
the framebuffer's pixel store.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        # Contents are lost
        self.mem_size = mem_size
        self.mem = memoryview(bytearray(mem_size))

    def check_range(self, location, size=1):
        if location < 0 or location + size > self.mem_size:
            raise RAMError("Memory overflow at 0x{:04x}".format(max(location, location + size - 1)))

    def read(self, location):
        self.check_range(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_range(location, size)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_range(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        size = len(block)

        if size:
            self.check_range(location, size)
            self.mem[location:location + size] = block

    def zero_block(self, location, size):
        self.write_block(location, bytes(size))

    def clear(self):
        self.zero_block(0, self.mem_size)
