#!/usr/bin/env python3

"""
CPU Debugger

If enabled, this will output information before each instruction executed:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction

If a crash occurs, all of the above will be outputted, with the addition of
the stack contents.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

TRACE_FORMAT = "V: 0x{regs} I: 0x{index:04x} DT: 0x{dt:02x} ST: 0x{st:02x} PC: 0x{pc:03x} OP: 0x{opcode:04x} IN: {ins}"


def format_registers(registers):
    # Most significant (Vf) first, so the line reads like one big hex number
    return "".join("{:02x}".format(registers[reg_num]) for reg_num in range(15, -1, -1))


def format_stack(stack):
    return "".join(" 0x{:03x}".format(item) for item in stack.get_items()) or " (Empty)"


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, instruction, verbose=False):
        state = cpu.state
        debug_str = TRACE_FORMAT.format(
            regs=format_registers(state.registers), index=state.index, dt=state.delay_timer, st=state.sound_timer,
            pc=cpu.debug_pc, opcode=cpu.opcode, ins=instruction
        )

        if verbose:
            debug_str += "\nStack:" + format_stack(state.stack)

        return debug_str

    def set_live(self, enabled):
        self.live = bool(enabled)

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        print(self.debug(cpu, instruction))
