#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each call
to step() is one whole fetch-decode-execute cycle against the machine State.

The CPU never waits on anything itself.  Timers are ticked by whoever drives
the CPU, and the key-wait instruction (Fx0A) hands control straight back with
STEP_AWAITING_KEY until the keypad reports a key, so the driver can keep the
display and inputs going in the meantime.

The program counter is advanced before an instruction executes, so jumps
simply overwrite it, and skips advance it once more.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .constants import (
    APP_INTRO, ADDR_MASK, INDEX_MASK, FONT_BASE, FONT_GLYPH_SIZE, PROGRAM_BASE, MAX_PROGRAM_SIZE, MODE_LEGACY,
    MODE_MODERN, STEP_EXECUTED, STEP_AWAITING_KEY, OP_UNKNOWN, OP_CLS, OP_RET, OP_JP, OP_CALL, OP_SE, OP_SNE,
    OP_SE_REG, OP_LD, OP_ADD, OP_LD_REG, OP_OR, OP_AND, OP_XOR, OP_ADD_REG, OP_SUB, OP_SHR, OP_SUBN, OP_SHL,
    OP_SNE_REG, OP_LD_I, OP_JP_REG0, OP_RND, OP_DRW, OP_SKP, OP_SKNP, OP_LD_REG_DT, OP_LD_REG_K, OP_LD_DT, OP_LD_ST,
    OP_ADD_I_REG, OP_LD_F_REG, OP_LD_B_REG, OP_LD_I_REG, OP_LD_REG_I
)
from .debugger import Debugger
from .decoder import decode, disassemble
from .stack import StackError

CPU_ENDIAN = "big"  # CHIP-8 is big-endian


class CPUError(Exception):
    pass


class DecodeError(CPUError):
    def __init__(self, message, pc, opcode):
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode


class LoadError(CPUError):
    pass


class CPU:
    def __init__(self, state, debugger=None, mode=MODE_MODERN, seed=None, shift_quirks=None, logic_quirks=None,
                 load_quirks=None, index_overflow_quirks=None, jump_quirks=None, sys_quirks=None,
                 key_release_quirks=None):

        self.state = state
        self.debugger = Debugger() if debugger is None else debugger
        self.live_debug = self.debugger.is_live()
        legacy = (mode == MODE_LEGACY)

        """
        Quirks
        ------

        Defaults per mode are shown as legacy/modern.  Any quirk can be overridden.

        - Shift quirks          : True/False.  Shift Vx in place; otherwise SHR/SHL store Vy shifted into Vx.
        - Logic quirks          : False/True.  Zero Vf after OR/AND/XOR.
        - Load quirks           : False/True.  I += X+1 after Fx55/Fx65.
        - Index overflow quirks : False/False.  Amiga Vf on Fx1E, set when I goes past 0xFFF.
        - Jump quirks           : False/False.  BXNN, jumping relative to Vx instead of V0.
        - Sys quirks            : False/False.  0nnn is a no-op rather than halting.
        - Key release quirks    : True/True.  Fx0A waits for a key to go down then up, not just down.
        """

        self.shift_quirks = legacy if shift_quirks is None else shift_quirks
        self.logic_quirks = (not legacy) if logic_quirks is None else logic_quirks
        self.load_quirks = (not legacy) if load_quirks is None else load_quirks
        self.index_overflow_quirks = False if index_overflow_quirks is None else index_overflow_quirks
        self.jump_quirks = False if jump_quirks is None else jump_quirks
        self.sys_quirks = False if sys_quirks is None else sys_quirks
        self.key_release_quirks = True if key_release_quirks is None else key_release_quirks

        self.rng = Random(seed)

        # Handlers keyed by decoded instruction kind.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            OP_UNKNOWN: self._unknown,
            OP_CLS: self._00E0,
            OP_RET: self._00EE,
            OP_JP: self._1nnn,
            OP_CALL: self._2nnn,
            OP_SE: self._3xkk,
            OP_SNE: self._4xkk,
            OP_SE_REG: self._5xy0,
            OP_LD: self._6xkk,
            OP_ADD: self._7xkk,
            OP_LD_REG: self._8xy0,
            OP_OR: self._8xy1,
            OP_AND: self._8xy2,
            OP_XOR: self._8xy3,
            OP_ADD_REG: self._8xy4,
            OP_SUB: self._8xy5,
            OP_SHR: self._8xy6,
            OP_SUBN: self._8xy7,
            OP_SHL: self._8xyE,
            OP_SNE_REG: self._9xy0,
            OP_LD_I: self._Annn,
            OP_JP_REG0: self._Bnnn,
            OP_RND: self._Cxkk,
            OP_DRW: self._Dxyn,
            OP_SKP: self._Ex9E,
            OP_SKNP: self._ExA1,
            OP_LD_REG_DT: self._Fx07,
            OP_LD_REG_K: self._Fx0A,
            OP_LD_DT: self._Fx15,
            OP_LD_ST: self._Fx18,
            OP_ADD_I_REG: self._Fx1E,
            OP_LD_F_REG: self._Fx29,
            OP_LD_B_REG: self._Fx33,
            OP_LD_I_REG: self._Fx55,
            OP_LD_REG_I: self._Fx65
        }

        # Current opcode, its address and its decoded form
        self.opcode = 0
        self.debug_pc = state.program_counter
        self.instruction = None

        # Input-related vars
        self.awaiting_keypress = False

    def load(self, program):
        program_size = len(program)

        if program_size > MAX_PROGRAM_SIZE:
            raise LoadError(
                "Program is {} bytes, but only {} bytes are available from 0x{:03x}.".format(
                    program_size, MAX_PROGRAM_SIZE, PROGRAM_BASE
                )
            )

        self.state.memory.write_block(PROGRAM_BASE, program)

    def reset(self):
        self.state.reset()
        self.opcode = 0
        self.debug_pc = self.state.program_counter
        self.instruction = None
        self.awaiting_keypress = False

    def seed(self, value):
        self.rng.seed(value)

    def step(self):
        state = self.state

        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = state.program_counter

        if self.awaiting_keypress:
            # Still waiting on Fx0A.  Nothing new is fetched or decoded until a key arrives.
            instruction = self.instruction
        else:
            self.opcode = self.fetch()
            instruction = decode(self.opcode)
            self.instruction = instruction

            if self.live_debug:
                self.debug(disassemble(instruction))

        self.inc_pc()  # Program counter updates after fetch, but before execute

        try:
            self.instructions[instruction.op](instruction)
        except StackError:
            # Leave the program counter on the faulting CALL/RET
            state.program_counter = self.debug_pc
            raise

        return STEP_AWAITING_KEY if self.awaiting_keypress else STEP_EXECUTED

    def tick_timers(self, elapsed_micros):
        return self.state.timers.tick(elapsed_micros)

    @property
    def sound_active(self):
        return self.state.timers.sound_active

    def fetch(self):
        memory = self.state.memory
        pc = self.state.program_counter
        return int.from_bytes(
            bytes((memory.read(pc & ADDR_MASK), memory.read((pc + 1) & ADDR_MASK))), CPU_ENDIAN, signed=False
        )

    def inc_pc(self):
        self.state.program_counter = (self.state.program_counter + 2) & ADDR_MASK

    def dec_pc(self):
        # Only used to re-run instructions (i.e. keypress wait).
        self.state.program_counter = (self.state.program_counter - 2) & ADDR_MASK

    def _post_skip(self):
        self.inc_pc()

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _unknown(self, ins):
        if self.sys_quirks and ins.opcode & 0xF000 == 0:
            # SYS addr.  Machine code routines can't run here, so carry on as if it returned immediately.
            return

        self.state.program_counter = self.debug_pc
        raise DecodeError(
            (
                "Emulation halted.\n\n" +
                "{}Debug info:\n" +
                "{}\n\nOpcode 0x{:04x} at address 0x{:03x} is not a recognised instruction."
            ).format(
                APP_INTRO, self.debugger.debug(self, disassemble(ins), verbose=True), ins.opcode, self.debug_pc
            ),
            self.debug_pc,
            ins.opcode
        )

    def _00E0(self, ins):  # CLS
        self.state.framebuffer.clear()

    def _00EE(self, ins):  # RET
        # The stack holds the address of the CALL itself, so resume on the instruction after it
        self.state.program_counter = (self.state.stack.pop() + 2) & ADDR_MASK

    def _1nnn(self, ins):  # JP addr
        self.state.program_counter = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.state.stack.push(self.debug_pc)
        self.state.program_counter = ins.nnn

    def _3xkk(self, ins):  # SE Vx, byte
        if self.state.registers[ins.x] == ins.kk:
            self._post_skip()

    def _4xkk(self, ins):  # SNE Vx, byte
        if self.state.registers[ins.x] != ins.kk:
            self._post_skip()

    def _5xy0(self, ins):  # SE Vx, Vy
        v = self.state.registers

        if v[ins.x] == v[ins.y]:
            self._post_skip()

    def _6xkk(self, ins):  # LD Vx, byte
        self.state.registers[ins.x] = ins.kk

    def _7xkk(self, ins):  # ADD Vx, byte
        # No carry flag for this one
        v = self.state.registers
        v[ins.x] = (v[ins.x] + ins.kk) & 0xFF

    def _post_8xy1_8xy2_8xy3(self):
        if self.logic_quirks:
            self.state.registers[0xF] = 0

    def _8xy0(self, ins):  # LD Vx, Vy
        v = self.state.registers
        v[ins.x] = v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        v = self.state.registers
        v[ins.x] |= v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy2(self, ins):  # AND Vx, Vy
        v = self.state.registers
        v[ins.x] &= v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy3(self, ins):  # XOR Vx, Vy
        v = self.state.registers
        v[ins.x] ^= v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy4(self, ins):  # ADD Vx, Vy
        v = self.state.registers
        val = v[ins.x] + v[ins.y]
        v[ins.x] = val & 0xFF
        v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, ins, val):  # Post-SUB/SUBN
        v = self.state.registers
        v[ins.x] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes VF is specified in the
        # parameters.
        v[0xF] = int(val >= 0)

    def _8xy5(self, ins):  # SUB Vx, Vy
        v = self.state.registers
        self._post_8xy5_8xy7(ins, v[ins.x] - v[ins.y])

    def _8xy6(self, ins):  # SHR Vx {, Vy}
        v = self.state.registers
        val = v[ins.x if self.shift_quirks else ins.y]
        v[ins.x] = val >> 1
        v[0xF] = val & 1  # The whole byte gets set just for the flag

    def _8xy7(self, ins):  # SUBN Vx, Vy
        v = self.state.registers
        self._post_8xy5_8xy7(ins, v[ins.y] - v[ins.x])

    def _8xyE(self, ins):  # SHL Vx {, Vy}
        v = self.state.registers
        val = v[ins.x if self.shift_quirks else ins.y]
        v[ins.x] = (val << 1) & 0xFF
        v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        v = self.state.registers

        if v[ins.x] != v[ins.y]:
            self._post_skip()

    def _Annn(self, ins):  # LD I, addr
        self.state.index = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        # Breaks lots of games if set incorrectly.  CHIP-48 reads the register from the top nibble of the address.
        vr = ins.x if self.jump_quirks else 0
        self.state.program_counter = (self.state.registers[vr] + ins.nnn) & ADDR_MASK

    def _Cxkk(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.state.registers[ins.x] = self.rng.randint(0, 0xFF) & ins.kk

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        state = self.state
        v = state.registers
        memory = state.memory
        i = state.index
        x_pos = v[ins.x]
        y_pos = v[ins.y]
        sprite = bytes(memory.read((i + row) & ADDR_MASK) for row in range(ins.n))
        v[0xF] = int(state.framebuffer.draw(x_pos, y_pos, sprite))

    def _Ex9E(self, ins):  # SKP Vx
        if self.state.keypad.is_key_down(self.state.registers[ins.x]):
            self._post_skip()

    def _ExA1(self, ins):  # SKNP Vx
        if not self.state.keypad.is_key_down(self.state.registers[ins.x]):
            self._post_skip()

    def _Fx07(self, ins):  # LD Vx, DT
        self.state.registers[ins.x] = self.state.delay_timer

    def _Fx0A(self, ins):  # LD Vx, K
        # This opcode waits for a keypress, but since the sound and delay timers still need to expire correctly, and
        # the display still needs updating, we return control to the driver and simply decrement the incremented
        # program counter.
        keypad = self.state.keypad

        if self.awaiting_keypress:
            key = keypad.get_keypress(on_release=self.key_release_quirks)
        else:
            keypad.setup_keypress()  # Forget any previously pressed/released keys.
            self.awaiting_keypress = True
            key = None

        if key is None:
            # We need to come back here on the next step, because no key has arrived.
            self.dec_pc()
        else:
            self.state.registers[ins.x] = key
            self.awaiting_keypress = False

    def _Fx15(self, ins):  # LD DT, Vx
        self.state.delay_timer = self.state.registers[ins.x]

    def _Fx18(self, ins):  # LD ST, Vx
        self.state.sound_timer = self.state.registers[ins.x]

    def _Fx1E(self, ins):  # ADD I, Vx
        state = self.state
        val = state.index + state.registers[ins.x]
        state.index = val & INDEX_MASK

        # Allow for Amiga CHIP-8 emulator behaviour
        if self.index_overflow_quirks:
            state.registers[0xF] = int(val > ADDR_MASK)

    def _Fx29(self, ins):  # LD F, Vx
        # Only the low nibble names a glyph
        self.state.index = FONT_BASE + FONT_GLYPH_SIZE * (self.state.registers[ins.x] & 0xF)

    def _Fx33(self, ins):  # LD B, Vx
        state = self.state
        val = state.registers[ins.x]
        i = state.index
        state.memory.write(i & ADDR_MASK, val // 100)               # Most-significant digit
        state.memory.write((i + 1) & ADDR_MASK, (val // 10) % 10)   # Middle digit
        state.memory.write((i + 2) & ADDR_MASK, val % 10)           # Least-significant digit

    def _post_Fx55_Fx65(self, ins):
        if self.load_quirks:
            self.state.index = (self.state.index + ins.x + 1) & INDEX_MASK

    def _Fx55(self, ins):  # LD [I], Vx
        state = self.state
        i = state.index

        for reg in range(ins.x + 1):
            state.memory.write((i + reg) & ADDR_MASK, state.registers[reg])

        self._post_Fx55_Fx65(ins)

    def _Fx65(self, ins):  # LD Vx, [I]
        state = self.state
        i = state.index

        for reg in range(ins.x + 1):
            state.registers[reg] = state.memory.read((i + reg) & ADDR_MASK)

        self._post_Fx55_Fx65(ins)
