#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from chipcore.constants import MODE_LEGACY, MAX_PROGRAM_SIZE, STEP_EXECUTED, STEP_AWAITING_KEY, FONT
from chipcore.cpu import CPU, CPUError, DecodeError, LoadError
from chipcore.stack import StackOverflow, StackUnderflow
from chipcore.state import State


class TestCPU(unittest.TestCase):
    def setUp(self):
        self.state = State()
        self.cpu = CPU(self.state)
        self.v = self.state.registers
        self.ram = self.state.memory

    def _check_opcode(self, opcode):
        # Place the opcode wherever the program counter is, and run it
        self.ram.write_block(self.state.program_counter, opcode.to_bytes(2, "big"))
        return self.cpu.step()

    def test_cpu_fetch(self):
        self.ram.write_block(0x200, bytearray(b"\xFF\xFE"))
        self.assertEqual(0xFFFE, self.cpu.fetch())

    def test_cpu_fetch_wrap(self):
        self.state.program_counter = 0xFFF
        self.ram.write(0xFFF, 0x12)
        self.assertEqual(0x1200 | FONT[0], self.cpu.fetch())

    def test_cpu_inc_pc_no_wrap(self):
        self.cpu.inc_pc()
        self.assertEqual(0x202, self.state.program_counter)

    def test_cpu_inc_pc_wrap(self):
        self.state.program_counter = 0xFFE
        self.cpu.inc_pc()
        self.assertEqual(0x000, self.state.program_counter)

    def test_cpu_dec_pc_wrap(self):
        self.state.program_counter = 0x000
        self.cpu.dec_pc()
        self.assertEqual(0xFFE, self.state.program_counter)

    def test_cpu_step_status(self):
        self.assertEqual(STEP_EXECUTED, self._check_opcode(0x6000))

    def test_cpu_decode_exec_fail(self):
        for opcode in 0x0000, 0x0001, 0x0123, 0x5001, 0x8008, 0x800F, 0x9001, 0xE09F, 0xE0A2, 0xF100, 0xFFFF:
            with self.assertRaises(DecodeError) as context:
                self._check_opcode(opcode)

            self.assertEqual(0x200, context.exception.pc)
            self.assertEqual(opcode, context.exception.opcode)
            self.assertEqual(0x200, self.state.program_counter)  # Never moves past a bad opcode
            self.assertIn("0x{:04x}".format(opcode), str(context.exception))

    def test_cpu_decode_error_is_cpu_error(self):
        self.assertRaises(CPUError, self._check_opcode, 0x5001)

    def test_cpu_sys_quirks(self):
        self.cpu.sys_quirks = True
        self._check_opcode(0x0123)
        self.assertEqual(0x202, self.state.program_counter)
        # Only the 0nnn family is ignored
        self.assertRaises(DecodeError, self._check_opcode, 0x5001)

    # Loading and resetting

    def test_cpu_load(self):
        self.cpu.load(b"\x12\x34\x56")
        self.assertEqual("123456", self.ram.read_block(0x200, 3).hex())

    def test_cpu_load_capacity(self):
        self.assertRaises(LoadError, self.cpu.load, bytes(MAX_PROGRAM_SIZE + 1))
        program = bytes(MAX_PROGRAM_SIZE - 1) + b"\xAB"
        self.cpu.load(program)
        self.assertEqual(0xAB, self.ram.read(0xFFF))

    def test_cpu_reset(self):
        self.v[0x3] = 0x33
        self.state.index = 0x123
        self.state.delay_timer = 9
        self.state.stack.push(0x200)
        self.ram.write(0x300, 0xFF)
        self._check_opcode(0xF00A)
        self.cpu.reset()
        self.assertEqual(0x00, self.v[0x3])
        self.assertEqual(0x000, self.state.index)
        self.assertEqual(0, self.state.delay_timer)
        self.assertEqual(0, self.state.stack_pointer)
        self.assertEqual(0x00, self.ram.read(0x300))
        self.assertEqual(0x200, self.state.program_counter)
        self.assertEqual(FONT, bytes(self.ram.read_block(0x000, len(FONT))))
        self.assertFalse(self.cpu.awaiting_keypress)

    # Instructions

    def test_cpu_00e0(self):  # CLS
        self.v[0x1] = 0x3
        self._check_opcode(0xD115)
        self._check_opcode(0x00E0)
        self.assertEqual(0, sum(self.state.framebuffer.pixels))
        self.assertEqual(0x204, self.state.program_counter)

    def test_cpu_00e0_idempotent(self):  # CLS, DRW.., CLS
        self._check_opcode(0x00E0)

        for opcode in 0xD015, 0xD125, 0xD3F5:
            self.state.index = 0x05 * (opcode & 0xF)
            self._check_opcode(opcode)

        self._check_opcode(0x00E0)
        self.assertEqual(bytes(64 * 32), bytes(self.state.framebuffer.pixels))

    def test_cpu_00ee(self):  # RET
        self.state.stack.push(0x3FE)
        self._check_opcode(0x00EE)
        self.assertEqual(0x400, self.state.program_counter)
        self.assertEqual(0, self.state.stack_pointer)

    def test_cpu_00ee_underflow(self):  # RET
        self.assertRaises(StackUnderflow, self._check_opcode, 0x00EE)
        self.assertEqual(0x200, self.state.program_counter)

    def test_cpu_1nnn(self):  # JP addr
        self._check_opcode(0x1ABC)
        self.assertEqual(0xABC, self.state.program_counter)

    def test_cpu_2nnn(self):  # CALL addr
        self._check_opcode(0x2ABC)
        self.assertEqual(0xABC, self.state.program_counter)
        self.assertEqual(1, self.state.stack_pointer)
        self.assertEqual([0x200], self.state.stack.get_items())

    def test_cpu_2nnn_overflow(self):  # CALL addr
        for _ in range(16):
            self.state.stack.push(0x200)

        self.assertRaises(StackOverflow, self._check_opcode, 0x2ABC)
        self.assertEqual(0x200, self.state.program_counter)
        self.assertEqual(16, self.state.stack_pointer)

    def test_cpu_2nnn_full_depth(self):  # CALL addr
        # Each CALL jumps to the next one, so sixteen nest before the stack is full
        for call_num in range(16):
            self.ram.write_block(0x200 + call_num * 2, (0x2202 + call_num * 2).to_bytes(2, "big"))

        for _ in range(16):
            self.assertEqual(STEP_EXECUTED, self.cpu.step())

        self.assertEqual(16, self.state.stack_pointer)
        self.assertEqual(0x220, self.state.program_counter)
        self.assertRaises(StackOverflow, self._check_opcode, 0x2200)

    def test_cpu_2nnn_00ee(self):  # CALL addr, then RET
        self.ram.write_block(0x200, b"\x23\x00")
        self.ram.write_block(0x300, b"\x00\xEE")
        self.cpu.step()
        self.assertEqual(0x300, self.state.program_counter)
        self.cpu.step()
        self.assertEqual(0x202, self.state.program_counter)
        self.assertEqual(0, self.state.stack_pointer)

    def test_cpu_3xkk(self):  # SE Vx, byte
        self.v[0x2] = 0x11
        self._check_opcode(0x3212)
        self.assertEqual(0x202, self.state.program_counter)
        self.v[0x2] = 0x12
        self._check_opcode(0x3212)
        self.assertEqual(0x206, self.state.program_counter)

    def test_cpu_4xkk(self):  # SNE Vx, byte
        self.v[0x2] = 0x11
        self._check_opcode(0x4212)
        self.assertEqual(0x204, self.state.program_counter)
        self.v[0x2] = 0x12
        self._check_opcode(0x4212)
        self.assertEqual(0x206, self.state.program_counter)

    def test_cpu_5xy0(self):  # SE Vx, Vy
        self.v[0x2] = 0x11
        self.v[0x3] = 0x12
        self._check_opcode(0x5230)
        self.assertEqual(0x202, self.state.program_counter)
        self.v[0x3] = 0x11
        self._check_opcode(0x5230)
        self.assertEqual(0x206, self.state.program_counter)

    def test_cpu_6xkk(self):  # LD Vx, byte
        self._check_opcode(0x62FE)
        self.assertEqual(0xFE, self.v[0x2])

    def test_cpu_7xkk(self):  # ADD Vx, byte
        self._check_opcode(0x72FE)
        self.assertEqual(0xFE, self.v[0x2])
        self._check_opcode(0x7201)
        self.assertEqual(0xFF, self.v[0x2])
        self._check_opcode(0x7201)
        self.assertEqual(0x00, self.v[0x2])
        self.assertEqual(0x0, self.v[0xF])  # No carry flag

    def test_cpu_8xy0(self):  # LD Vx, Vy
        self.v[0x1] = 0x1
        self.v[0x2] = 0x2
        self._check_opcode(0x8120)
        self.assertEqual(0x2, self.v[0x1])

    def _prepare_alu(self):
        self.v[0x1] = 0b10111000
        self.v[0x2] = 0b10001110

    def test_cpu_8xy1(self):  # OR Vx, Vy
        self._prepare_alu()
        self._check_opcode(0x8121)
        self.assertEqual(0b10111110, self.v[0x1])

    def test_cpu_8xy2(self):  # AND Vx, Vy
        self._prepare_alu()
        self._check_opcode(0x8122)
        self.assertEqual(0b10001000, self.v[0x1])

    def test_cpu_8xy3(self):  # XOR Vx, Vy
        self._prepare_alu()
        self._check_opcode(0x8123)
        self.assertEqual(0b00110110, self.v[0x1])

    def test_cpu_8xy4_carry(self):  # ADD Vx, Vy (carry)
        self.v[0x1] = 0xFF
        self.v[0x2] = 0x01
        self._check_opcode(0x8124)
        self.assertEqual(0x00, self.v[0x1])
        self.assertEqual(0x1, self.v[0xF])

    def test_cpu_8xy4_no_carry(self):  # ADD Vx, Vy (no carry)
        self.v[0x1] = 0x1
        self.v[0xF] = 0x2  # Use Vf as an input to check flag ordering too
        self._check_opcode(0x81F4)
        self.assertEqual(0x3, self.v[0x1])
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_8xy5_borrow(self):  # SUB Vx, Vy (borrow)
        self.v[0x1] = 0x05
        self.v[0x2] = 0x0A
        self._check_opcode(0x8125)
        self.assertEqual(0xFB, self.v[0x1])
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_8xy5_no_borrow(self):  # SUB Vx, Vy (no borrow)
        self.v[0x1] = 0x3
        self.v[0x2] = 0x1
        self._check_opcode(0x8125)
        self.assertEqual(0x2, self.v[0x1])
        self.assertEqual(0x1, self.v[0xF])
        # Equal values don't borrow either
        self.v[0x1] = 0xFF
        self.v[0xF] = 0xFF
        self._check_opcode(0x81F5)
        self.assertEqual(0x0, self.v[0x1])
        self.assertEqual(0x1, self.v[0xF])

    def test_cpu_8xy6_modern(self):  # SHR Vx {, Vy}
        self.v[0x1] = 0x4
        self.v[0x2] = 0x3
        self._check_opcode(0x8126)
        self.assertEqual(0x1, self.v[0x1])
        self.assertEqual(0x3, self.v[0x2])
        self.assertEqual(0x1, self.v[0xF])

    def test_cpu_8xy6_legacy(self):  # SHR Vx {, Vy}
        self.cpu.shift_quirks = True
        self.v[0x1] = 0x5
        self.v[0x2] = 0x2
        self._check_opcode(0x8126)
        self.assertEqual(0x2, self.v[0x1])
        self.assertEqual(0x2, self.v[0x2])
        self.assertEqual(0x1, self.v[0xF])

    def test_cpu_8xy7(self):  # SUBN Vx, Vy (borrow)
        self.v[0x1] = 0x0A
        self.v[0x2] = 0x05
        self._check_opcode(0x8127)
        self.assertEqual(0xFB, self.v[0x1])
        self.assertEqual(0x05, self.v[0x2])
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_8xy7_no_borrow(self):  # SUBN Vx, Vy (no borrow)
        self.v[0x1] = 0x05
        self.v[0x2] = 0x0A
        self._check_opcode(0x8127)
        self.assertEqual(0x05, self.v[0x1])
        self.assertEqual(0x1, self.v[0xF])

    def test_cpu_8xye_modern(self):  # SHL Vx {, Vy}
        self.v[0x1] = 0x1
        self.v[0x2] = 0x81
        self._check_opcode(0x812E)
        self.assertEqual(0x02, self.v[0x1])
        self.assertEqual(0x81, self.v[0x2])
        self.assertEqual(0x1, self.v[0xF])

    def test_cpu_8xye_legacy(self):  # SHL Vx {, Vy}
        self.cpu.shift_quirks = True
        self.v[0x1] = 0x40
        self.v[0x4] = 0x81
        self._check_opcode(0x814E)
        self.assertEqual(0x80, self.v[0x1])
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_9xy0(self):  # SNE Vx, Vy
        self.v[0x2] = 0x15
        self.v[0x3] = 0x16
        self._check_opcode(0x9230)
        self.assertEqual(0x204, self.state.program_counter)
        self.v[0x3] = 0x15
        self._check_opcode(0x9230)
        self.assertEqual(0x206, self.state.program_counter)

    def test_cpu_annn(self):  # LD I, addr
        self.assertEqual(0, self.state.index)
        self._check_opcode(0xAFF1)
        self.assertEqual(0xFF1, self.state.index)

    def test_cpu_bnnn(self):  # JP V0, addr
        self.v[0x0] = 0x10
        self.v[0x3] = 0x20
        self._check_opcode(0xB300)
        self.assertEqual(0x310, self.state.program_counter)
        self.v[0x0] = 0xFD
        self._check_opcode(0xBF0E)
        self.assertEqual(0x00B, self.state.program_counter)

    def test_cpu_bnnn_jump_quirks(self):  # JP Vx, addr
        self.cpu.jump_quirks = True
        self.v[0x0] = 0x10
        self.v[0x3] = 0x20
        self._check_opcode(0xB300)
        self.assertEqual(0x320, self.state.program_counter)

    def test_cpu_cxkk(self):  # RND Vx, byte
        self._check_opcode(0xC100)
        self.assertEqual(0x00, self.v[0x1])

        for _ in range(64):
            self._check_opcode(0xC10F)
            self.assertLessEqual(self.v[0x1], 0x0F)

    def test_cpu_cxkk_seed(self):  # RND Vx, byte
        results = []

        for _ in range(2):
            self.cpu.seed(1234)
            self.state.program_counter = 0x200
            sequence = []

            for _ in range(8):
                self._check_opcode(0xC1FF)
                sequence.append(self.v[0x1])

            results.append(sequence)

        self.assertEqual(results[0], results[1])

    def test_cpu_dxyn(self):  # DRW Vx, Vy, nibble
        fb = self.state.framebuffer
        self.state.index = 0x000  # Glyph "0"
        self._check_opcode(0xD125)
        self.assertEqual(0x0, self.v[0xF])
        self.assertEqual((1, 1, 1, 1, 0), tuple(fb.get_pixel(x, 0) for x in range(5)))
        self.assertEqual((1, 0, 0, 1), tuple(fb.get_pixel(x, 1) for x in range(4)))

        # Drawing it again erases it, and collides with itself
        self._check_opcode(0xD125)
        self.assertEqual(0x1, self.v[0xF])
        self.assertEqual(0, sum(fb.pixels))

    def test_cpu_dxyn_resets_vf(self):  # DRW Vx, Vy, nibble
        self.v[0xF] = 0x5
        self._check_opcode(0xD125)
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_dxyn_clipping(self):  # DRW Vx, Vy, nibble
        fb = self.state.framebuffer
        self.v[0x1] = 62
        self.v[0x2] = 30
        self._check_opcode(0xD125)
        self.assertEqual(1, fb.get_pixel(62, 30))
        self.assertEqual(1, fb.get_pixel(63, 30))
        self.assertEqual(1, fb.get_pixel(62, 31))
        self.assertEqual(0, fb.get_pixel(0, 30))  # Not wrapped horizontally
        self.assertEqual(0, fb.get_pixel(62, 0))  # Not wrapped vertically
        self.assertEqual(3, sum(fb.pixels))

    def test_cpu_dxyn_origin_wrap(self):  # DRW Vx, Vy, nibble
        self.v[0x1] = 64 + 2
        self.v[0x2] = 32 + 1
        self._check_opcode(0xD121)
        self.assertEqual(1, self.state.framebuffer.get_pixel(2, 1))

    def test_cpu_ex9e(self):  # SKP Vx
        self.v[0x1] = 0xA
        self._check_opcode(0xE19E)
        self.assertEqual(0x202, self.state.program_counter)
        self.state.keypad.set_key(0xA, True)
        self._check_opcode(0xE19E)
        self.assertEqual(0x206, self.state.program_counter)

    def test_cpu_exa1(self):  # SKNP Vx
        self.v[0x1] = 0xA
        self._check_opcode(0xE1A1)
        self.assertEqual(0x204, self.state.program_counter)
        self.state.keypad.set_key(0xA, True)
        self._check_opcode(0xE1A1)
        self.assertEqual(0x206, self.state.program_counter)

    def test_cpu_fx07(self):  # LD Vx, DT
        self.state.delay_timer = 0x2
        self._check_opcode(0xF207)
        self.assertEqual(0x2, self.v[0x2])

    def test_cpu_fx0a_release(self):  # LD Vx, K
        keypad = self.state.keypad
        self.assertEqual(STEP_AWAITING_KEY, self._check_opcode(0xF30A))
        self.assertEqual(0x200, self.state.program_counter)

        # While waiting, the next instruction must not be fetched or decoded
        self.ram.write_block(0x200, b"\x63\x55")
        self.assertEqual(STEP_AWAITING_KEY, self.cpu.step())
        self.assertEqual(0x200, self.state.program_counter)

        keypad.set_key(0x7, True)
        self.assertEqual(STEP_AWAITING_KEY, self.cpu.step())
        keypad.set_key(0x7, False)
        self.assertEqual(STEP_EXECUTED, self.cpu.step())
        self.assertEqual(0x7, self.v[0x3])
        self.assertEqual(0x202, self.state.program_counter)

    def test_cpu_fx0a_press(self):  # LD Vx, K
        self.cpu.key_release_quirks = False
        self.assertEqual(STEP_AWAITING_KEY, self._check_opcode(0xF30A))
        self.state.keypad.set_key(0x5, True)
        self.assertEqual(STEP_EXECUTED, self.cpu.step())
        self.assertEqual(0x5, self.v[0x3])
        self.assertEqual(0x202, self.state.program_counter)

    def test_cpu_fx0a_release_held_key(self):  # LD Vx, K
        keypad = self.state.keypad
        keypad.set_key(0x5, True)
        self.assertEqual(STEP_AWAITING_KEY, self._check_opcode(0xF30A))

        # Held before the wait began, so letting go is not a key-down-then-up
        keypad.set_key(0x5, False)
        self.assertEqual(STEP_AWAITING_KEY, self.cpu.step())
        self.assertEqual(0x200, self.state.program_counter)
        self.assertEqual(0x0, self.v[0x3])

        keypad.set_key(0x5, True)
        self.assertEqual(STEP_AWAITING_KEY, self.cpu.step())
        keypad.set_key(0x5, False)
        self.assertEqual(STEP_EXECUTED, self.cpu.step())
        self.assertEqual(0x5, self.v[0x3])
        self.assertEqual(0x202, self.state.program_counter)

    def test_cpu_fx0a_press_held_key(self):  # LD Vx, K
        keypad = self.state.keypad
        self.cpu.key_release_quirks = False
        keypad.set_key(0x5, True)
        self.assertEqual(STEP_AWAITING_KEY, self._check_opcode(0xF30A))

        # Still down, so there is no new press
        self.assertEqual(STEP_AWAITING_KEY, self.cpu.step())
        keypad.set_key(0x5, False)
        self.assertEqual(STEP_AWAITING_KEY, self.cpu.step())
        self.assertEqual(0x200, self.state.program_counter)

        keypad.set_key(0x5, True)
        self.assertEqual(STEP_EXECUTED, self.cpu.step())
        self.assertEqual(0x5, self.v[0x3])

    def test_cpu_fx0a_timers_run(self):  # LD Vx, K
        self.state.delay_timer = 3
        self._check_opcode(0xF30A)
        self.cpu.tick_timers(16667 * 2)
        self.cpu.step()
        self.assertEqual(1, self.state.delay_timer)

    def test_cpu_fx15(self):  # LD DT, Vx
        self.assertEqual(0x0, self.state.delay_timer)
        self.v[0x2] = 0x3
        self._check_opcode(0xF215)
        self.assertEqual(0x3, self.state.delay_timer)

    def test_cpu_fx18(self):  # LD ST, Vx
        self.assertFalse(self.cpu.sound_active)
        self.v[0x3] = 0x4
        self._check_opcode(0xF318)
        self.assertEqual(0x4, self.state.sound_timer)
        self.assertTrue(self.cpu.sound_active)

    def test_cpu_fx1e_no_overflow(self):  # ADD I, Vx
        self.v[0x1] = 0x2
        self.state.index = 0x3
        self._check_opcode(0xF11E)
        self.assertEqual(0x5, self.state.index)
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_fx1e_overflow_normal(self):  # ADD I, Vx
        self.v[0x3] = 0xFE
        self.v[0xF] = 0x7
        self.state.index = 0xFFFE
        self._check_opcode(0xF31E)
        self.assertEqual(0xFC, self.state.index)
        self.assertEqual(0x7, self.v[0xF])  # Untouched

    def test_cpu_fx1e_overflow_amiga(self):  # ADD I, Vx
        self.cpu.index_overflow_quirks = True
        self.v[0x4] = 0x03
        self.state.index = 0xFFD
        self._check_opcode(0xF41E)
        self.assertEqual(0x1000, self.state.index)
        self.assertEqual(0x1, self.v[0xF])
        self.state.index = 0x100
        self._check_opcode(0xF41E)
        self.assertEqual(0x103, self.state.index)
        self.assertEqual(0x0, self.v[0xF])

    def test_cpu_fx29(self):  # LD F, Vx
        self.v[0x1] = 0x9
        self.state.delay_timer = 0x3  # Must not be used in place of Vx
        self._check_opcode(0xF129)
        self.assertEqual(0x2D, self.state.index)
        self.v[0x1] = 0x1A
        self._check_opcode(0xF129)
        self.assertEqual(0x32, self.state.index)

    def test_cpu_fx33_normal(self):  # LD B, Vx
        self.state.index = 0x300
        self.v[0x1] = 0xFE
        self._check_opcode(0xF133)
        # Ensure 254 (base 10 of 0xFE) is calculated
        self.assertEqual(0x2, self.ram.read(0x300))
        self.assertEqual(0x5, self.ram.read(0x301))
        self.assertEqual(0x4, self.ram.read(0x302))

    def test_cpu_fx33_memory_wrap(self):  # LD B, Vx
        self.state.index = 0xFFE
        self.v[0x2] = 0xFD
        self._check_opcode(0xF233)
        # Ensure 253 (base 10 of 0xFD) is calculated
        self.assertEqual(0x2, self.ram.read(0xFFE))
        self.assertEqual(0x5, self.ram.read(0xFFF))
        self.assertEqual(0x3, self.ram.read(0x000))

    def test_cpu_fx55(self):  # LD [I], Vx
        self.v[0x0] = 3
        self.v[0x1] = 2
        self.v[0x2] = 1  # Shouldn't be written into RAM @ 0x302
        self.state.index = 0x300
        self._check_opcode(0xF155)
        self.assertEqual(0x3, self.ram.read(0x300))
        self.assertEqual(0x2, self.ram.read(0x301))
        self.assertEqual(0x0, self.ram.read(0x302))
        self.assertEqual(0x302, self.state.index)

    def test_cpu_fx65(self):  # LD Vx, [I]
        self.state.index = 0xFFF
        self.ram.write(0xFFF, 0x6)
        self.ram.write(0x000, 0x5)
        self.ram.write(0x001, 0x4)  # Shouldn't be copied to register V2
        self._check_opcode(0xF165)
        self.assertEqual(0x6, self.v[0])
        self.assertEqual(0x5, self.v[1])
        self.assertEqual(0x0, self.v[2])
        self.assertEqual(0x1001, self.state.index)

    # Tests for CPU quirks

    def test_cpu_load_quirks(self):
        self.cpu.load_quirks = False
        self.state.index = 0x300

        for opcode in 0xF255, 0xF265:
            self._check_opcode(opcode)
            self.assertEqual(0x300, self.state.index)

    def test_cpu_logic_quirks(self):
        for logic_quirks in False, True:
            self.cpu.logic_quirks = logic_quirks

            for i in range(1, 4):
                self.v[0xF] = 0x2
                self._check_opcode(0x8120 + i)
                self.assertEqual(int(not logic_quirks) * 2, self.v[0xF])

    def test_cpu_mode_presets(self):
        legacy = CPU(State(), mode=MODE_LEGACY)
        self.assertTrue(legacy.shift_quirks)
        self.assertFalse(legacy.logic_quirks)
        self.assertFalse(legacy.load_quirks)

        modern = self.cpu
        self.assertFalse(modern.shift_quirks)
        self.assertTrue(modern.logic_quirks)
        self.assertTrue(modern.load_quirks)

        for cpu in legacy, modern:
            self.assertFalse(cpu.index_overflow_quirks)
            self.assertFalse(cpu.jump_quirks)
            self.assertFalse(cpu.sys_quirks)
            self.assertTrue(cpu.key_release_quirks)

    def test_cpu_quirk_overrides(self):
        cpu = CPU(State(), mode=MODE_LEGACY, shift_quirks=False, sys_quirks=True)
        self.assertFalse(cpu.shift_quirks)
        self.assertTrue(cpu.sys_quirks)
        self.assertFalse(cpu.load_quirks)

    def test_cpu_instances_independent(self):
        other = CPU(State())
        self._check_opcode(0x6155)
        self.assertEqual(0x00, other.state.registers[0x1])
        self.assertEqual(0x200, other.state.program_counter)

    def test_cpu_tick_timers(self):
        self.state.delay_timer = 10
        self.state.sound_timer = 3
        self.cpu.tick_timers(100000)
        self.assertEqual(5, self.state.delay_timer)
        self.assertEqual(0, self.state.sound_timer)
        self.assertFalse(self.cpu.sound_active)
