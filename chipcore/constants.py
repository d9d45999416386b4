#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "ChipCore Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout
MEM_SIZE = 0x1000
ADDR_MASK = 0xFFF      # Addresses wrap at the top of the 4K address space
INDEX_MASK = 0xFFFF    # The index register itself is 16 bits wide
FONT_BASE = 0x000
PROGRAM_BASE = 0x200
MAX_PROGRAM_SIZE = MEM_SIZE - PROGRAM_BASE
STACK_SIZE = 16

# Display
VID_WIDTH = 64
VID_HEIGHT = 32

# Timers tick at 60Hz, i.e. roughly once every 16.667ms
TIMER_TICK_MICROS = 16667

# Standard hex digit font, 5 bytes per glyph
FONT = bytes((
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
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
FONT_GLYPH_SIZE = 5

# Instruction kinds produced by the decoder
OP_UNKNOWN = "???"
OP_CLS = "CLS"
OP_RET = "RET"
OP_JP = "JP"
OP_CALL = "CALL"
OP_SE = "SE"
OP_SNE = "SNE"
OP_SE_REG = "SE_reg"
OP_LD = "LD"
OP_ADD = "ADD"
OP_LD_REG = "LD_reg"
OP_OR = "OR"
OP_AND = "AND"
OP_XOR = "XOR"
OP_ADD_REG = "ADD_reg"
OP_SUB = "SUB"
OP_SHR = "SHR"
OP_SUBN = "SUBN"
OP_SHL = "SHL"
OP_SNE_REG = "SNE_reg"
OP_LD_I = "LD_I"
OP_JP_REG0 = "JP_reg0"
OP_RND = "RND"
OP_DRW = "DRW"
OP_SKP = "SKP"
OP_SKNP = "SKNP"
OP_LD_REG_DT = "LD_reg_DT"
OP_LD_REG_K = "LD_reg_K"
OP_LD_DT = "LD_DT"
OP_LD_ST = "LD_ST"
OP_ADD_I_REG = "ADD_I_reg"
OP_LD_F_REG = "LD_F_reg"
OP_LD_B_REG = "LD_B_reg"
OP_LD_I_REG = "LD_I_reg"
OP_LD_REG_I = "LD_reg_I"

# Results of a single CPU step
STEP_EXECUTED = 0
STEP_AWAITING_KEY = 1

# Quirk presets
MODE_LEGACY = 0
MODE_MODERN = 1

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Startup
SUPPORTED_MODES = {
    "legacy": MODE_LEGACY,  # Shift Vx in place, leave VF alone on logic ops, don't move I on register dumps
    "modern": MODE_MODERN   # Shift Vy into Vx, reset VF on logic ops, advance I past register dumps
}

# CPU quirks (not including display wrapping)
CPU_QUIRKS = ["shift", "logic", "load", "index_overflow", "jump", "sys", "key_release"]
