#!/usr/bin/env python3

"""
Opcode Decoder

Turns a raw 16-bit opcode into an Instruction: the instruction kind plus every
operand field, already extracted.  Decoding never touches machine state, so
the same opcode always decodes the same way.

Lookup order:
    1. Exact 16-bit match (CLS, RET)
    2. First nibble (most families)
    3. For nibbles 0x5/0x8/0x9, bitmask 0xF00F; for 0xE/0xF, bitmask 0xF0FF

Anything left over, including the legacy SYS family (0nnn), decodes to
OP_UNKNOWN.  Deciding what to do with an unknown opcode is left to the CPU.

Operand fields sit in the same place in every opcode:
    n   = Nibble  (bits 0-3)
    kk  = Byte    (bits 0-7)
    nnn = address (bits 0-11)
    x/y = register (bits 8-11 / bits 4-7)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from .constants import (
    OP_UNKNOWN, OP_CLS, OP_RET, OP_JP, OP_CALL, OP_SE, OP_SNE, OP_SE_REG, OP_LD, OP_ADD, OP_LD_REG, OP_OR, OP_AND,
    OP_XOR, OP_ADD_REG, OP_SUB, OP_SHR, OP_SUBN, OP_SHL, OP_SNE_REG, OP_LD_I, OP_JP_REG0, OP_RND, OP_DRW, OP_SKP,
    OP_SKNP, OP_LD_REG_DT, OP_LD_REG_K, OP_LD_DT, OP_LD_ST, OP_ADD_I_REG, OP_LD_F_REG, OP_LD_B_REG, OP_LD_I_REG,
    OP_LD_REG_I
)

Instruction = namedtuple("Instruction", ["op", "opcode", "x", "y", "kk", "nnn", "n"])

# Instructions matched on the full opcode, bitmask 0xFFFF
EXACT_OPS = {
    0x00E0: OP_CLS,
    0x00EE: OP_RET
}

# Instructions identified by their first nibble alone
NIBBLE_OPS = {
    0x1: OP_JP,
    0x2: OP_CALL,
    0x3: OP_SE,
    0x4: OP_SNE,
    0x6: OP_LD,
    0x7: OP_ADD,
    0xA: OP_LD_I,
    0xB: OP_JP_REG0,
    0xC: OP_RND,
    0xD: OP_DRW
}

# Sub-opcode families and the bitmask that selects between their members
FAMILY_MASKS = {
    0x5: 0xF00F,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xE: 0xF0FF,
    0xF: 0xF0FF
}

MASKED_OPS = {
    # Instructions beginning with nibble 0x5/0x8/0x9, bitmask 0xF00F
    0x5000: OP_SE_REG,
    0x8000: OP_LD_REG,
    0x8001: OP_OR,
    0x8002: OP_AND,
    0x8003: OP_XOR,
    0x8004: OP_ADD_REG,
    0x8005: OP_SUB,
    0x8006: OP_SHR,
    0x8007: OP_SUBN,
    0x800E: OP_SHL,
    0x9000: OP_SNE_REG,
    # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
    0xE09E: OP_SKP,
    0xE0A1: OP_SKNP,
    0xF007: OP_LD_REG_DT,
    0xF00A: OP_LD_REG_K,
    0xF015: OP_LD_DT,
    0xF018: OP_LD_ST,
    0xF01E: OP_ADD_I_REG,
    0xF029: OP_LD_F_REG,
    0xF033: OP_LD_B_REG,
    0xF055: OP_LD_I_REG,
    0xF065: OP_LD_REG_I
}

# Disassembly templates, formatted with the Instruction's fields
MNEMONICS = {
    OP_UNKNOWN: "??? 0x{opcode:04x}",
    OP_CLS: "CLS",
    OP_RET: "RET",
    OP_JP: "JP 0x{nnn:03x}",
    OP_CALL: "CALL 0x{nnn:03x}",
    OP_SE: "SE V{x:01x}, 0x{kk:02x}",
    OP_SNE: "SNE V{x:01x}, 0x{kk:02x}",
    OP_SE_REG: "SE V{x:01x}, V{y:01x}",
    OP_LD: "LD V{x:01x}, 0x{kk:02x}",
    OP_ADD: "ADD V{x:01x}, 0x{kk:02x}",
    OP_LD_REG: "LD V{x:01x}, V{y:01x}",
    OP_OR: "OR V{x:01x}, V{y:01x}",
    OP_AND: "AND V{x:01x}, V{y:01x}",
    OP_XOR: "XOR V{x:01x}, V{y:01x}",
    OP_ADD_REG: "ADD V{x:01x}, V{y:01x}",
    OP_SUB: "SUB V{x:01x}, V{y:01x}",
    OP_SHR: "SHR V{x:01x}, V{y:01x}",
    OP_SUBN: "SUBN V{x:01x}, V{y:01x}",
    OP_SHL: "SHL V{x:01x}, V{y:01x}",
    OP_SNE_REG: "SNE V{x:01x}, V{y:01x}",
    OP_LD_I: "LD I, 0x{nnn:03x}",
    OP_JP_REG0: "JP V0, 0x{nnn:03x}",
    OP_RND: "RND V{x:01x}, 0x{kk:02x}",
    OP_DRW: "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    OP_SKP: "SKP V{x:01x}",
    OP_SKNP: "SKNP V{x:01x}",
    OP_LD_REG_DT: "LD V{x:01x}, DT",
    OP_LD_REG_K: "LD V{x:01x}, K",
    OP_LD_DT: "LD DT, V{x:01x}",
    OP_LD_ST: "LD ST, V{x:01x}",
    OP_ADD_I_REG: "ADD I, V{x:01x}",
    OP_LD_F_REG: "LD F, V{x:01x}",
    OP_LD_B_REG: "LD B, V{x:01x}",
    OP_LD_I_REG: "LD [I], V{x:01x}",
    OP_LD_REG_I: "LD V{x:01x}, [I]"
}


def classify(opcode):
    op = EXACT_OPS.get(opcode)

    if op is not None:
        return op

    family = opcode >> 12
    op = NIBBLE_OPS.get(family)

    if op is not None:
        return op

    mask = FAMILY_MASKS.get(family)

    if mask is None:
        # Only nibble 0x0 gets here, and its exact matches were handled above
        return OP_UNKNOWN

    return MASKED_OPS.get(opcode & mask, OP_UNKNOWN)


def decode(opcode):
    opcode &= 0xFFFF

    return Instruction(
        op=classify(opcode),
        opcode=opcode,
        x=(opcode & 0xF00) >> 8,
        y=(opcode & 0xF0) >> 4,
        kk=opcode & 0xFF,
        nnn=opcode & 0xFFF,
        n=opcode & 0xF
    )


def disassemble(instruction):
    return MNEMONICS[instruction.op].format(**instruction._asdict())
