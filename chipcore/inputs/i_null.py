#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Plugins never decide what a host key means.  The keymap (16 comma-separated
decimals, one per hex key 0-F) is turned into a lookup here, and every press
and release that matches it is forwarded to the emulated Keypad.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class InputsError(Exception):
    pass


def parse_keymap(keymap, force_lowercase=False):
    # Returns {host key code: hex key}
    codes = keymap.split(",")

    if len(codes) != 0x10:
        raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

    try:
        codes = [int(code) for code in codes]
    except ValueError:
        raise InputsError("Defined keys are not all integer values") from None

    if force_lowercase:
        # Character-based hosts can't tell 'A' from 'a', so only store one of them
        codes = [ord(chr(code).lower()) for code in codes]

    if len(set(codes)) != len(codes):
        raise InputsError("Duplicate keys defined")

    return {code: hex_key for hex_key, code in enumerate(codes)}


class Inputs:
    def __init__(self, keymap, renderer, keypad, force_lowercase=False):
        self.keymap_dict = parse_keymap(keymap, force_lowercase)
        self.renderer = renderer
        self.keypad = keypad

    def host_key(self, code, pressed):
        # Forward a host key to the keypad if it's mapped.  Returns whether it was.
        hex_key = self.keymap_dict.get(code)

        if hex_key is None:
            return False

        self.keypad.set_key(hex_key, pressed)
        return True

    def process_messages(self):
        return False  # Don't exit the program

    def shutdown(self):
        pass
