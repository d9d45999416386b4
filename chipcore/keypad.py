#!/usr/bin/env python3

"""
Keypad Emulator

Holds the state of the 16 hex keys (0-F).  Only the input plugins write here,
via set_key, and the CPU reads it for SKP/SKNP.

The key-wait instruction needs a discrete "a key changed" signal rather than
raw polling, so the last press and the last release are also latched.  These
latches have a 'reset' switch (setup_keypress) that must be called before
waiting.  A release only latches for a key pressed since that reset, so a key
already held when the wait starts has to go down again.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.key_down = [False] * 0x10
        self.last_press = None
        self.last_release = None
        self.pressed_since_setup = set()  # Only these keys can latch a release

    def set_key(self, key, pressed):
        if not 0 <= key <= 0xF:
            raise KeypadError("Key {} is out of range.  Keys must be 0-15".format(key))

        pressed = bool(pressed)

        if pressed and not self.key_down[key]:
            self.last_press = key
            self.pressed_since_setup.add(key)
        elif not pressed and self.key_down[key] and key in self.pressed_since_setup:
            # A key already held when the wait started has to go down again before its release counts
            self.last_release = key

        self.key_down[key] = pressed

    def is_key_down(self, key):
        return self.key_down[key & 0xF]

    def setup_keypress(self):
        self.last_press = None
        self.last_release = None
        self.pressed_since_setup.clear()

    def get_keypress(self, on_release=True):
        return self.last_release if on_release else self.last_press

    def clear(self):
        self.key_down = [False] * 0x10
        self.setup_keypress()
