#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

A terminal only delivers characters.  It has no idea when a key goes down or
comes back up, so both have to be faked: a character counts as a press, and the
key is released once that character hasn't been seen for a short while.  Held
keys keep pushing the release back through keyboard auto-repeat.

getch() blocks, so it runs on a daemon thread.  That thread only ever puts hex
keys on a queue; the Keypad is touched from the main thread alone, in
process_messages.

ESC (char 27) or CTRL+C (char 3) quits.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Event, Thread
from time import monotonic
from .i_null import Inputs as InputsBase

KEY_HOLD_TIME = 0.2  # Seconds a key stays down after its character was last seen
QUIT_CHARS = (27, 3)
QUIT = None  # Queued to ask the main thread to quit


def read_keys(screen, keymap_dict, key_queue, stopping):
    while not stopping.is_set():
        char = ord(chr(screen.getch()).lower())

        if char in QUIT_CHARS:
            key_queue.put(QUIT)
            return

        hex_key = keymap_dict.get(char)

        if hex_key is not None:
            try:
                key_queue.put_nowait(hex_key)
            except queue.Full:
                pass  # The main thread is behind, and a repeat will arrive soon anyway


class Inputs(InputsBase):
    def __init__(self, keymap, renderer, keypad):
        super().__init__(keymap, renderer, keypad, force_lowercase=True)

        self.release_times = {}  # {hex key: time it will be released}
        self.key_queue = queue.Queue(16)
        self.stopping = Event()
        self.thread = Thread(
            target=read_keys,
            args=(renderer.get_curses_screen(), self.keymap_dict, self.key_queue, self.stopping),
            daemon=True  # getch() may never return, so don't hold up the interpreter exiting
        )
        self.thread.start()

    def process_messages(self):
        now = monotonic()

        while True:
            try:
                hex_key = self.key_queue.get_nowait()
            except queue.Empty:
                break

            if hex_key is QUIT:
                return True

            self.release_times[hex_key] = now + KEY_HOLD_TIME
            self.keypad.set_key(hex_key, True)

        for hex_key, release_time in list(self.release_times.items()):
            if release_time <= now:
                del self.release_times[hex_key]
                self.keypad.set_key(hex_key, False)

        return False

    def shutdown(self):
        # The thread notices on its next character.  Don't wait for it.
        self.stopping.set()
