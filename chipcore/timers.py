#!/usr/bin/env python3

"""
Delay and Sound Timers

Both timers count down towards zero at 60Hz, no matter how fast or slow
instructions are being executed.  The caller reports how much wall-clock time
has passed, and each whole 60Hz tick in that time takes one off each timer.

Time left over from a partial tick is carried into the next call, so a host
calling very frequently with tiny deltas still sees the timers run at the
correct rate.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import TIMER_TICK_MICROS


class Timers:
    def __init__(self):
        self.reset()

    def reset(self):
        self.delay_timer = 0
        self.sound_timer = 0
        self.carry_micros = 0

    def tick(self, elapsed_micros):
        if elapsed_micros < 0:
            raise ValueError("Elapsed time cannot be negative")

        ticks, self.carry_micros = divmod(self.carry_micros + int(elapsed_micros), TIMER_TICK_MICROS)

        if ticks:
            self.delay_timer = max(0, self.delay_timer - ticks)
            self.sound_timer = max(0, self.sound_timer - ticks)

        return ticks

    @property
    def sound_active(self):
        return self.sound_timer > 0
