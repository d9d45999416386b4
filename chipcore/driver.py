#!/usr/bin/env python3

"""
Real-time Driver

Runs a CPU against the host: processes inputs and refreshes the display at
60Hz, reports how much real time has passed to the timers, steps the CPU, and
then waits so the CPU runs at the requested clock speed.

If the CPU reports it is waiting for a key, the loop just carries on.  Inputs
and the display keep being serviced, and the next step checks for the key
again.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_NAME

DISPLAY_FREQ = 60.0  # 60Hz emulated display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
DEFAULT_CLOCK_SPEED = 1000  # Operations per second


class Driver:
    def __init__(self, cpu, renderer, inputs, clock_speed=None, clock=perf_counter):
        self.cpu = cpu
        self.renderer = renderer
        self.inputs = inputs
        self.clock = clock

        # User can specify 0 for infinite
        auto_clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed
        self.core_interval = None if auto_clock_speed <= 0 else 1.0 / auto_clock_speed

        # Timer-related vars
        self.last_micros = None

        # Performance-related vars
        self.next_display_update_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0
        self.report_perf()

    def run(self, max_steps=None):
        # Runs until the inputs ask to quit, or max_steps instructions have been stepped.  Returns the steps taken.
        steps = 0

        while max_steps is None or steps < max_steps:
            this_time = self.clock()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    break

                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.refresh_framebuffer()
                self.perf_counter_fps += 1

            # Timers follow real time, however fast or slow the CPU is going
            this_micros = int(this_time * 1000000)

            if self.last_micros is not None:
                self.cpu.tick_timers(max(0, this_micros - self.last_micros))

            self.last_micros = this_micros
            self.cpu.step()
            steps += 1
            self.perf_counter_ops += 1

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while self.clock() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

        # Show whatever was drawn last before handing back
        self.refresh_framebuffer()
        return steps

    def refresh_framebuffer(self):
        # Render pending screen updates.  Should be called whenever there will be a pause, a quit, or the display
        # refresh interval expires.
        self.renderer.refresh_display(self.cpu.state.framebuffer)

    def report_perf(self, fps=0, ops=0):
        sound = " - BEEP" if self.cpu.sound_active else ""
        self.renderer.set_title("{} - {} FPS, {} OPS{}".format(APP_NAME, fps, ops, sound))
