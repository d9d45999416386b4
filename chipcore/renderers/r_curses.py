#!/usr/bin/env python3

"""
Curses Renderer Plugin

Draws the framebuffer in a standard Linux-style TTY Terminal, the Windows
Command Prompt, or PowerShell.

Each pixel that is on is drawn as inverted spaces.  The top line of the pad is
reserved for the title (which carries performance data).
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
import _curses
from .r_null import Renderer as RendererBase


class Renderer(RendererBase):
    def __init__(self, scale=None, curses_cursor_mode=0, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch if not supplied, or set to default

        self.pixel_char = " " * scale
        self.pad = None
        self.title = ""
        self.last_screen_height = -1
        self.last_screen_width = -1
        self.cursor_mode = curses_cursor_mode
        self.screen = curses.initscr()
        curses.curs_set(self.cursor_mode)
        curses.noecho()
        curses.cbreak()
        super().__init__(scale)

    def set_resolution(self, width, height):
        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.  One more line on top holds the title.
        self.pad = curses.newpad(height + 2, width * self.scale + 1)
        super().set_resolution(width, height)

    def refresh_display(self, framebuffer):
        content_changed = super().refresh_display(framebuffer)
        screen_height, screen_width = self.screen.getmaxyx()  # This doesn't seem to ever change/work on Windows?!

        if screen_height != self.last_screen_height or screen_width != self.last_screen_width:
            # Screen resolution changed, redraw everything
            self.screen.clear()

            if hasattr(curses, "resizeterm"):
                # This doesn't work on Windows
                curses.resizeterm(screen_height, screen_width)

            self.screen.refresh()
            self.last_screen_height = screen_height
            self.last_screen_width = screen_width
            content_changed = True

        if content_changed:
            width = self.width
            pixels = framebuffer.pixels
            self._draw_title()

            for location, pixel in enumerate(pixels):
                y, x = divmod(location, width)
                self.pad.addstr(y + 1, x * self.scale, self.pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

            self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)

        return content_changed

    def _draw_title(self):
        title_width = self.width * self.scale
        self.pad.addstr(0, 0, self.title[:title_width].ljust(title_width), curses.A_REVERSE)

    def set_title(self, title):
        self.title = title

        if self.pad:
            self._draw_title()

        super().set_title(title)

    def shutdown(self):
        if self.pad:
            del self.pad
            self.pad = None

        curses.nocbreak()
        curses.echo()

        if self.cursor_mode != 1:
            try:
                curses.curs_set(1)
            except _curses.error:
                pass

        curses.endwin()
        super().shutdown()

    # No Superclass for this Curses-specific method

    def get_curses_screen(self):
        return self.screen
