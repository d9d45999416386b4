#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) when the driver asks a renderer to refresh.  The core never
talks to a renderer directly, so it can run headless at full speed.

Programs for this system cannot write directly into video RAM.  Instead,
sprites are drawn to the screen using an XOR method: each set bit in a sprite
row toggles the pixel underneath it.  Drawing the same sprite twice in the
same place restores what was there before.

Collisions (where any pixel was set, but was unset by an XOR) are reported as
a single flag for the whole sprite.

The sprite's origin always wraps onto the screen.  Pixels beyond the right or
bottom edge are clipped, unless wrapping is allowed, in which case they
reappear on the opposite side.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer():
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT, allow_wrapping=False):
        self.allow_wrapping = allow_wrapping
        self.vram = RAM()
        self.dirty = True
        self.resize_vid(vid_width, vid_height)

    def resize_vid(self, vid_width, vid_height):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display must be at least 1x1 pixels")

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram.resize(self.vid_size)
        self.dirty = True

    def clear(self):
        self.vram.clear()
        self.dirty = True

    def xor_pixel(self, x, y):
        # Returns flagging any collision, or None if the pixel was clipped

        if self.allow_wrapping:
            x %= self.vid_width
            y %= self.vid_height
        elif x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 1)
        self.dirty = True

        return pixel != 0

    def draw(self, x, y, sprite_bytes):
        vx_pos = x % self.vid_width
        vy_pos = y % self.vid_height
        collided = False

        for row, spr_data in enumerate(sprite_bytes):
            scr_y = row + vy_pos

            if scr_y >= self.vid_height and not self.allow_wrapping:
                break  # Every remaining row is off the bottom

            for col in range(8):
                if spr_data & (0x80 >> col):
                    if self.xor_pixel(col + vx_pos, scr_y):
                        # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                        collided = True

        return collided

    def get_pixel(self, x, y):
        return self.vram.read(y * self.vid_width + x)

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    @property
    def pixels(self):
        # Row-major, one byte (0 or 1) per pixel
        return self.vram.mem.toreadonly()

    def take_dirty(self):
        dirty = self.dirty
        self.dirty = False
        return dirty
