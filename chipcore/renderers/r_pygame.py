#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws the framebuffer onto an SDL window surface via PyGame.  The surface is
allocated at the emulated screen size, and then the contents are stretched
(in the correct aspect ratio using 'Nearest Neighbour' translation) to fit the
window itself.  This means we don't have to draw the same pixel multiple
times.

Only two colours are used: one for pixels that are off, one for pixels that
are on.  Either can be replaced with a user-defined palette.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME


DEFAULT_PALETTE = (0x222222, 0xDDDDDD)  # Pixel off, pixel on


def parse_palette(pygame_palette):
    # "RRGGBB[,RRGGBB]" replaces the first one or two default colours
    colours = list(DEFAULT_PALETTE)

    if pygame_palette is None:
        return colours

    hex_colours = pygame_palette.split(",")

    if len(hex_colours) > len(colours):
        raise RendererError("Too many palette colours defined.")

    for colour_num, hex_colour in enumerate(hex_colours):
        if len(hex_colour) != 6:
            raise RendererError("Palette colours must all be 6 hex digits long.")

        try:
            colours[colour_num] = int(hex_colour, 16)
        except ValueError:
            raise RendererError("Invalid palette colour defined.") from None

    return colours


class Renderer(RendererBase):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        if scale is None:
            scale = 512  # Window width.  The height is always half of it.

        # Parse before opening a window, so a bad palette doesn't leave one behind
        self.rgb_map = [colour.to_bytes(3, "big") for colour in parse_palette(pygame_palette)]
        self.rgb_buffer = None
        self.scaled_size = (scale, scale // 2)

        pygame.display.init()
        self.set_title(APP_NAME)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        super().__init__(scale)

    def set_resolution(self, width, height):
        self.rgb_buffer = memoryview(bytearray(width * height * 3))  # 24-bit
        super().set_resolution(width, height)

    def refresh_display(self, framebuffer):
        content_changed = super().refresh_display(framebuffer)

        if content_changed and self.width and self.height:
            # Translate the 1-bit pixels into the RGB buffer in place to minimise allocations
            rgb_buffer = self.rgb_buffer
            rgb_map = self.rgb_map

            for location, pixel in enumerate(framebuffer.pixels):
                rgb_location = location * 3
                rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]

            # Blit the bytearray straight to the surface, rather than setting pixels one at a time
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

        return content_changed

    def set_title(self, title):
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
