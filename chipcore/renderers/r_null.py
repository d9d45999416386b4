#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you only want to see
debug output.  Without a renderer, performance data will also not be shown.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.frames_drawn = 0
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def refresh_display(self, framebuffer):
        # Returns True if the framebuffer changed since the last refresh, and so needs drawing
        vid_size = framebuffer.get_vid_size()

        if vid_size != (self.width, self.height):
            self.set_resolution(*vid_size)
            framebuffer.take_dirty()
            content_changed = True
        else:
            content_changed = framebuffer.take_dirty()

        if content_changed:
            self.frames_drawn += 1

        return content_changed

    def set_title(self, title):
        pass

    def shutdown(self):
        pass
