#!/usr/bin/env python3

"""
PyGame Input Plugin

PyGame reports real key down and key up events, so the Keypad sees presses and
releases exactly as they happen.  Polling is left to the driver, which only
asks at 60Hz.

ESC or closing the window quits.  Shutting PyGame down is left to the Renderer.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def process_messages(self):
        quit_program = False

        # Drain the whole queue even after a quit, so no release is left behind
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_program = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    quit_program = True
                else:
                    self.host_key(event.key, True)
            elif event.type == pygame.KEYUP:
                self.host_key(event.key, False)

        return quit_program
