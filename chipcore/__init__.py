#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, SUPPORTED_MODES, CPU_QUIRKS
from .cpu import CPU
from .debugger import Debugger
from .driver import Driver
from .hostio import Loader
from .state import State


class StartupError(Exception):
    pass


def quirk_settings(args):
    # 0/1 from the command line becomes False/True, and None leaves the mode's preset alone
    settings = {}

    for cpu_quirk in CPU_QUIRKS:
        label = "{}_quirks".format(cpu_quirk)
        setting = args[label]
        settings[label] = None if setting is None else bool(setting)

    return settings


def load_plugins(opt_renderer):
    # Returns the (Renderer, Inputs) classes to use.  With no choice made, try PyGame first, then Curses.
    # pylint: disable=unused-import, import-outside-toplevel
    if opt_renderer == "null":
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        return Renderer, Inputs

    if opt_renderer in (None, "pygame"):
        try:
            import pygame  # noqa: F401
        except ImportError:
            if opt_renderer == "pygame":
                raise StartupError("PyGame does not appear to be installed.") from None
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer
            return Renderer, Inputs

    try:
        import curses  # noqa: F401
    except ImportError:
        if opt_renderer is None:
            raise StartupError("Neither PyGame nor Curses (or Windows-Curses) appear to be installed.") from None

        raise StartupError("Curses (or Windows-Curses) does not appear to be installed.") from None

    from .inputs.i_curses import Inputs
    from .renderers.r_curses import Renderer
    return Renderer, Inputs


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    Renderer, Inputs = load_plugins(args["renderer"])  # pylint: disable=invalid-name

    # The machine: state with the font already in place, and a CPU in the chosen mode
    state = State(allow_wrapping=bool(args["screen_wrap_quirks"]))
    debugger = Debugger()
    debugger.set_live(args["debug"])
    cpu = CPU(state, debugger, mode=SUPPORTED_MODES[args["mode"]], seed=args["seed"], **quirk_settings(args))
    cpu.load(Loader().load_binary(args["filename"]))

    # Host side.  Inputs are linked to the renderer in case it provides inputs too.
    renderer = Renderer(
        scale=args["scale"],
        pygame_palette=args["pygame_palette"],
        curses_cursor_mode=args["curses_cursor_mode"]
    )
    inputs = Inputs(args["keymap"], renderer, state.keypad)

    try:
        Driver(cpu, renderer, inputs, clock_speed=args["clock_speed"]).run()
    finally:
        # __del__ cannot be relied upon when using PyPy, so shut the plugins down here
        inputs.shutdown()
        renderer.shutdown()
