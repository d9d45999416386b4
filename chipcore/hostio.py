#!/usr/bin/env python3

"""
Host I/O Functionality

Loads ROM binaries from the host filesystem.  The CPU itself only ever sees
bytes, so anything that can produce them (a file, a GUI, a test) will do.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Loader:
    def load_binary(self, filename):
        # Missing files raise FileNotFoundError, which is left for the caller to report
        with open(filename, "rb") as rom_file:
            return rom_file.read()
