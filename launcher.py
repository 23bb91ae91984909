#!/usr/bin/env python3
"""
Minecraft server container entrypoint.

Reads MINECRAFT_VERSION, Type, Min_Ram, Max_Ram, JAVA_VERSION_OVERRIDE and
NEO_VERSION_OVERRIDE from the environment, installs what is missing under
./java and ./server and runs the server in the foreground.
"""

import sys

from mc_launcher.cli import main

if __name__ == "__main__":
    sys.exit(main())
