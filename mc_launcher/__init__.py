"""
mc_launcher package
-------------------
Container entrypoint for Minecraft servers on Linux / Docker.
Selects and installs a Temurin JDK, installs or updates the requested
server flavor (Paper, NeoForge or a generic server jar), writes the files
the server expects and runs it in the foreground.
"""

__version__ = "0.1.0"
