"""Installed-application inventory for macOS built from system_profiler plists."""

__version__ = "0.1.0"
