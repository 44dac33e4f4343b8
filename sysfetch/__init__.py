"""
Terminal system fetch: gathers host information and renders it next to ASCII art.
"""

__all__ = ["records", "art", "config", "formatting", "parsers", "platform_probes", "system_state", "cli"]
__version__ = "0.1.0"
