"""
CLI session settings.

Set once by the top-level callback in cli/main.py and read by commands.
"""

from wglinkmon.models.enums import OutputFormat

OUTPUT_FORMAT: OutputFormat = OutputFormat.TABLE
