"""ZDC Reference CLI - quick aviation lookups for vZDC controllers."""

__version__ = "0.1.2"
