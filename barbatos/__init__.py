"""
Barbatos - uniform cache contract with Redis and programmable mock backends.
"""

from barbatos.context import BACKGROUND, Context

__version__ = "1.0.0"

__all__ = ["Context", "BACKGROUND"]
