"""pcbcoat - Compile coating layouts into dispensing-head G-code.

pcbcoat takes shapes laid out on a circuit-board work area, each annotated
with a coating intent (fill, outline or masking), and produces an ordered,
mask-aware tool path serialized as G-code for a liquid-dispensing head.

Example:
    $ pcbcoat board.json

This will create board.gcode next to the project file.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
