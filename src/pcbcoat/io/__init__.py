"""Project I/O layer for pcbcoat.

This module handles reading layout projects saved by the editor and
writing generated G-code. It provides a clean abstraction layer between
the editor's JSON records and the domain models.

Key responsibilities:
- Load project files (shapes, coating settings, embedded snippets)
- Convert camelCase JSON records to domain models
- Load standalone snippet files
- Write G-code with the default naming convention

Key classes:
- ProjectReader: Load projects and extract shapes
- GCodeWriter: Save generated G-code
"""

from pcbcoat.io.reader import ProjectReader, read_snippets
from pcbcoat.io.writer import GCodeWriter

__all__ = [
    "GCodeWriter",
    "ProjectReader",
    "read_snippets",
]
