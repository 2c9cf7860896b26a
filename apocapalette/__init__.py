"""
Apocapalette Token Core

Design-token synthesis, contrast enforcement, mood boards and project
palette merging.
"""

__version__ = "1.0.0"
