"""
Apocapalette Colors Module

Color space conversions, WCAG contrast, harmony hue sets and contrast
convergence shared by token synthesis, mood boards and project merging.
"""

__version__ = "1.0.0"
