"""
Apocapalette Projects

Multi-section project records, color merging and .soc swatch export.
"""

from .models import (
    PROJECT_SCHEMA_VERSION,
    Project,
    ProjectColor,
    ProjectColorEntry,
    ProjectSection,
    ProjectSettings,
    normalize_project_mode,
    to_generator_mode,
)
from .merge import collect_project_colors, merge_project_colors
from .sections import ROLE_TOKEN_PATHS, build_section_snapshot
from .soc import PaletteColor, generate_soc, process_colors, sanitize_swatch_name

__all__ = [
    "PROJECT_SCHEMA_VERSION",
    "Project",
    "ProjectColor",
    "ProjectColorEntry",
    "ProjectSection",
    "ProjectSettings",
    "normalize_project_mode",
    "to_generator_mode",
    "collect_project_colors",
    "merge_project_colors",
    "ROLE_TOKEN_PATHS",
    "build_section_snapshot",
    "PaletteColor",
    "generate_soc",
    "process_colors",
    "sanitize_swatch_name",
]
