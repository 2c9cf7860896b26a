"""
Project color merging.

Flattens every section of a project into one deduplicated, neutral-throttled
and ordered color list.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from apocapalette.services.colors.colorspace import hex_to_hsl, perceptual_distance, relative_luminance
from .models import Project, ProjectColorEntry, ProjectSettings


NEUTRAL_SATURATION = 12

_SETTING_ALIASES = {
    "neutralCap": "neutral_cap",
    "maxColors": "max_colors",
    "nearDupThreshold": "near_dup_threshold",
    "anchorsAlwaysKeep": "anchors_always_keep",
}


def _is_neutral(entry: ProjectColorEntry) -> bool:
    return hex_to_hsl(entry.hex).s < NEUTRAL_SATURATION


def _resolve_settings(project: Project, overrides: Optional[Dict[str, Any]]) -> ProjectSettings:
    if not overrides:
        return project.settings
    updates = {key: value for key, value in overrides.items() if value is not None}
    merged = project.settings.model_dump()
    for key, value in updates.items():
        field_name = _SETTING_ALIASES.get(key, key)
        if field_name in merged:
            merged[field_name] = value
    return ProjectSettings(**merged)


def collect_project_colors(project: Project) -> List[ProjectColorEntry]:
    """
    Gather role tokens and ad hoc colors of every section, in section order.

    Ad hoc colors whose hex already appears among the section's token values
    are skipped. A color is an anchor when it equals the section's base color.
    """
    entries: List[ProjectColorEntry] = []
    for section in project.sections:
        tokens = section.tokens or {}
        for role, hex_value in tokens.items():
            entries.append(ProjectColorEntry(
                name=f"{section.label} / {role}",
                hex=hex_value,
                is_role=True,
                is_anchor=hex_value == section.base_hex,
                section_label=section.label,
            ))
        token_values = set(tokens.values())
        for color in section.colors or []:
            if color.hex in token_values:
                continue
            entries.append(ProjectColorEntry(
                name=f"{section.label} / {color.name}",
                hex=color.hex,
                is_role=False,
                is_anchor=color.hex == section.base_hex,
                section_label=section.label,
            ))
    return entries


def _dedupe(entries: List[ProjectColorEntry], settings: ProjectSettings) -> List[ProjectColorEntry]:
    kept: List[ProjectColorEntry] = []
    for entry in entries:
        for index, existing in enumerate(kept):
            if perceptual_distance(entry.hex, existing.hex) < settings.near_dup_threshold:
                if entry.is_anchor and settings.anchors_always_keep and not existing.is_anchor:
                    kept[index] = entry
                break
        else:
            kept.append(entry)
    return kept


def _throttle_neutrals(entries: List[ProjectColorEntry], cap: int) -> List[ProjectColorEntry]:
    neutrals = [entry for entry in entries if _is_neutral(entry)]
    colorful = [entry for entry in entries if not _is_neutral(entry)]
    if len(neutrals) > cap:
        role_neutrals = [entry for entry in neutrals if entry.is_role][:cap]
        others = [entry for entry in neutrals if not entry.is_role]
        neutrals = role_neutrals + others[:cap - len(role_neutrals)]
    return colorful + neutrals


def _sort_key(entry: ProjectColorEntry):
    return (
        not entry.is_role,
        not entry.is_anchor,
        hex_to_hsl(entry.hex).h,
        -relative_luminance(entry.hex),
    )


def merge_project_colors(
    project: Project,
    overrides: Optional[Dict[str, Any]] = None
) -> List[ProjectColorEntry]:
    """
    Merge all section colors of a project into one palette.

    Steps: collect, drop near-duplicates (CIEDE2000 below the threshold,
    anchors may replace non-anchors), throttle neutrals (HSL saturation
    below 12%, role neutrals first), truncate to max_colors, then sort
    roles first, anchors next, then by hue ascending and luminance
    descending.

    Args:
        project: Project to merge
        overrides: Optional settings overriding the project's own
            (snake_case or camelCase keys; None values are ignored)

    Returns:
        Ordered list of ProjectColorEntry
    """
    settings = _resolve_settings(project, overrides)
    entries = collect_project_colors(project)
    kept = _dedupe(entries, settings)
    capped = _throttle_neutrals(kept, settings.neutral_cap)[:settings.max_colors]
    merged = sorted(capped, key=_sort_key)

    logger.bind(
        project=project.project_name,
        collected=len(entries),
        merged=len(merged),
    ).debug("Project colors merged")
    return merged
