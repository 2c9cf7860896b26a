"""
Project record models.

Pydantic models for the persisted multi-section project. Loading is
tolerant: malformed hex values are dropped and missing optional fields take
their defaults.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from apocapalette.config import config
from apocapalette.services.colors.colorspace import is_valid_hex, normalize_hex


PROJECT_SCHEMA_VERSION = 1

PROJECT_MODES = ["mono", "analogous", "complementary", "tertiary", "apocalypse"]


def _hex_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and is_valid_hex(value.strip()):
        return normalize_hex(value)
    return None


def normalize_project_mode(mode: Any) -> str:
    """Map any generator or project mode name to its short project form."""
    value = str(mode or "").lower()
    for name in PROJECT_MODES:
        if value.startswith(name[:3]):
            return name
    return "mono"


def to_generator_mode(mode: Any) -> str:
    """Map a project mode to the generator mode name."""
    return {
        "mono": "Monochromatic",
        "analogous": "Analogous",
        "complementary": "Complementary",
        "tertiary": "Tertiary",
        "apocalypse": "Apocalypse",
    }[normalize_project_mode(mode)]


def normalize_section_kind(kind: Any) -> str:
    value = str(kind or "").lower()
    if "character" in value or "people" in value:
        return "people"
    if "state" in value:
        return "state"
    return "season"


class ProjectSettings(BaseModel):
    """Merge settings stored with a project."""
    model_config = ConfigDict(populate_by_name=True)

    neutral_cap: int = Field(
        config.PROJECT_NEUTRAL_CAP, alias="neutralCap", ge=0,
        description="Maximum number of neutral colors kept by the merge"
    )
    max_colors: int = Field(
        config.PROJECT_MAX_COLORS, alias="maxColors", ge=0,
        description="Hard cap on merged colors"
    )
    near_dup_threshold: float = Field(
        config.PROJECT_NEAR_DUP_THRESHOLD, alias="nearDupThreshold", ge=0.0,
        description="CIEDE2000 distance (0-100 scale) below which colors are near-duplicates"
    )
    anchors_always_keep: bool = Field(
        config.PROJECT_ANCHORS_ALWAYS_KEEP, alias="anchorsAlwaysKeep",
        description="Let an anchor color replace a non-anchor near-duplicate"
    )


class ProjectColor(BaseModel):
    """A named ad hoc color in a section."""
    name: str = Field(..., min_length=1)
    hex: str = Field(..., pattern=r"^#[0-9a-f]{6}$")


class ProjectSection(BaseModel):
    """One palette section of a project."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Section identifier")
    label: str = Field("", description="Display label, used as the color name prefix")
    kind: str = Field("season", description="season, people or state")
    base_hex: str = Field(config.DEFAULT_BASE_COLOR, alias="baseHex")
    mode: str = Field("mono", description="Short project mode")
    locked: bool = False
    tokens: Optional[Dict[str, str]] = Field(None, description="Role name to hex")
    colors: Optional[List[ProjectColor]] = None

    @field_validator("kind", mode="before")
    @classmethod
    def _kind(cls, value):
        return normalize_section_kind(value)

    @field_validator("mode", mode="before")
    @classmethod
    def _mode(cls, value):
        return normalize_project_mode(value)

    @field_validator("base_hex", mode="before")
    @classmethod
    def _base_hex(cls, value):
        return _hex_or_none(value) or config.DEFAULT_BASE_COLOR

    @field_validator("tokens", mode="before")
    @classmethod
    def _tokens(cls, value):
        if not isinstance(value, dict):
            return None
        tokens = {str(key): _hex_or_none(hex_value) for key, hex_value in value.items()}
        tokens = {key: hex_value for key, hex_value in tokens.items() if hex_value}
        return tokens or None

    @field_validator("colors", mode="before")
    @classmethod
    def _colors(cls, value):
        if not isinstance(value, list):
            return None
        colors = []
        for item in value:
            if isinstance(item, BaseModel):
                item = item.model_dump()
            if not isinstance(item, dict):
                continue
            name = str(item.get("name") or "").strip()
            hex_value = _hex_or_none(item.get("hex"))
            if name and hex_value:
                colors.append({"name": name, "hex": hex_value})
        return colors or None


class Project(BaseModel):
    """A persisted multi-section project."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(PROJECT_SCHEMA_VERSION, alias="schemaVersion")
    project_name: str = Field("New Project", alias="projectName")
    settings: ProjectSettings = Field(default_factory=ProjectSettings)
    sections: List[ProjectSection] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _legacy_palettes(cls, data):
        if isinstance(data, dict) and "sections" not in data and isinstance(data.get("palettes"), list):
            data = dict(data)
            data["sections"] = data.pop("palettes")
        return data

    @field_validator("settings", mode="before")
    @classmethod
    def _settings(cls, value):
        return value if isinstance(value, (dict, ProjectSettings)) else {}

    @model_validator(mode="after")
    def _section_defaults(self):
        for index, section in enumerate(self.sections):
            if not section.id:
                section.id = f"section-{index + 1}"
            if not section.label:
                section.label = f"Section {index + 1}"
        return self


class ProjectColorEntry(BaseModel):
    """One merged project color."""
    name: str
    hex: str
    is_role: bool = False
    is_anchor: bool = False
    section_label: str = ""
