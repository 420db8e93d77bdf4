"""View Settings - Typed per-view configuration with two-level merge.

Each view mode owns one frozen settings dataclass. ``ViewSettingsMap`` holds
exactly one entry per ``ViewMode`` and is the only shape the session store
and the layouts accept. Wire payloads use the view id as the outer key and
camelCase setting names as the inner keys.
"""

import re
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar


class ViewMode(Enum):
    """Available visualizations."""

    LIST = "list"
    CLOUD = "cloud"
    D3CLOUD = "d3cloud"
    ANIMATED = "animated"
    TREE = "tree"
    FORCE = "force"
    BUBBLE = "bubble"
    HEATMAP = "heatmap"
    PIE = "pie"


DEFAULT_VIEW_MODE = ViewMode.CLOUD


@dataclass(frozen=True)
class ForceSettings:
    link_distance: float = 80
    charge_strength: float = -120
    min_radius: float = 5
    max_radius: float = 20
    show_labels: bool = True


@dataclass(frozen=True)
class CloudSettings:
    min_font: float = 14
    max_font: float = 52
    cycle_interval: int = 5000  # ms between auto-play steps
    rotation_speed: float = 0.1  # radians per second of idle spin


@dataclass(frozen=True)
class D3CloudSettings:
    min_font: float = 12
    max_font: float = 60
    word_padding: float = 4


@dataclass(frozen=True)
class AnimatedSettings:
    min_font: float = 12
    max_font: float = 60
    cycle_interval: int = 5000
    word_padding: float = 4


@dataclass(frozen=True)
class BubbleSettings:
    pack_padding: float = 3
    show_group_labels: bool = True


@dataclass(frozen=True)
class HeatmapSettings:
    max_nodes: int = 40
    label_margin: float = 80


@dataclass(frozen=True)
class TreeSettings:
    min_radius: float = 4
    max_radius: float = 16
    show_labels: bool = True


@dataclass(frozen=True)
class ListSettings:
    pass


@dataclass(frozen=True)
class PieSettings:
    pass


ViewSettings = (
    ForceSettings
    | CloudSettings
    | D3CloudSettings
    | AnimatedSettings
    | BubbleSettings
    | HeatmapSettings
    | TreeSettings
    | ListSettings
    | PieSettings
)

SETTINGS_TYPES: dict[ViewMode, type] = {
    ViewMode.LIST: ListSettings,
    ViewMode.CLOUD: CloudSettings,
    ViewMode.D3CLOUD: D3CloudSettings,
    ViewMode.ANIMATED: AnimatedSettings,
    ViewMode.TREE: TreeSettings,
    ViewMode.FORCE: ForceSettings,
    ViewMode.BUBBLE: BubbleSettings,
    ViewMode.HEATMAP: HeatmapSettings,
    ViewMode.PIE: PieSettings,
}

_missing = set(ViewMode) - set(SETTINGS_TYPES)
if _missing:
    raise RuntimeError(f"View modes without settings: {sorted(m.value for m in _missing)}")


# ---------------------------------------------------------------------------
# Setting definitions (drive slider/toggle controls)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SliderDef:
    label: str
    min: float
    max: float
    step: float
    type: ClassVar[str] = "slider"


@dataclass(frozen=True)
class ToggleDef:
    label: str
    type: ClassVar[str] = "toggle"


SettingDef = SliderDef | ToggleDef

SETTING_DEFS: dict[ViewMode, dict[str, SettingDef]] = {
    ViewMode.FORCE: {
        "link_distance": SliderDef("Link Distance", 20, 200, 10),
        "charge_strength": SliderDef("Charge Strength", -300, -20, 10),
        "min_radius": SliderDef("Min Node Size", 2, 12, 1),
        "max_radius": SliderDef("Max Node Size", 12, 40, 1),
        "show_labels": ToggleDef("Show Labels"),
    },
    ViewMode.CLOUD: {
        "min_font": SliderDef("Min Font Size", 8, 30, 1),
        "max_font": SliderDef("Max Font Size", 30, 80, 2),
        "cycle_interval": SliderDef("Cycle Speed (ms)", 1000, 15000, 500),
        "rotation_speed": SliderDef("Rotation Speed", 0, 0.5, 0.02),
    },
    ViewMode.D3CLOUD: {
        "min_font": SliderDef("Min Font Size", 8, 30, 1),
        "max_font": SliderDef("Max Font Size", 30, 100, 2),
        "word_padding": SliderDef("Word Padding", 0, 20, 1),
    },
    ViewMode.ANIMATED: {
        "min_font": SliderDef("Min Font Size", 8, 30, 1),
        "max_font": SliderDef("Max Font Size", 30, 100, 2),
        "cycle_interval": SliderDef("Cycle Speed (ms)", 1000, 15000, 500),
        "word_padding": SliderDef("Word Padding", 0, 20, 1),
    },
    ViewMode.BUBBLE: {
        "pack_padding": SliderDef("Pack Padding", 0, 20, 1),
        "show_group_labels": ToggleDef("Show Group Labels"),
    },
    ViewMode.HEATMAP: {
        "max_nodes": SliderDef("Max Nodes", 10, 100, 5),
        "label_margin": SliderDef("Label Margin", 40, 150, 5),
    },
    ViewMode.TREE: {
        "min_radius": SliderDef("Min Node Size", 2, 10, 1),
        "max_radius": SliderDef("Max Node Size", 10, 30, 1),
        "show_labels": ToggleDef("Show Labels"),
    },
    ViewMode.LIST: {},
    ViewMode.PIE: {},
}


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)([A-Z])", r"_\1", name).lower()


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _coerce(mode: ViewMode, key: str, value: Any, current: Any) -> Any:
    """Validate one setting value against its definition."""
    definition = SETTING_DEFS[mode].get(key)
    if isinstance(definition, ToggleDef):
        if not isinstance(value, bool):
            raise ValueError(f"{mode.value}.{_to_camel(key)} must be a boolean")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{mode.value}.{_to_camel(key)} must be a number")
    if isinstance(current, int) and float(value).is_integer():
        return int(value)
    return value


def _parse_mode(key: "str | ViewMode") -> ViewMode:
    try:
        return ViewMode(key) if not isinstance(key, ViewMode) else key
    except ValueError:
        raise ValueError(f"Unknown view mode: {key}") from None


@dataclass(frozen=True)
class ViewSettingsMap:
    """Settings for every view mode."""

    views: dict[ViewMode, ViewSettings] = field(
        default_factory=lambda: {mode: cls() for mode, cls in SETTINGS_TYPES.items()}
    )

    def get(self, mode: ViewMode) -> ViewSettings:
        return self.views[mode]

    def merge(self, patch: dict[str, dict[str, Any]]) -> "ViewSettingsMap":
        """Two-level shallow merge.

        Only the views named in ``patch`` change, and inside each named view
        only the given keys change. Keys may be camelCase or snake_case.

        Raises:
            ValueError: On unknown view modes, unknown keys or mistyped values
        """
        views = dict(self.views)
        for raw_mode, values in patch.items():
            mode = _parse_mode(raw_mode)
            current = views[mode]
            known = {f.name for f in fields(current)}
            updates = {}
            for raw_key, value in (values or {}).items():
                key = _to_snake(raw_key)
                if key not in known:
                    raise ValueError(f"Unknown setting for {mode.value}: {raw_key}")
                updates[key] = _coerce(mode, key, value, getattr(current, key))
            views[mode] = replace(current, **updates)
        return ViewSettingsMap(views=views)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {
            mode.value: {_to_camel(k): v for k, v in asdict(settings).items()}
            for mode, settings in self.views.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, dict[str, Any]]) -> "ViewSettingsMap":
        """Defaults overlaid with ``data``."""
        return cls().merge(data)


def settings_defs_to_dict() -> dict[str, dict[str, dict[str, Any]]]:
    """Setting definitions in the wire shape."""
    result: dict[str, dict[str, dict[str, Any]]] = {}
    for mode, defs in SETTING_DEFS.items():
        defaults = asdict(SETTINGS_TYPES[mode]())
        result[mode.value] = {
            _to_camel(key): {"type": d.type, **asdict(d), "default": defaults[key]}
            for key, d in defs.items()
        }
    return result
