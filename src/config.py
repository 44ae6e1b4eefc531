"""Layout spacing configuration."""

from pathlib import Path
import tomllib

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt


class LayoutConfig(BaseModel):
    """Spacing constants for one layout run. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    card_width: StrictFloat = 180.0
    card_height: StrictFloat = 120.0
    vertical_spacing: StrictFloat = 240.0  # between generations
    spouse_spacing: StrictFloat = 220.0
    family_group_spacing: StrictFloat = 350.0  # between units, groups and lanes
    child_gap: StrictFloat = 40.0  # base gap between siblings and between child groups
    per_child_gap: StrictFloat = 20.0
    many_children_threshold: StrictInt = 3
    base_x: StrictFloat = 100.0
    base_y: StrictFloat = 100.0
    shared_descendant_nudge: StrictFloat = 0.3

    @property
    def partner_offset(self) -> float:
        """Horizontal distance from an anchor to its first attached partner."""
        return self.card_width / 2 + self.spouse_spacing / 2

    def y_for(self, generation: int) -> float:
        return generation * self.vertical_spacing + self.base_y


def load_config(path: Path | None) -> LayoutConfig:
    """
    Load layout settings from a TOML file.

    Settings live in a [layout] table; anything not given keeps its default.
    A missing path returns the defaults. Bad keys or values raise
    pydantic's ValidationError, a ValueError.
    """
    if path is None:
        return LayoutConfig()
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return LayoutConfig.model_validate(data.get("layout", {}))
