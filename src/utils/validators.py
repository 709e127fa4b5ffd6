"""YAML schema validation and config loading.

Provides centralized validation using pydantic:
    - Tools schema (tools.v1.yaml): calligraphy and grid-paint settings
    - Session script schema (session.v1.yaml): recorded pointer events
      replayed by scripts/replay_session.py

Every loader fails fast with the offending key and the expected range, so a
bad config never reaches the frame loop.

Units:
    - Geometry: canvas pixels
    - Angles: radians
    - Colour: 8-bit RGB triples

Usage:
    from src.utils import validators

    tools_cfg = validators.load_tools_config("configs/tools.v1.yaml")
    script = validators.load_session_script("session.yaml")
"""

import math
from pathlib import Path
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .color import CALLIGRAPHY_PALETTE, GRID_PALETTE

RGBTriple = Tuple[int, int, int]


def _check_rgb(value: RGBTriple, name: str) -> RGBTriple:
    for channel in value:
        if not 0 <= channel <= 255:
            raise ValueError(f"{name} channels must be in [0, 255], got {value}")
    return value


# ============================================================================
# CALLIGRAPHY SCHEMA
# ============================================================================

class CalligraphyConfig(BaseModel):
    """Calligraphy tool settings.

    Brush length moves in ``brush_length_step`` increments inside
    [brush_length_min, brush_length_max]. ``erase_index`` names the palette
    entry that switches composition to erase mode (None disables erasing).
    """
    palette: List[RGBTriple] = Field(
        default_factory=lambda: list(CALLIGRAPHY_PALETTE),
        description="Palette entries (R, G, B)"
    )
    erase_index: Optional[int] = Field(0, ge=0, description="Palette index of the eraser")
    default_color_index: int = Field(1, ge=0, description="Colour selected at startup")
    background: RGBTriple = Field((255, 255, 255), description="Visible canvas colour")
    brush_length: float = Field(200.0, gt=0.0, description="Initial total brush length (px)")
    brush_length_min: float = Field(50.0, gt=0.0)
    brush_length_max: float = Field(600.0, gt=0.0)
    brush_length_step: float = Field(50.0, gt=0.0)
    num_sections: int = Field(5, ge=1, le=64, description="Bristle sections across the nib")
    follow_factor: float = Field(0.3, gt=0.0, le=1.0, description="Follower lerp factor per frame")
    heading_smoothing: float = Field(0.1, gt=0.0, le=1.0, description="Heading step toward target per frame")
    min_motion_px: float = Field(0.5, ge=0.0, description="Motion at or below this is stationary")
    rotation_offset: float = Field(math.pi / 2, description="Nib axis offset from heading (rad)")

    @field_validator('palette')
    @classmethod
    def validate_palette(cls, v: List[RGBTriple]) -> List[RGBTriple]:
        if not v:
            raise ValueError("palette must contain at least one colour")
        for entry in v:
            _check_rgb(entry, "palette entry")
        return v

    @field_validator('background')
    @classmethod
    def validate_background(cls, v: RGBTriple) -> RGBTriple:
        return _check_rgb(v, "background")

    @model_validator(mode='after')
    def validate_ranges(self) -> 'CalligraphyConfig':
        n = len(self.palette)
        if self.default_color_index >= n:
            raise ValueError(f"default_color_index {self.default_color_index} out of palette range [0, {n})")
        if self.erase_index is not None and self.erase_index >= n:
            raise ValueError(f"erase_index {self.erase_index} out of palette range [0, {n})")
        if self.brush_length_min > self.brush_length_max:
            raise ValueError(
                f"brush_length_min {self.brush_length_min} > brush_length_max {self.brush_length_max}"
            )
        if not self.brush_length_min <= self.brush_length <= self.brush_length_max:
            raise ValueError(
                f"brush_length {self.brush_length} out of bounds "
                f"[{self.brush_length_min}, {self.brush_length_max}]"
            )
        return self


# ============================================================================
# GRID PAINT SCHEMA
# ============================================================================

class GridPaintConfig(BaseModel):
    """Grid paint tool settings.

    ``background`` fills the offscreen stroke buffer; ``canvas_color`` is
    what the visible frame is cleared to before cells are drawn. Touch mode
    halves the cell-size preset and step.
    """
    palette: List[RGBTriple] = Field(default_factory=lambda: list(GRID_PALETTE))
    default_color_index: int = Field(1, ge=0, description="Colour selected at startup")
    background: RGBTriple = Field((0, 0, 0), description="Offscreen buffer fill")
    canvas_color: RGBTriple = Field((255, 255, 255), description="Visible frame clear colour")
    cell_size: float = Field(75.0, gt=0.0, description="Cell size preset on desktop (px)")
    cell_step: float = Field(25.0, gt=0.0, description="Cell size step on desktop (px)")
    cell_min: float = Field(5.0, gt=0.0)
    cell_max: float = Field(200.0, gt=0.0)
    sample_density: int = Field(4, ge=1, le=16, description="Downsample samples per cell per axis")
    touch: bool = Field(False, description="Touch device: halve preset and step")

    @field_validator('palette')
    @classmethod
    def validate_palette(cls, v: List[RGBTriple]) -> List[RGBTriple]:
        if not v:
            raise ValueError("palette must contain at least one colour")
        for entry in v:
            _check_rgb(entry, "palette entry")
        return v

    @field_validator('background', 'canvas_color')
    @classmethod
    def validate_colors(cls, v: RGBTriple) -> RGBTriple:
        return _check_rgb(v, "colour")

    @model_validator(mode='after')
    def validate_ranges(self) -> 'GridPaintConfig':
        n = len(self.palette)
        if self.default_color_index >= n:
            raise ValueError(f"default_color_index {self.default_color_index} out of palette range [0, {n})")
        if self.cell_min > self.cell_max:
            raise ValueError(f"cell_min {self.cell_min} > cell_max {self.cell_max}")
        return self

    @property
    def effective_cell_size(self) -> float:
        """Preset actually used at startup (halved on touch devices)."""
        return self.cell_size * 0.5 if self.touch else self.cell_size

    @property
    def effective_cell_step(self) -> float:
        """Step actually used by "+"/"-" (halved on touch devices)."""
        return self.cell_step * 0.5 if self.touch else self.cell_step


# ============================================================================
# TOOLS SCHEMA V1
# ============================================================================

class ToolsConfigV1(BaseModel):
    """Top-level tools config (tools.v1.yaml schema)."""
    schema_version: str = Field("tools.v1", alias="schema")
    calligraphy: CalligraphyConfig = Field(default_factory=CalligraphyConfig)
    grid: GridPaintConfig = Field(default_factory=GridPaintConfig)

    model_config = {'populate_by_name': True}

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "tools.v1":
            raise ValueError(f"Expected schema 'tools.v1', got '{v}'")
        return v


def load_tools_config(path: Union[str, Path]) -> ToolsConfigV1:
    """Load and validate the tools config from YAML.

    Raises
    ------
    FileNotFoundError
        If file does not exist
    pydantic.ValidationError
        If any value is out of range
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tools config not found: {path}")
    return ToolsConfigV1(**fs.load_yaml(path))


# ============================================================================
# SESSION SCRIPT SCHEMA V1
# ============================================================================

EventType = Literal['press', 'move', 'release', 'frame', 'color', 'size', 'reset', 'resize']


class SessionEvent(BaseModel):
    """One recorded host event.

    Required fields per type:
        press, move: x, y
        frame: repeat (optional, default 1)
        color: index
        size: value ("+", "-", "reset" or a numeric scale factor)
        resize: width, height
        release, reset: none
    """
    type: EventType
    x: Optional[float] = None
    y: Optional[float] = None
    index: Optional[int] = Field(None, ge=0)
    value: Optional[Union[float, str]] = None
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    repeat: int = Field(1, ge=1)

    @model_validator(mode='after')
    def validate_fields(self) -> 'SessionEvent':
        if self.type in ('press', 'move') and (self.x is None or self.y is None):
            raise ValueError(f"'{self.type}' event needs x and y")
        if self.type == 'color' and self.index is None:
            raise ValueError("'color' event needs index")
        if self.type == 'size':
            if self.value is None:
                raise ValueError("'size' event needs value")
            if isinstance(self.value, str) and self.value not in ('+', '-', 'reset'):
                raise ValueError(f"'size' value must be '+', '-', 'reset' or a number, got '{self.value}'")
        if self.type == 'resize' and (self.width is None or self.height is None):
            raise ValueError("'resize' event needs width and height")
        return self


class SessionScriptV1(BaseModel):
    """Pointer session replayed through one tool (session.v1.yaml schema)."""
    schema_version: str = Field("session.v1", alias="schema")
    tool: Literal['calligraphy', 'grid']
    width: int = Field(..., gt=0, description="Canvas width (px)")
    height: int = Field(..., gt=0, description="Canvas height (px)")
    events: List[SessionEvent] = Field(default_factory=list)

    model_config = {'populate_by_name': True}

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "session.v1":
            raise ValueError(f"Expected schema 'session.v1', got '{v}'")
        return v


def load_session_script(path: Union[str, Path]) -> SessionScriptV1:
    """Load and validate a recorded session script from YAML."""
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Session script not found: {path}")
    return SessionScriptV1(**fs.load_yaml(path))
