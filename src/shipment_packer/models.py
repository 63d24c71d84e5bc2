"""Domain model: pieces, boxes, containers and the plan that ties them together."""

from __future__ import annotations

import math
from collections import Counter
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shipment_packer.catalog import get_box_kind_dims, get_container_kind_dims


class Material(Enum):
    """Piece material with its display name and weight per square inch (lbs)."""

    GLASS = ("Glass", 0.0098)
    ACRYLIC = ("Acrylic", 0.0094)
    CANVAS_FRAMED = ("Canvas-Framed", 0.0085)
    CANVAS_GALLERY = ("Canvas-Gallery", 0.0061)
    MIRROR = ("Mirror", 0.0191)
    ACOUSTIC_PANEL = ("Acoustic Panel", 0.0038)
    ACOUSTIC_PANEL_FRAMED = ("Acoustic Panel-Framed", 0.0037)
    PATIENT_BOARD = ("Patient Board", 0.0347)
    UNKNOWN = ("Unknown", 0.0)

    def __init__(self, display_name: str, weight_factor: float) -> None:
        self.display_name = display_name
        self.weight_factor = weight_factor

    @classmethod
    def from_string(cls, text: Optional[str]) -> "Material":
        """
        Look up a material by display name or member name, ignoring case.

        Never raises: anything unrecognised maps to UNKNOWN.
        """
        if text is None:
            return cls.UNKNOWN
        key = text.strip().lower()
        for material in cls:
            if key in (material.display_name.lower(), material.name.lower()):
                return material
        return cls.UNKNOWN


class BoxKind(str, Enum):
    """Box catalog entry. Attributes come from catalog.BOX_KIND_PRESETS."""

    STANDARD = "STANDARD"
    LARGE = "LARGE"
    SMALL_CARRIER = "SMALL_CARRIER"
    LARGE_CARRIER = "LARGE_CARRIER"
    CRATE = "CRATE"

    @property
    def outer_length(self) -> int:
        return get_box_kind_dims(self.value)["length"]

    @property
    def outer_width(self) -> int:
        return get_box_kind_dims(self.value)["width"]

    @property
    def min_height(self) -> int:
        return get_box_kind_dims(self.value)["min_height"]


class ContainerKind(str, Enum):
    """Container (pallet or crate) catalog entry. Attributes come from catalog.CONTAINER_KIND_PRESETS."""

    STANDARD_PALLET = "STANDARD_PALLET"
    GLASS_PALLET = "GLASS_PALLET"
    OVERSIZE_PALLET = "OVERSIZE_PALLET"
    STANDARD_CRATE = "STANDARD_CRATE"

    @property
    def outer_length(self) -> float:
        return get_container_kind_dims(self.value)["length"]

    @property
    def outer_width(self) -> float:
        return get_container_kind_dims(self.value)["width"]

    @property
    def tare_weight(self) -> float:
        return get_container_kind_dims(self.value)["tare_weight"]

    @property
    def min_height(self) -> float:
        return get_container_kind_dims(self.value)["min_height"]

    @property
    def base_clearance(self) -> float:
        return get_container_kind_dims(self.value)["base_clearance"]


class Piece(BaseModel):
    """A single flat item to ship. Dimensions are not validated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier for the piece")
    width: float = Field(description="Width in inches")
    height: float = Field(description="Height in inches")
    material: Material = Field(default=Material.UNKNOWN, description="Piece material")

    @property
    def weight(self) -> float:
        if self.material.weight_factor == 0:
            return 0.0
        raw = self.width * self.height * self.material.weight_factor
        # nan and inf have no ceiling; such pieces never reach a box
        if not math.isfinite(raw):
            return raw
        return float(math.ceil(raw))

    @property
    def has_finite_dimensions(self) -> bool:
        return math.isfinite(self.width) and math.isfinite(self.height)


class Box(BaseModel):
    """First-level packing unit. Holds pieces of a single capacity bucket."""

    id: str = Field(description="Unique identifier for the box")
    kind: BoxKind
    capacity: Optional[int] = Field(
        default=None,
        description="Pieces allowed by the matched rule (None for probe boxes)")
    pieces: list[Piece] = Field(default_factory=list)

    def add_piece(self, piece: Piece) -> None:
        self.pieces.append(piece)

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and len(self.pieces) >= self.capacity

    @property
    def current_height(self) -> float:
        tallest = max((p.height for p in self.pieces), default=self.kind.min_height)
        return max(self.kind.min_height, tallest)

    @property
    def total_weight(self) -> float:
        return sum(p.weight for p in self.pieces)


class Container(BaseModel):
    """Second-level packing unit (pallet or crate) holding boxes."""

    id: str = Field(description="Unique identifier for the container")
    kind: ContainerKind
    boxes: list[Box] = Field(default_factory=list)

    def add_box(self, box: Box) -> None:
        self.boxes.append(box)

    def count_boxes(self, kind: BoxKind) -> int:
        return sum(1 for b in self.boxes if b.kind == kind)

    @property
    def current_height(self) -> float:
        tallest = max((b.current_height for b in self.boxes), default=self.kind.min_height)
        return max(self.kind.min_height, tallest) + self.kind.base_clearance

    @property
    def total_weight(self) -> float:
        return self.kind.tare_weight + sum(b.total_weight for b in self.boxes)


class PackingOption(BaseModel):
    """A legal (box kind, pieces per box) choice for a piece."""

    model_config = ConfigDict(frozen=True)

    box_kind: BoxKind
    capacity: int


class ContainerOption(BaseModel):
    """A legal (container kind, boxes per container) choice for a box."""

    model_config = ConfigDict(frozen=True)

    container_kind: ContainerKind
    capacity: int


class Plan(BaseModel):
    """
    Result of one optimisation run.

    Frozen against field reassignment only: the lists and the boxes and
    containers inside them are the live objects built by the run.
    """

    model_config = ConfigDict(frozen=True)

    containers: list[Container] = Field(default_factory=list)
    unpacked_pieces: list[Piece] = Field(default_factory=list)
    # Boxes that no container could take; their pieces are also in unpacked_pieces.
    unplaced_boxes: list[Box] = Field(default_factory=list)
    total_cost: float = 0.0
    solver_status: str = ""
    fallback_used: bool = False

    @property
    def total_weight(self) -> float:
        return sum(c.total_weight for c in self.containers)

    @property
    def container_count(self) -> int:
        return len(self.containers)

    @property
    def box_count(self) -> int:
        return sum(len(c.boxes) for c in self.containers)

    @property
    def packed_piece_count(self) -> int:
        return sum(len(b.pieces) for c in self.containers for b in c.boxes)

    def boxes_by_kind(self) -> dict[BoxKind, int]:
        return dict(Counter(b.kind for c in self.containers for b in c.boxes))

    def containers_by_kind(self) -> dict[ContainerKind, int]:
        return dict(Counter(c.kind for c in self.containers))
