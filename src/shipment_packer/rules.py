"""
Packing rules: which box a piece may go into, and which container a box may go onto.

Piece rules are ordered by priority, most specific first. The feasibility
matcher walks them in order, so the position of a rule in the table matters.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

from shipment_packer.models import BoxKind, ContainerKind, Material, Piece

if TYPE_CHECKING:
    from shipment_packer.packing.constraints import Constraints


# Any piece with a side above this cannot go into any box or crate.
MAX_PIECE_DIMENSION = 88.0


class PieceToBoxRule(BaseModel):
    """One piece -> box rule. Bounds are inclusive."""

    model_config = ConfigDict(frozen=True)

    description: str
    material: Optional[Material] = Field(default=None, description="None matches any material")
    min_width: float = 0.0
    max_width: float = math.inf
    min_height: float = 0.0
    max_height: float = math.inf
    box_kind: BoxKind
    capacity: int = Field(ge=1, description="Max pieces per box under this rule")


class BoxToContainerRule(BaseModel):
    """One box -> container rule."""

    model_config = ConfigDict(frozen=True)

    description: str
    container_kind: ContainerKind
    box_kind: BoxKind
    capacity: int = Field(ge=1, description="Max boxes of box_kind per container")


class RuleTable(BaseModel):
    """Immutable rule set shared by every packing run."""

    model_config = ConfigDict(frozen=True)

    box_rules: tuple[PieceToBoxRule, ...] = ()
    container_rules: tuple[BoxToContainerRule, ...] = ()
    max_piece_dimension: Optional[float] = MAX_PIECE_DIMENSION

    def box_rules_for(self, constraints: "Constraints") -> tuple[PieceToBoxRule, ...]:
        # reserved_flag has no alternate rule set yet
        return self.box_rules

    def exceeds_hard_limit(self, piece: Piece) -> bool:
        if self.max_piece_dimension is None:
            return False
        return piece.width > self.max_piece_dimension or piece.height > self.max_piece_dimension


BOX_MATERIAL_CAPACITIES: dict[Material, int] = {
    Material.GLASS: 6,
    Material.ACRYLIC: 6,
    Material.CANVAS_FRAMED: 4,
    Material.CANVAS_GALLERY: 4,
    Material.ACOUSTIC_PANEL: 4,
    Material.ACOUSTIC_PANEL_FRAMED: 4,
    Material.PATIENT_BOARD: 4,
}

SMALL_CRATE_CAPACITIES: dict[Material, int] = {
    Material.GLASS: 25,
    Material.ACRYLIC: 25,
    Material.CANVAS_FRAMED: 18,
    Material.CANVAS_GALLERY: 18,
    Material.ACOUSTIC_PANEL: 18,
    Material.ACOUSTIC_PANEL_FRAMED: 18,
    Material.PATIENT_BOARD: 18,
    Material.MIRROR: 24,
}

LARGE_CRATE_CAPACITIES: dict[Material, int] = {
    Material.GLASS: 18,
    Material.ACRYLIC: 18,
    Material.CANVAS_FRAMED: 12,
    Material.CANVAS_GALLERY: 12,
    Material.ACOUSTIC_PANEL: 12,
    Material.ACOUSTIC_PANEL_FRAMED: 12,
    Material.PATIENT_BOARD: 12,
}


def _standard_box_rule(material: Material, capacity: int) -> PieceToBoxRule:
    return PieceToBoxRule(
        description=f"{material.name} in STANDARD box",
        material=material,
        max_width=36,
        max_height=36,
        box_kind=BoxKind.STANDARD,
        capacity=capacity,
    )


def _large_box_rule(material: Material, capacity: int) -> PieceToBoxRule:
    return PieceToBoxRule(
        description=f"{material.name} in LARGE box",
        material=material,
        min_width=37,
        max_width=43,
        min_height=37,
        max_height=43,
        box_kind=BoxKind.LARGE,
        capacity=capacity,
    )


def _small_crate_rule(material: Material, capacity: int) -> PieceToBoxRule:
    return PieceToBoxRule(
        description=f"{material.name} in CRATE (small art)",
        material=material,
        max_width=33,
        max_height=33,
        box_kind=BoxKind.CRATE,
        capacity=capacity,
    )


def _large_crate_rule(material: Material, capacity: int) -> PieceToBoxRule:
    return PieceToBoxRule(
        description=f"{material.name} in CRATE (large art)",
        material=material,
        min_width=34,
        max_width=46,
        min_height=34,
        max_height=46,
        box_kind=BoxKind.CRATE,
        capacity=capacity,
    )


def default_container_rules() -> tuple[BoxToContainerRule, ...]:
    return (
        BoxToContainerRule(description="Standard boxes on standard pallets",
                           container_kind=ContainerKind.STANDARD_PALLET, box_kind=BoxKind.STANDARD, capacity=4),
        BoxToContainerRule(description="Large boxes on standard pallets",
                           container_kind=ContainerKind.STANDARD_PALLET, box_kind=BoxKind.LARGE, capacity=3),
        BoxToContainerRule(description="Standard boxes on oversize pallets",
                           container_kind=ContainerKind.OVERSIZE_PALLET, box_kind=BoxKind.STANDARD, capacity=5),
        BoxToContainerRule(description="Large boxes on oversize pallets",
                           container_kind=ContainerKind.OVERSIZE_PALLET, box_kind=BoxKind.LARGE, capacity=3),
        BoxToContainerRule(description="Crate box in standard crate",
                           container_kind=ContainerKind.STANDARD_CRATE, box_kind=BoxKind.CRATE, capacity=1),
    )


def default_box_rules() -> tuple[PieceToBoxRule, ...]:
    """
    Piece rules in priority order:
      1. STANDARD box (up to 36 x 36)
      2. LARGE box (37..43 per axis)
      3. CRATE, small art (up to 33)
      4. CRATE, large art (34..46)
    Mirror only ships in small-art crates.
    """
    rules: list[PieceToBoxRule] = []
    rules += [_standard_box_rule(m, cap) for m, cap in BOX_MATERIAL_CAPACITIES.items()]
    rules += [_large_box_rule(m, cap) for m, cap in BOX_MATERIAL_CAPACITIES.items()]
    rules += [_small_crate_rule(m, cap) for m, cap in SMALL_CRATE_CAPACITIES.items()]
    rules += [_large_crate_rule(m, cap) for m, cap in LARGE_CRATE_CAPACITIES.items()]
    return tuple(rules)


def default_rule_table() -> RuleTable:
    return RuleTable(box_rules=default_box_rules(), container_rules=default_container_rules())
