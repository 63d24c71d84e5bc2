# src/shipment_packer/packing/first_fit.py

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, Field

from shipment_packer.models import Box, Container, ContainerKind, PackingOption, Piece
from shipment_packer.packing.constraints import Constraints
from shipment_packer.packing.factory import UnitFactory
from shipment_packer.packing.feasibility import FeasibilityMatcher

logger = logging.getLogger(__name__)


class FirstFitResult(BaseModel):
    """Result of the first-fit-decreasing heuristic."""
    containers: list[Container] = Field(default_factory=list)
    unpacked: list[Piece] = Field(default_factory=list)
    unplaced_boxes: list[Box] = Field(default_factory=list)


def _fill_existing_box(containers: list[Container], piece: Piece, option: PackingOption) -> bool:
    for container in containers:
        for box in container.boxes:
            if box.kind == option.box_kind and box.capacity == option.capacity and not box.is_full:
                box.add_piece(piece)
                return True
    return False


def _open_box_in_existing_container(
    containers: list[Container],
    piece: Piece,
    option: PackingOption,
    capacity_by_container: dict[ContainerKind, int],
    factory: UnitFactory,
) -> bool:
    for container in containers:
        max_boxes = capacity_by_container.get(container.kind)
        if max_boxes is None:
            continue
        if container.count_boxes(option.box_kind) < max_boxes:
            box = factory.new_box(option.box_kind, option.capacity)
            box.add_piece(piece)
            container.add_box(box)
            return True
    return False


def _hold_unplaced(unplaced_boxes: list[Box], piece: Piece, option: PackingOption, factory: UnitFactory) -> None:
    for box in unplaced_boxes:
        if box.kind == option.box_kind and box.capacity == option.capacity and not box.is_full:
            box.add_piece(piece)
            return
    box = factory.new_box(option.box_kind, option.capacity)
    box.add_piece(piece)
    unplaced_boxes.append(box)


def first_fit_decreasing(
    assignments: list[tuple[Piece, PackingOption]],
    matcher: FeasibilityMatcher,
    factory: UnitFactory,
    constraints: Optional[Constraints] = None,
) -> FirstFitResult:
    """
    Greedy packer used when the quantity solver is off or fails.

    - Heaviest pieces first (stable for equal weights)
    - For each piece, in order:
        1. an existing, non-full box of the same kind and capacity bucket
        2. a new box in an existing container that still has room for that box kind
        3. a new container of the first legal kind, with a new box in it
    - Deterministic; never drops a piece: pieces whose box kind has no legal
      container end up in `unpacked`, their boxes in `unplaced_boxes`
    """
    ordered = sorted(assignments, key=lambda pair: pair[0].weight, reverse=True)

    containers: list[Container] = []
    unpacked: list[Piece] = []
    unplaced_boxes: list[Box] = []

    for piece, option in ordered:
        if _fill_existing_box(containers, piece, option):
            continue

        container_options = matcher.options_for_box_kind(option.box_kind, constraints)
        if not container_options:
            logger.warning(
                f"Piece {piece.id}: no container accepts {option.box_kind.value} boxes; left unpacked"
            )
            _hold_unplaced(unplaced_boxes, piece, option, factory)
            unpacked.append(piece)
            continue

        capacity_by_container: dict[ContainerKind, int] = {}
        for container_option in container_options:
            capacity_by_container.setdefault(container_option.container_kind, container_option.capacity)

        if _open_box_in_existing_container(containers, piece, option, capacity_by_container, factory):
            continue

        container = factory.new_container(container_options[0].container_kind)
        box = factory.new_box(option.box_kind, option.capacity)
        box.add_piece(piece)
        container.add_box(box)
        containers.append(container)
        logger.debug(f"Opened {container.id} ({container.kind.value}) for piece {piece.id}")

    return FirstFitResult(containers=containers, unpacked=unpacked, unplaced_boxes=unplaced_boxes)
