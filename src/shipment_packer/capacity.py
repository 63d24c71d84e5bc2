"""Capacity analysis: boxes needed per kind, and boxes each container kind can hold."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from shipment_packer.models import Box, BoxKind, ContainerKind, PackingOption, Piece
from shipment_packer.packing.constraints import Constraints
from shipment_packer.packing.feasibility import FeasibilityMatcher


def bucket_pieces(assignments: Iterable[tuple[Piece, PackingOption]]) -> dict[PackingOption, list[Piece]]:
    """
    Group pieces by their chosen (box kind, capacity) bucket, keeping input order.

    Args:
        assignments: (piece, chosen option) pairs

    Returns:
        dict of option -> pieces, in first-seen order
    """
    buckets: dict[PackingOption, list[Piece]] = {}
    for piece, option in assignments:
        buckets.setdefault(option, []).append(piece)
    return buckets


def required_boxes(assignments: Iterable[tuple[Piece, PackingOption]]) -> dict[BoxKind, int]:
    """
    Compute the number of boxes needed per box kind.

    Each capacity bucket is rounded up on its own before being added to its kind's total:
    7 glass pieces (cap 6) + 1 canvas piece (cap 4) sharing STANDARD need 2 + 1 = 3 boxes,
    not ceil(8 / 6) = 2.

    Args:
        assignments: (piece, chosen option) pairs

    Returns:
        dict of box kind -> boxes required
    """
    needed: dict[BoxKind, int] = {}
    for option, pieces in bucket_pieces(assignments).items():
        boxes = math.ceil(len(pieces) / option.capacity)
        needed[option.box_kind] = needed.get(option.box_kind, 0) + boxes
    return needed


def container_capacities(
    matcher: FeasibilityMatcher,
    box_kinds: Iterable[BoxKind],
    constraints: Optional[Constraints] = None,
) -> dict[ContainerKind, dict[BoxKind, int]]:
    """
    Probe the matcher with an empty box of each kind to learn container capacities.

    Args:
        matcher: Feasibility matcher holding the container rules
        box_kinds: Box kinds that need a container
        constraints: Run constraints (container whitelist is applied)

    Returns:
        dict of container kind -> {box kind -> max boxes of that kind}.
        A box kind missing from every inner dict has no legal container.
    """
    capacities: dict[ContainerKind, dict[BoxKind, int]] = {}
    for kind in box_kinds:
        probe = Box(id="probe", kind=kind)
        for option in matcher.options_for_box(probe, constraints):
            per_kind = capacities.setdefault(option.container_kind, {})
            # first matching rule wins if a table lists the same pair twice
            per_kind.setdefault(kind, option.capacity)
    return capacities


def uncontainable_kinds(
    box_kinds: Iterable[BoxKind],
    capacities: dict[ContainerKind, dict[BoxKind, int]],
) -> list[BoxKind]:
    """Box kinds that no eligible container kind can hold."""
    containable = {kind for per_kind in capacities.values() for kind in per_kind}
    return [kind for kind in box_kinds if kind not in containable]
