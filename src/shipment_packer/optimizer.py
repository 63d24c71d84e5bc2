"""
Packing optimizer: turns a list of pieces into a concrete, costed Plan.

Pieces are matched to box kinds, box counts are derived per kind, and the
number of containers of each kind is chosen by the CP-SAT quantity solver.
Boxes are then built and placed first-fit into those containers. When the
solver is switched off, raises, or finds nothing within its time budget, the
whole run is packed by the first-fit-decreasing heuristic instead.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from shipment_packer.capacity import bucket_pieces, container_capacities, required_boxes, uncontainable_kinds
from shipment_packer.costing import CostStrategy
from shipment_packer.models import Box, BoxKind, Container, ContainerKind, PackingOption, Piece, Plan
from shipment_packer.packing.constraints import Constraints
from shipment_packer.packing.factory import UnitFactory
from shipment_packer.packing.feasibility import FeasibilityMatcher
from shipment_packer.packing.first_fit import first_fit_decreasing
from shipment_packer.quantity_solver import solve_container_quantities

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT_SEC = 10.0


class PackingOptimizer:
    """
    Builds packing plans.

    Holds no per-run state: ids come from a UnitFactory created inside each
    create_plan call, so one instance can serve concurrent runs.
    """

    def __init__(
        self,
        matcher: FeasibilityMatcher,
        cost_strategy: CostStrategy,
        use_solver: bool = True,
        time_limit_sec: float = DEFAULT_TIME_LIMIT_SEC,
    ) -> None:
        self.matcher = matcher
        self.cost_strategy = cost_strategy
        self.use_solver = use_solver
        self.time_limit_sec = time_limit_sec

    def create_plan(self, pieces: Optional[Iterable[Piece]], constraints: Optional[Constraints] = None) -> Plan:
        pieces = list(pieces or [])
        if not pieces:
            return Plan()

        constraints = constraints or Constraints()
        factory = UnitFactory()

        assignments, unpacked = self._select_boxes(pieces, constraints)

        required = required_boxes(assignments)
        capacities = container_capacities(self.matcher, required.keys(), constraints)

        # Box kinds no container can take: keep their pieces visible instead of dropping them
        blocked = set(uncontainable_kinds(required.keys(), capacities))
        unplaced_boxes: list[Box] = []
        if blocked:
            held = [(p, o) for p, o in assignments if o.box_kind in blocked]
            assignments = [(p, o) for p, o in assignments if o.box_kind not in blocked]
            for piece, option in held:
                logger.warning(
                    f"Piece {piece.id}: no container accepts {option.box_kind.value} boxes; left unpacked"
                )
            unplaced_boxes.extend(self._build_boxes(bucket_pieces(held), factory))
            unpacked.extend(piece for piece, _ in held)
            required = {kind: n for kind, n in required.items() if kind not in blocked}

        containers: Optional[list[Container]] = None
        solver_status = "DISABLED"
        if self.use_solver:
            try:
                counts, solver_status = solve_container_quantities(required, capacities, self.time_limit_sec)
            except RuntimeError as e:
                logger.warning(f"Quantity solver found no solution, falling back to first-fit: {e}")
                solver_status = "NO_SOLUTION"
            except Exception as e:
                logger.error(f"Quantity solver error, falling back to first-fit: {e}", exc_info=True)
                solver_status = "ERROR"
            else:
                containers, failed = self._reconstruct(counts, assignments, capacities, factory)
                unplaced_boxes.extend(failed)
                for box in failed:
                    unpacked.extend(box.pieces)

        fallback_used = containers is None
        if fallback_used:
            result = first_fit_decreasing(assignments, self.matcher, factory, constraints)
            containers = result.containers
            unpacked.extend(result.unpacked)
            unplaced_boxes.extend(result.unplaced_boxes)

        total_cost = sum(self.cost_strategy.cost(c) for c in containers)

        plan = Plan(
            containers=containers,
            unpacked_pieces=unpacked,
            unplaced_boxes=unplaced_boxes,
            total_cost=total_cost,
            solver_status=solver_status,
            fallback_used=fallback_used,
        )
        logger.info(
            f"Plan ready: {plan.container_count} containers, {plan.box_count} boxes, "
            f"{len(plan.unpacked_pieces)} unpacked pieces, cost {plan.total_cost:.2f} "
            f"(solver={solver_status}, fallback={fallback_used})"
        )
        return plan

    def _select_boxes(
        self,
        pieces: list[Piece],
        constraints: Constraints,
    ) -> tuple[list[tuple[Piece, PackingOption]], list[Piece]]:
        """Pick the highest-priority box option for every piece."""
        assignments: list[tuple[Piece, PackingOption]] = []
        unpacked: list[Piece] = []

        for piece in pieces:
            if not piece.has_finite_dimensions:
                logger.warning(
                    f"Piece {piece.id} has non-finite dimensions ({piece.width}x{piece.height}); left unpacked"
                )
                unpacked.append(piece)
                continue

            if self.matcher.rules.exceeds_hard_limit(piece):
                logger.warning(
                    f"Piece {piece.id} ({piece.width}x{piece.height}) exceeds the "
                    f"{self.matcher.rules.max_piece_dimension} limit; left unpacked"
                )
                unpacked.append(piece)
                continue

            options = self.matcher.options_for_piece(piece, constraints)
            if not options:
                logger.warning(f"Piece {piece.id} ({piece.material.display_name}) matches no box rule; left unpacked")
                unpacked.append(piece)
                continue

            logger.debug(f"Piece {piece.id} -> {options[0].box_kind.value} (capacity {options[0].capacity})")
            assignments.append((piece, options[0]))

        return assignments, unpacked

    @staticmethod
    def _build_boxes(buckets: dict[PackingOption, list[Piece]], factory: UnitFactory) -> list[Box]:
        """Cut every bucket into consecutive boxes of at most `capacity` pieces, grouped by box kind."""
        kind_order: dict[BoxKind, int] = {}
        for option in buckets:
            kind_order.setdefault(option.box_kind, len(kind_order))

        boxes: list[Box] = []
        for option, pieces in sorted(buckets.items(), key=lambda item: kind_order[item[0].box_kind]):
            for start in range(0, len(pieces), option.capacity):
                box = factory.new_box(option.box_kind, option.capacity)
                for piece in pieces[start:start + option.capacity]:
                    box.add_piece(piece)
                boxes.append(box)
        return boxes

    def _reconstruct(
        self,
        counts: dict[ContainerKind, int],
        assignments: list[tuple[Piece, PackingOption]],
        capacities: dict[ContainerKind, dict[BoxKind, int]],
        factory: UnitFactory,
    ) -> tuple[list[Container], list[Box]]:
        """
        Realise solver quantities as containers and place boxes first-fit.

        Returns:
            (non-empty containers, boxes that fit nowhere)
        """
        containers: list[Container] = []
        for kind in ContainerKind:
            for _ in range(counts.get(kind, 0)):
                containers.append(factory.new_container(kind))

        failed: list[Box] = []
        for box in self._build_boxes(bucket_pieces(assignments), factory):
            target = None
            for container in containers:
                max_boxes = capacities.get(container.kind, {}).get(box.kind, 0)
                if container.count_boxes(box.kind) < max_boxes:
                    target = container
                    break

            if target is None:
                # the solver covers each box kind on its own, so a shared container can run short
                logger.warning(
                    f"Placement failure: {box.id} ({box.kind.value}, {len(box.pieces)} pieces) "
                    f"fits no container chosen by the solver"
                )
                failed.append(box)
                continue
            target.add_box(box)

        placed = [c for c in containers if c.boxes]
        if len(placed) < len(containers):
            logger.debug(f"Dropped {len(containers) - len(placed)} empty containers after reconstruction")
        return placed, failed
