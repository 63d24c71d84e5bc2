"""Feasibility matcher: every rule-compliant way to pack a piece or a box."""

from __future__ import annotations

from typing import Optional

from shipment_packer.models import Box, BoxKind, ContainerOption, PackingOption, Piece
from shipment_packer.packing.constraints import Constraints
from shipment_packer.rules import PieceToBoxRule, RuleTable

_NO_CONSTRAINTS = Constraints()


def rule_matches(piece: Piece, rule: PieceToBoxRule) -> bool:
    """
    Check a piece against one rule.

    Material must match (or the rule is material-agnostic). On size, width OR
    height inside its window is enough: a piece whose height alone fits the
    window still matches.
    """
    if rule.material is not None and piece.material != rule.material:
        return False

    width_matches = rule.min_width <= piece.width <= rule.max_width
    height_matches = rule.min_height <= piece.height <= rule.max_height
    return width_matches or height_matches


class FeasibilityMatcher:
    """Stateless rule checker. Safe to share between threads."""

    def __init__(self, rules: RuleTable) -> None:
        self.rules = rules

    def options_for_piece(self, piece: Piece, constraints: Optional[Constraints] = None) -> list[PackingOption]:
        """
        Find all box options for a piece, in rule priority order.

        Args:
            piece: Piece to evaluate
            constraints: Run constraints (box whitelist is applied)

        Returns:
            Distinct PackingOptions, highest priority first; empty if the piece is unpackable
        """
        constraints = constraints or _NO_CONSTRAINTS
        options: list[PackingOption] = []
        for rule in self.rules.box_rules_for(constraints):
            if not rule_matches(piece, rule):
                continue
            if not constraints.allows_box_kind(rule.box_kind):
                continue
            options.append(PackingOption(box_kind=rule.box_kind, capacity=rule.capacity))

        return list(dict.fromkeys(options))

    def options_for_box_kind(self, kind: BoxKind, constraints: Optional[Constraints] = None) -> list[ContainerOption]:
        """
        Find all container options for a box kind, in rule order.

        Args:
            kind: Box kind to place
            constraints: Run constraints (container whitelist is applied)

        Returns:
            ContainerOptions; empty if the box kind cannot go into any allowed container
        """
        constraints = constraints or _NO_CONSTRAINTS
        return [
            ContainerOption(container_kind=rule.container_kind, capacity=rule.capacity)
            for rule in self.rules.container_rules
            if rule.box_kind == kind and constraints.allows_container_kind(rule.container_kind)
        ]

    def options_for_box(self, box: Box, constraints: Optional[Constraints] = None) -> list[ContainerOption]:
        return self.options_for_box_kind(box.kind, constraints)
