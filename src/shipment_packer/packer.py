"""Single entry point: rules + matcher + cost strategy + optimizer, wired together."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from shipment_packer.config import PackerSettings, configure_logging, load_settings
from shipment_packer.costing import ShippingProvider, get_cost_strategy
from shipment_packer.models import Piece, Plan
from shipment_packer.optimizer import PackingOptimizer
from shipment_packer.packing.constraints import Constraints
from shipment_packer.packing.feasibility import FeasibilityMatcher
from shipment_packer.rules import RuleTable, default_rule_table


def build_optimizer(
    provider: Union[ShippingProvider, str, None] = None,
    settings: Optional[PackerSettings] = None,
    rules: Optional[RuleTable] = None,
) -> PackingOptimizer:
    """
    Assemble an optimizer from settings.

    Raises:
        ValueError: the provider has no cost strategy
    """
    settings = settings or load_settings()
    cost_strategy = get_cost_strategy(provider or settings.cost_provider, unit_rate=settings.unit_rate)
    matcher = FeasibilityMatcher(rules or default_rule_table())
    return PackingOptimizer(
        matcher,
        cost_strategy,
        use_solver=settings.use_solver,
        time_limit_sec=settings.solver_time_limit_sec,
    )


def pack(
    pieces: Optional[Iterable[Piece]],
    constraints: Optional[Constraints] = None,
    provider: Union[ShippingProvider, str, None] = None,
    settings: Optional[PackerSettings] = None,
) -> Plan:
    """
    Pack pieces with the default rule table.

    Args:
        pieces: Pieces to ship
        constraints: Box/container whitelists (default: unrestricted)
        provider: Shipping provider for costing (default: settings.cost_provider)
        settings: Runtime settings (default: read from the environment, which
            also applies PACKER_LOG_LEVEL)

    Returns:
        The packing Plan

    Raises:
        ValueError: unknown or unimplemented provider (raised before any packing)
    """
    if settings is None:
        settings = load_settings()
        configure_logging(settings.log_level)

    optimizer = build_optimizer(provider, settings)
    return optimizer.create_plan(pieces, constraints)
