"""Shipping cost strategies and the provider registry that selects one."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from shipment_packer.models import Container, ContainerKind

DEFAULT_UNIT_RATE = 10.0  # currency per lb


class CostStrategy:
    """Base class for shipping cost strategies. Implementations must be pure."""

    def cost(self, container: Optional[Container]) -> float:
        """
        Cost of shipping one fully packed container.

        Args:
            container: Container in its final state (None costs nothing)

        Returns:
            Shipping cost
        """
        raise NotImplementedError

    def estimate_cost(self, container_kind: ContainerKind, estimated_total_weight: float) -> float:
        """
        Cost estimate for a container kind before it is actually packed.

        Not called during planning; callers use it to price a container kind
        ahead of a run.

        Args:
            container_kind: Kind of container being considered
            estimated_total_weight: Tare plus expected contents (lbs)

        Returns:
            Estimated shipping cost
        """
        raise NotImplementedError


class LinearCostStrategy(CostStrategy):
    """Cost = total weight x unit rate."""

    def __init__(self, unit_rate: float = DEFAULT_UNIT_RATE) -> None:
        if unit_rate < 0:
            raise ValueError(f"unit_rate cannot be negative, got {unit_rate!r}")
        self.unit_rate = float(unit_rate)

    def cost(self, container: Optional[Container]) -> float:
        if container is None:
            return 0.0
        return container.total_weight * self.unit_rate

    def estimate_cost(self, container_kind: ContainerKind, estimated_total_weight: float) -> float:
        return estimated_total_weight * self.unit_rate


class ShippingProvider(str, Enum):
    FEDEX = "FEDEX"
    UPS = "UPS"
    PLACEHOLDER = "PLACEHOLDER"


# Only providers with a finished strategy are registered.
COST_STRATEGIES: dict[ShippingProvider, type[CostStrategy]] = {
    ShippingProvider.PLACEHOLDER: LinearCostStrategy,
}


def get_cost_strategy(
    provider: Union[ShippingProvider, str],
    unit_rate: float = DEFAULT_UNIT_RATE,
) -> CostStrategy:
    """
    Build the cost strategy registered for a provider.

    Raises:
        ValueError: unknown provider name, or a provider with no strategy yet
    """
    if isinstance(provider, ShippingProvider):
        key = provider
    else:
        name = str(provider).strip().upper()
        try:
            key = ShippingProvider(name)
        except ValueError:
            raise ValueError(
                f"Unknown shipping provider '{provider}'. Valid: {sorted(p.value for p in COST_STRATEGIES)}"
            ) from None

    strategy_cls = COST_STRATEGIES.get(key)
    if strategy_cls is None:
        raise ValueError(
            f"No cost strategy has been implemented for provider: {key.value}. "
            f"Valid: {sorted(p.value for p in COST_STRATEGIES)}"
        )
    return strategy_cls(unit_rate=unit_rate)
