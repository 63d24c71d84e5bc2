"""User constraints for a single packing run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shipment_packer.models import BoxKind, ContainerKind


class Constraints(BaseModel):
    """
    Whitelists that narrow the options the feasibility matcher may return.

    An empty whitelist means no restriction.
    """

    model_config = ConfigDict(frozen=True)

    allowed_box_kinds: tuple[BoxKind, ...] = Field(default=(), description="Box kinds allowed; empty = all")
    allowed_container_kinds: tuple[ContainerKind, ...] = Field(
        default=(), description="Container kinds allowed; empty = all")
    reserved_flag: bool = Field(default=False, description="Reserved for an alternate rule set; no effect")

    def allows_box_kind(self, kind: BoxKind) -> bool:
        """
        Check a box kind against the whitelist.

        Args:
            kind: Box kind produced by a matching rule

        Returns:
            True if the whitelist is empty or contains the kind
        """
        return not self.allowed_box_kinds or kind in self.allowed_box_kinds

    def allows_container_kind(self, kind: ContainerKind) -> bool:
        """
        Check a container kind against the whitelist.

        Args:
            kind: Container kind produced by a matching rule

        Returns:
            True if the whitelist is empty or contains the kind
        """
        return not self.allowed_container_kinds or kind in self.allowed_container_kinds
