from __future__ import annotations

import itertools
from typing import Optional

from shipment_packer.models import Box, BoxKind, Container, ContainerKind


class UnitFactory:
    """
    Creates boxes and containers with sequential ids.

    One factory per packing run: ids restart at 1 and never collide with
    another run going on at the same time.
    """

    def __init__(self) -> None:
        self._box_ids = itertools.count(1)
        self._container_ids = itertools.count(1)

    def new_box(self, kind: BoxKind, capacity: Optional[int] = None) -> Box:
        return Box(id=f"Box-{next(self._box_ids)}", kind=kind, capacity=capacity)

    def new_container(self, kind: ContainerKind) -> Container:
        return Container(id=f"Container-{next(self._container_ids)}", kind=kind)
