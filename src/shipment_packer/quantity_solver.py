"""Container quantity optimizer using OR-Tools CP-SAT - minimizes total tare weight."""

from __future__ import annotations

import logging
from typing import Any

from ortools.sat.python import cp_model

from shipment_packer.models import BoxKind, ContainerKind

logger = logging.getLogger(__name__)

# Far above any realistic shipment; only keeps the search space finite.
MAX_CONTAINERS_PER_KIND = 10_000

# Tare weights are scaled to hundredths of a lb so the objective stays integral.
WEIGHT_SCALE = 100


def solve_container_quantities(
    required: dict[BoxKind, int],
    capacities: dict[ContainerKind, dict[BoxKind, int]],
    time_limit_sec: float = 10.0,
) -> tuple[dict[ContainerKind, int], str]:
    """
    Choose how many containers of each kind to use.

    Model:
        x[c] in [0, MAX_CONTAINERS_PER_KIND] for each eligible container kind c
        for each box kind b: sum(capacity[c][b] * x[c]) >= required[b]
        minimize sum((tare[c] * WEIGHT_SCALE + 1) * x[c])

    The +1 per container breaks weight ties in favour of fewer containers
    (4 oversize pallets at 300 lbs beat 5 standard pallets at 300 lbs).

    Each box kind is covered independently; a container that can hold two box
    kinds is not limited jointly, so the counts are a quantity estimate that the
    caller still has to realise box by box.

    Args:
        required: box kind -> boxes that must be placed
        capacities: container kind -> {box kind -> max boxes of that kind}
        time_limit_sec: Wall-clock budget for the solve

    Returns:
        (container kind -> count for counts > 0, solver status name)

    Raises:
        RuntimeError: no container covers a required box kind, or the solver
            found no feasible solution within the budget
    """
    if not required:
        return {}, "EMPTY"

    model = cp_model.CpModel()

    # Decision variables: x[kind] = number of containers of that kind
    x: dict[ContainerKind, Any] = {}
    for kind in capacities:
        x[kind] = model.NewIntVar(0, MAX_CONTAINERS_PER_KIND, f"container_{kind.value}")

    # Constraint: every required box kind has enough slots
    for box_kind, needed in required.items():
        terms = [
            x[container_kind] * per_kind[box_kind]
            for container_kind, per_kind in capacities.items()
            if per_kind.get(box_kind, 0) > 0
        ]
        if not terms:
            raise RuntimeError(f"No container kind can hold {box_kind.value} boxes")
        model.Add(sum(terms) >= needed)

    model.Minimize(sum(
        x[kind] * (int(round(kind.tare_weight * WEIGHT_SCALE)) + 1)
        for kind in x
    ))

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = time_limit_sec
    solver.parameters.num_workers = 1
    solver.parameters.log_search_progress = False

    status = solver.Solve(model)
    status_name = solver.StatusName(status)

    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        raise RuntimeError(f"Solver failed with status {status_name}")

    counts: dict[ContainerKind, int] = {}
    for kind, var in x.items():
        quantity = int(solver.Value(var))
        if quantity > 0:
            counts[kind] = quantity

    summary = {kind.value: quantity for kind, quantity in counts.items()}
    logger.info(f"Container quantities solved ({status_name}): {summary}")
    return counts, status_name
