# src/shipment_packer/catalog.py
from __future__ import annotations

# Fixed box catalog (inches). min_height is the smallest usable interior height.
BOX_KIND_PRESETS: dict[str, dict[str, int]] = {
    "STANDARD":      {"length": 37, "width": 11, "min_height": 31},
    "LARGE":         {"length": 44, "width": 13, "min_height": 48},
    "SMALL_CARRIER": {"length": 36, "width": 6,  "min_height": 36},
    "LARGE_CARRIER": {"length": 44, "width": 6,  "min_height": 35},
    "CRATE":         {"length": 50, "width": 38, "min_height": 0},
}

# Fixed container catalog (inches / lbs). base_clearance is added on top of the content height.
CONTAINER_KIND_PRESETS: dict[str, dict[str, float]] = {
    "STANDARD_PALLET": {"length": 48, "width": 40, "tare_weight": 60.0,  "min_height": 0, "base_clearance": 0},
    "GLASS_PALLET":    {"length": 43, "width": 35, "tare_weight": 60.0,  "min_height": 0, "base_clearance": 0},
    "OVERSIZE_PALLET": {"length": 60, "width": 40, "tare_weight": 75.0,  "min_height": 0, "base_clearance": 0},
    "STANDARD_CRATE":  {"length": 50, "width": 38, "tare_weight": 125.0, "min_height": 8, "base_clearance": 8},
}


def get_box_kind_dims(name: str) -> dict[str, int]:
    key = name.strip().upper()
    if key not in BOX_KIND_PRESETS:
        raise ValueError(f"Unknown box kind '{name}'. Valid: {sorted(BOX_KIND_PRESETS.keys())}")
    return BOX_KIND_PRESETS[key]


def get_container_kind_dims(name: str) -> dict[str, float]:
    key = name.strip().upper()
    if key not in CONTAINER_KIND_PRESETS:
        raise ValueError(f"Unknown container kind '{name}'. Valid: {sorted(CONTAINER_KIND_PRESETS.keys())}")
    return CONTAINER_KIND_PRESETS[key]
