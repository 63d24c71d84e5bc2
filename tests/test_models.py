from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from shipment_packer.catalog import get_box_kind_dims, get_container_kind_dims
from shipment_packer.models import Box, BoxKind, Container, ContainerKind, Material, Piece, Plan


def test_piece_weight_is_ceiled_area_times_factor() -> None:
    """Weight = ceil(width * height * weight factor) for every material."""
    for material in Material:
        piece = Piece(id="p", width=23.5, height=31, material=material)
        assert piece.weight == math.ceil(23.5 * 31 * material.weight_factor)


def test_piece_weight_examples() -> None:
    # 20 x 30 glass = 5.88 lbs -> 6
    assert Piece(id="g", width=20, height=30, material=Material.GLASS).weight == 6
    assert Piece(id="u", width=40, height=40, material=Material.UNKNOWN).weight == 0


def test_piece_accepts_non_positive_dimensions() -> None:
    """Odd input is kept as-is and yields an odd (but finite) weight."""
    piece = Piece(id="bad", width=-5, height=10, material=Material.GLASS)
    assert piece.width == -5
    assert piece.weight == 0

    zero = Piece(id="zero", width=0, height=0, material=Material.MIRROR)
    assert zero.weight == 0


def test_unknown_material_always_weighs_nothing() -> None:
    assert Piece(id="inf", width=math.inf, height=20, material=Material.UNKNOWN).weight == 0
    assert Piece(id="nan", width=math.nan, height=20, material=Material.UNKNOWN).weight == 0


def test_non_finite_dimensions_do_not_raise() -> None:
    piece = Piece(id="nan", width=math.nan, height=20, material=Material.GLASS)
    assert math.isnan(piece.weight)
    assert not piece.has_finite_dimensions

    tall = Piece(id="inf", width=10, height=math.inf, material=Material.GLASS)
    assert tall.weight == math.inf
    assert not tall.has_finite_dimensions

    assert Piece(id="ok", width=10, height=10, material=Material.GLASS).has_finite_dimensions


def test_material_from_string() -> None:
    assert Material.from_string("glass") is Material.GLASS
    assert Material.from_string("  Acoustic Panel-Framed ") is Material.ACOUSTIC_PANEL_FRAMED
    assert Material.from_string("CANVAS_GALLERY") is Material.CANVAS_GALLERY
    assert Material.from_string("granite") is Material.UNKNOWN
    assert Material.from_string(None) is Material.UNKNOWN


def test_catalog_attributes() -> None:
    assert (BoxKind.STANDARD.outer_length, BoxKind.STANDARD.outer_width, BoxKind.STANDARD.min_height) == (37, 11, 31)
    assert BoxKind.LARGE.outer_width == 13
    assert BoxKind.CRATE.min_height == 0
    assert ContainerKind.STANDARD_CRATE.tare_weight == 125.0
    assert ContainerKind.STANDARD_CRATE.base_clearance == 8
    assert ContainerKind.OVERSIZE_PALLET.outer_length == 60


def test_catalog_lookup_rejects_unknown_kind() -> None:
    assert get_box_kind_dims(" large ")["length"] == 44
    with pytest.raises(ValueError, match="Unknown box kind"):
        get_box_kind_dims("TUBE")
    with pytest.raises(ValueError, match="Unknown container kind"):
        get_container_kind_dims("BARREL")


def test_box_height_and_weight() -> None:
    box = Box(id="b", kind=BoxKind.STANDARD, capacity=6)
    # Empty box reports its minimum usable height
    assert box.current_height == 31
    assert box.total_weight == 0

    box.add_piece(Piece(id="short", width=20, height=20, material=Material.GLASS))
    assert box.current_height == 31

    box.add_piece(Piece(id="tall", width=20, height=35.5, material=Material.GLASS))
    assert box.current_height == 35.5
    assert box.total_weight == 4 + 7


def test_box_is_full() -> None:
    box = Box(id="b", kind=BoxKind.STANDARD, capacity=2)
    assert not box.is_full
    box.add_piece(Piece(id="1", width=10, height=10, material=Material.GLASS))
    box.add_piece(Piece(id="2", width=10, height=10, material=Material.GLASS))
    assert box.is_full

    probe = Box(id="probe", kind=BoxKind.STANDARD)
    assert not probe.is_full


def test_container_height_and_weight() -> None:
    crate = Container(id="c", kind=ContainerKind.STANDARD_CRATE)
    # min usable height 8 + base clearance 8
    assert crate.current_height == 16
    assert crate.total_weight == 125.0

    box = Box(id="b", kind=BoxKind.CRATE, capacity=18)
    box.add_piece(Piece(id="p", width=45, height=40, material=Material.GLASS))
    crate.add_box(box)
    assert crate.current_height == 40 + 8
    assert crate.total_weight == 125.0 + box.total_weight


def test_container_counts_boxes_per_kind() -> None:
    pallet = Container(id="c", kind=ContainerKind.STANDARD_PALLET)
    pallet.add_box(Box(id="b1", kind=BoxKind.STANDARD))
    pallet.add_box(Box(id="b2", kind=BoxKind.STANDARD))
    pallet.add_box(Box(id="b3", kind=BoxKind.LARGE))

    assert pallet.count_boxes(BoxKind.STANDARD) == 2
    assert pallet.count_boxes(BoxKind.LARGE) == 1
    assert pallet.count_boxes(BoxKind.CRATE) == 0
    # pallet: min height 0, tallest box is LARGE (48)
    assert pallet.current_height == 48


def test_plan_derived_values() -> None:
    box = Box(id="b", kind=BoxKind.STANDARD, capacity=6)
    box.add_piece(Piece(id="p1", width=20, height=20, material=Material.GLASS))
    box.add_piece(Piece(id="p2", width=20, height=20, material=Material.GLASS))
    pallet = Container(id="c", kind=ContainerKind.STANDARD_PALLET, boxes=[box])

    plan = Plan(containers=[pallet], total_cost=680.0)

    assert plan.total_weight == 60 + 4 + 4
    assert plan.container_count == 1
    assert plan.box_count == 1
    assert plan.packed_piece_count == 2
    assert plan.boxes_by_kind() == {BoxKind.STANDARD: 1}
    assert plan.containers_by_kind() == {ContainerKind.STANDARD_PALLET: 1}


def test_empty_plan() -> None:
    plan = Plan()
    assert plan.total_weight == 0
    assert plan.total_cost == 0
    assert plan.container_count == 0
    assert plan.box_count == 0
    assert plan.unpacked_pieces == []


def test_plan_fields_cannot_be_reassigned() -> None:
    plan = Plan(total_cost=10.0)
    with pytest.raises(ValidationError):
        plan.total_cost = 0.0
    with pytest.raises(ValidationError):
        plan.containers = []
