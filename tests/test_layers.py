"""Tests for Layer queries and merging."""

import array

import pytest

from tmx_reader import (
    CustomProperties, DimensionMismatch, DocumentParseFailure, Layer, merge_layers,
)
from tmx_reader.properties import coerce_properties


def make_layer(name, gids, width, height, layer_id=1) -> Layer:
    return Layer(id=layer_id, name=name, width=width, height=height,
                 data=array.array('I', gids))


class TestMerge:
    """Overlaying one layer on another."""

    def test_upper_layer_wins_where_painted(self) -> None:
        a = make_layer("ground", [1, 0, 3], 3, 1)
        b = make_layer("patch", [0, 5, 0], 3, 1)
        merged = merge_layers(a, b)
        assert list(merged.data) == [1, 5, 3]

    def test_upper_layer_overrides_non_empty_cells(self) -> None:
        a = make_layer("a", [1, 2, 3, 4], 2, 2)
        b = make_layer("b", [9, 0, 0, 8], 2, 2)
        assert list(a.merge(b).data) == [9, 2, 3, 8]

    def test_result_shape_and_name(self) -> None:
        props = coerce_properties([("Z", "int", "1")])
        a = Layer(id=1, name="a", width=2, height=1, data=array.array('I', [1, 1]), properties=props)
        b = make_layer("b", [0, 0], 2, 1, layer_id=2)
        merged = merge_layers(a, b)
        assert (merged.width, merged.height) == (2, 1)
        assert merged.name == "a + b"
        assert merged.properties == CustomProperties()

    def test_inputs_untouched(self) -> None:
        a = make_layer("a", [1, 0], 2, 1)
        b = make_layer("b", [0, 2], 2, 1)
        merge_layers(a, b)
        assert list(a.data) == [1, 0]
        assert list(b.data) == [0, 2]

    def test_high_gids_survive(self) -> None:
        a = make_layer("a", [0xFFFFFFFF, 0], 2, 1)
        b = make_layer("b", [0, 0x80000001], 2, 1)
        assert list(merge_layers(a, b).data) == [0xFFFFFFFF, 0x80000001]

    def test_width_mismatch(self) -> None:
        a = make_layer("a", [1, 2, 3, 4], 4, 1)
        b = make_layer("b", [1, 2, 3, 4], 2, 2)
        with pytest.raises(DimensionMismatch) as info:
            merge_layers(a, b)
        assert info.value.first == (4, 1)
        assert info.value.second == (2, 2)
        assert "4x1 vs 2x2" in str(info.value)

    @pytest.mark.parametrize("short_side", ["below", "above"])
    def test_data_length_must_match_size(self, short_side: str) -> None:
        full = make_layer("full", [1, 2, 3], 3, 1)
        short = make_layer("short", [7], 3, 1)
        pair = (short, full) if short_side == "below" else (full, short)
        with pytest.raises(DocumentParseFailure) as info:
            merge_layers(*pair)
        assert "'short'" in str(info.value)



class TestQueries:
    """Cell access helpers."""

    def test_get_tile_gid(self) -> None:
        layer = make_layer("a", [1, 2, 3, 4, 5, 6], 3, 2)
        assert layer.get_tile_gid(0, 0) == 1
        assert layer.get_tile_gid(2, 1) == 6

    def test_get_tile_gid_outside(self) -> None:
        layer = make_layer("a", [1, 2], 2, 1)
        with pytest.raises(IndexError):
            layer.get_tile_gid(2, 0)

    def test_as_grid(self) -> None:
        layer = make_layer("a", [1, 2, 3, 4, 5, 6], 3, 2)
        grid = layer.as_grid()
        assert grid.shape == (2, 3)
        assert grid[1, 0] == 4
        assert not grid.flags.writeable
