from __future__ import annotations

import json

import numpy as np
import pytest

from match3.encoders import (
    AdjacencyEncoder,
    FullGridEncoder,
    LocalWindowEncoder,
    make_encoder,
)

GRID = np.array(
    [
        [0, 0, 0],
        [0, 1, 0],
        [2, 1, 1],
        [1, 2, 1],
    ],
    dtype=np.uint8,
)


@pytest.mark.parametrize("encoder", [FullGridEncoder(), LocalWindowEncoder(), AdjacencyEncoder()])
def test_encoders_are_pure_functions_of_grid_and_cursor(encoder) -> None:
    key = encoder(GRID, (2, 0))
    assert key == encoder.encode(GRID.copy(), (2, 0))
    assert key != encoder(GRID, (2, 1))


def test_full_grid_encoder_keeps_every_cell() -> None:
    payload = json.loads(FullGridEncoder().encode(GRID, (1, 1)))
    assert payload == {"grid": GRID.tolist(), "cursor": [1, 1]}


def test_window_marks_rows_outside_the_board() -> None:
    encoder = LocalWindowEncoder()
    top = json.loads(encoder.encode(GRID, (0, 0)))
    assert top["grid"] == [None, [0, 0, 0], [0, 1, 0]]
    bottom = json.loads(encoder.encode(GRID, (3, 1)))
    assert bottom["grid"] == [[2, 1, 1], [1, 2, 1], None]
    assert bottom["cursor"] == [3, 1]


def test_window_tells_empty_row_from_missing_row() -> None:
    payload = json.loads(LocalWindowEncoder().encode(np.zeros((3, 3), dtype=np.uint8), (0, 0)))
    assert payload["grid"][0] is None
    assert payload["grid"][1] == [0, 0, 0]


def test_window_ignores_rows_far_from_cursor() -> None:
    encoder = LocalWindowEncoder()
    changed = GRID.copy()
    changed[3, 0] = 2
    assert encoder.encode(GRID, (1, 0)) == encoder.encode(changed, (1, 0))


def test_adjacency_encoder_marks_pairs() -> None:
    payload = json.loads(AdjacencyEncoder(rows=2).encode(GRID, (2, 0)))
    # Rows 2 and 3: [2, 1, 1] and [1, 2, 1].
    assert payload["h"] == "FTFF"
    assert payload["v"] == "FFT"
    assert payload["cursor"] == [2, 0]


def test_adjacency_encoder_uses_unknown_for_empty_cells() -> None:
    payload = json.loads(AdjacencyEncoder().encode(GRID, (1, 0)))
    # Rows 1 to 3: [0, 1, 0], [2, 1, 1] and [1, 2, 1].
    assert payload["h"] == "??FTFF"
    assert payload["v"] == "?T?FFT"


def test_make_encoder_by_name() -> None:
    assert isinstance(make_encoder("full"), FullGridEncoder)
    assert make_encoder("window").name == "window"
    assert make_encoder("adjacency", rows=2).rows == 2
    with pytest.raises(ValueError):
        make_encoder("pixels")
    with pytest.raises(ValueError):
        AdjacencyEncoder(rows=0)
