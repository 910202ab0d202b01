import numpy as np
import pytest

from stablefluids import SCALAR, VELOCITY_X, FieldBuffer
from stablefluids.advect import advect


def random_field(N: int, seed: int = 0, low: float = 0.0, high: float = 1.0) -> FieldBuffer:
    f = FieldBuffer(N)
    f.data[:] = np.random.default_rng(seed).uniform(low, high, size=N * N)
    return f


def uniform_velocity(N: int, vx: float, vy: float) -> tuple[FieldBuffer, FieldBuffer]:
    u, v = FieldBuffer(N), FieldBuffer(N)
    u.fill(vx)
    v.fill(vy)
    return u, v


def test_zero_velocity_copies_interior():
    N = 8
    src = random_field(N)
    dst = FieldBuffer(N)
    u, v = uniform_velocity(N, 0.0, 0.0)

    advect(dst, src, u, v, 0.1, SCALAR)

    np.testing.assert_array_equal(dst.view[1:-1, 1:-1], src.view[1:-1, 1:-1])
    assert dst.get(0, 3) == dst.get(1, 3)


def test_shift_by_exactly_one_cell():
    # dt * (N-2) * vx == 1 → every interior cell samples its left neighbour
    N = 10
    src = random_field(N, seed=1)
    dst = FieldBuffer(N)
    u, v = uniform_velocity(N, 1.0, 0.0)

    advect(dst, src, u, v, 0.125, SCALAR)

    for j in range(1, N - 1):
        for i in range(2, N - 1):
            assert dst.get(i, j) == src.get(i - 1, j)


def test_shift_in_y():
    N = 10
    src = random_field(N, seed=2)
    dst = FieldBuffer(N)
    u, v = uniform_velocity(N, 0.0, -1.0)

    advect(dst, src, u, v, 0.125, SCALAR)

    for j in range(1, N - 2):
        for i in range(1, N - 1):
            assert dst.get(i, j) == src.get(i, j + 1)


def test_half_cell_shift_interpolates():
    N = 6
    src = FieldBuffer(N)
    src.set(2, 2, 1.0)
    dst = FieldBuffer(N)
    u, v = uniform_velocity(N, 0.5, 0.0)

    advect(dst, src, u, v, 0.25, SCALAR)    # dt * (N-2) * vx == 0.5

    assert dst.get(2, 2) == pytest.approx(0.5)
    assert dst.get(3, 2) == pytest.approx(0.5)
    assert dst.get(4, 2) == 0.0


@pytest.mark.parametrize("speed", [1e6, -1e6])
def test_huge_velocity_is_clamped_inside_the_grid(speed):
    N = 7
    src = random_field(N, seed=3, low=-2.0, high=3.0)
    dst = FieldBuffer(N)
    u, v = uniform_velocity(N, speed, speed)

    advect(dst, src, u, v, 1.0, SCALAR)

    assert np.all(np.isfinite(dst.data))
    assert dst.min() >= src.min()
    assert dst.max() <= src.max()


def test_non_negative_field_stays_non_negative():
    N = 12
    src = random_field(N, seed=4)
    dst = FieldBuffer(N)
    u = random_field(N, seed=5, low=-3.0, high=3.0)
    v = random_field(N, seed=6, low=-3.0, high=3.0)

    advect(dst, src, u, v, 0.1, SCALAR)

    assert dst.min() >= 0.0


def test_boundary_kind_applied_afterwards():
    N = 8
    src = random_field(N, seed=7)
    dst = FieldBuffer(N)
    u = random_field(N, seed=8, low=-1.0, high=1.0)
    v = random_field(N, seed=9, low=-1.0, high=1.0)

    advect(dst, src, u, v, 0.1, VELOCITY_X)

    for y in range(1, N - 1):
        assert dst.get(0, y) == -dst.get(1, y)
        assert dst.get(N - 1, y) == -dst.get(N - 2, y)


def test_dst_and_src_must_differ():
    f = FieldBuffer(5)
    u, v = uniform_velocity(5, 0.0, 0.0)
    with pytest.raises(ValueError):
        advect(f, f, u, v, 0.1, SCALAR)
