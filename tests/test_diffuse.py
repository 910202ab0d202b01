import numpy as np
import pytest

from stablefluids import (
    ORDERING_LEXICOGRAPHIC, ORDERING_RED_BLACK, SCALAR, VELOCITY_X, FieldBuffer,
)
from stablefluids.diffuse import diffuse, relax


def impulse_source():
    """4x4 grid (2x2 interior) with 4.0 at (1, 1)."""
    src = FieldBuffer(4)
    src.set(1, 1, 4.0)
    return src


def test_gauss_seidel_reuses_updated_neighbours():
    field = FieldBuffer(4)
    relax(field, impulse_source(), 1.0, 4.0, SCALAR, 1)

    assert field.get(1, 1) == 1.0
    assert field.get(2, 1) == 0.25
    assert field.get(1, 2) == 0.25
    # Jacobi would leave this at zero after one sweep
    assert field.get(2, 2) == 0.125


def test_red_black_sweeps_each_colour_separately():
    field = FieldBuffer(4)
    relax(field, impulse_source(), 1.0, 4.0, SCALAR, 1, ORDERING_RED_BLACK)

    assert field.get(1, 1) == 1.0
    assert field.get(2, 2) == 0.0      # red, updated before any black cell changed
    assert field.get(2, 1) == 0.25
    assert field.get(1, 2) == 0.25


@pytest.mark.parametrize("ordering", [ORDERING_LEXICOGRAPHIC, ORDERING_RED_BLACK])
def test_boundary_applied_after_each_sweep(ordering):
    field = FieldBuffer(6)
    src = FieldBuffer(6)
    src.data[:] = np.random.default_rng(0).normal(size=36)
    relax(field, src, 0.5, 3.0, VELOCITY_X, 3, ordering)
    for y in range(1, 5):
        assert field.get(0, y) == -field.get(1, y)
        assert field.get(5, y) == -field.get(4, y)


@pytest.mark.parametrize("ordering", [ORDERING_LEXICOGRAPHIC, ORDERING_RED_BLACK])
def test_zero_stays_zero(ordering):
    field = FieldBuffer(7)
    relax(field, FieldBuffer(7), 2.0, 9.0, SCALAR, 10, ordering)
    assert not field.data.any()


def test_orderings_converge_to_the_same_solution():
    N = 8
    rng = np.random.default_rng(42)
    src = FieldBuffer(N)
    src.data[:] = rng.uniform(-1.0, 1.0, size=N * N)

    lex = FieldBuffer(N)
    rb = FieldBuffer(N)
    relax(lex, src, 1.0, 5.0, SCALAR, 200, ORDERING_LEXICOGRAPHIC)
    relax(rb, src, 1.0, 5.0, SCALAR, 200, ORDERING_RED_BLACK)

    np.testing.assert_allclose(lex.data, rb.data, atol=1e-10)

    # and the converged field satisfies the relaxation equation on the interior
    x = lex.view
    b = src.view
    residual = (b[1:-1, 1:-1] + (x[2:, 1:-1] + x[:-2, 1:-1] + x[1:-1, 2:] + x[1:-1, :-2])) / 5.0
    np.testing.assert_allclose(x[1:-1, 1:-1], residual, atol=1e-10)


def test_zero_iterations_leaves_field_alone():
    field = FieldBuffer(4)
    field.fill(3.0)
    relax(field, impulse_source(), 1.0, 4.0, SCALAR, 0)
    assert np.all(field.data == 3.0)


def test_argument_checks():
    f = FieldBuffer(4)
    with pytest.raises(ValueError):
        relax(f, f, 1.0, 4.0, SCALAR, 1)
    with pytest.raises(ValueError):
        relax(f, FieldBuffer(5), 1.0, 4.0, SCALAR, 1)
    with pytest.raises(ValueError):
        relax(f, FieldBuffer(4), 1.0, 4.0, SCALAR, -1)
    with pytest.raises(ValueError):
        relax(f, FieldBuffer(4), 1.0, 0.0, SCALAR, 1)
    with pytest.raises(ValueError):
        relax(f, FieldBuffer(4), 1.0, 4.0, SCALAR, 1, ordering="jacobi")


def test_diffusion_spreads_impulse_to_neighbours():
    N = 10
    vx = FieldBuffer(N)
    vx0 = FieldBuffer(N)
    vx.set(5, 5, 1.0)

    diffuse(vx0, vx, 0.0001, 0.1, VELOCITY_X, 4)

    assert 0.99 < vx0.get(5, 5) < 1.0
    for x, y in [(4, 5), (6, 5), (5, 4), (5, 6)]:
        assert vx0.get(x, y) > 0.0
    assert vx0.get(1, 1) == 0.0


def test_diffusion_with_zero_rate_copies_source():
    N = 6
    src = FieldBuffer(N)
    src.data[:] = np.arange(N * N, dtype=float)
    dst = FieldBuffer(N)

    diffuse(dst, src, 0.0, 0.1, SCALAR, 4)

    np.testing.assert_array_equal(dst.view[1:-1, 1:-1], src.view[1:-1, 1:-1])
    assert dst.get(0, 2) == dst.get(1, 2)


def test_diffusion_keeps_density_non_negative():
    N = 12
    src = FieldBuffer(N)
    src.data[:] = np.random.default_rng(1).uniform(0.0, 5.0, size=N * N)
    dst = FieldBuffer(N)
    diffuse(dst, src, 0.5, 0.1, SCALAR, 8)
    assert dst.min() >= 0.0
