import pytest

from platypus.perlin import Perlin


def _samples(noise):
    return [noise.get(x * 0.37 + 0.11, y * 0.53 + 0.07) for x in range(40) for y in range(40)]


def test_zero_on_lattice_points():
    noise = Perlin(42)
    for x in range(-5, 6):
        for y in range(-5, 6):
            assert noise.get(float(x), float(y)) == pytest.approx(0.0, abs=1e-12)


def test_same_seed_is_deterministic():
    first = _samples(Perlin(7))
    second = _samples(Perlin(7))
    other = _samples(Perlin(8))
    assert len(first) == 1600
    assert max(abs(v) for v in first) > 0.05
    for a, b in zip(first, second):
        assert a == pytest.approx(b, abs=0.0)
    assert any(abs(a - c) > 1e-6 for a, c in zip(first, other))


def test_different_seeds_give_different_fields():
    a = _samples(Perlin(1))
    b = _samples(Perlin(2))
    assert any(abs(x - y) > 1e-6 for x, y in zip(a, b))


def test_values_bounded_and_nontrivial():
    values = _samples(Perlin(3))
    assert all(-1.0 <= v <= 1.0 for v in values)
    assert max(abs(v) for v in values) > 0.05


def test_takes_both_signs():
    values = _samples(Perlin(11))
    assert min(values) < 0.0 < max(values)


def test_continuity():
    noise = Perlin(5)
    for i in range(100):
        x = i * 0.173
        y = i * 0.091
        assert abs(noise.get(x, y) - noise.get(x + 1e-4, y)) < 1e-2


def test_negative_coordinates_supported():
    noise = Perlin(9)
    v = noise.get(-3.3, -17.8)
    assert -1.0 <= v <= 1.0
    assert v == noise.get(-3.3, -17.8)