"""Timing of one scalar evaluation per family, in the main algorithm regions"""

import pytest

import zbessel.airy as za
import zbessel.bessel as zb


@pytest.mark.parametrize(
    "z",
    [0.5 + 0.5j, 8.0 + 3.0j, 40.0 - 10.0j, -6.0 + 2.0j],
    ids=["series", "miller", "asymptotic", "continuation"],
)
def test_benchmark_iv(benchmark, z: complex):
    benchmark(zb.iv, 1.3, z)


@pytest.mark.parametrize(
    "z",
    [0.5 + 0.5j, 8.0 + 3.0j, -6.0 + 2.0j],
    ids=["series", "miller", "continuation"],
)
def test_benchmark_kv(benchmark, z: complex):
    benchmark(zb.kv, 1.3, z)


def test_benchmark_jv(benchmark):
    benchmark(zb.jv, 2.5, 10.0 + 1.0j)


def test_benchmark_yv(benchmark):
    benchmark(zb.yv, 2.5, 10.0 + 1.0j)


def test_benchmark_hankel1(benchmark):
    benchmark(zb.hankel1, 2.5, 10.0 + 1.0j)


@pytest.mark.parametrize("v", [100.0, 300.0], ids=["fnul", "far"])
def test_benchmark_large_order(benchmark, v: float):
    benchmark(zb.jv, v, 0.9 * v + 1.0j)


@pytest.mark.parametrize("z", [0.5 + 0.5j, 5.0 + 5.0j, -5.0 - 1.0j])
def test_benchmark_airy(benchmark, z: complex):
    benchmark(za.airy_ai, z)


@pytest.mark.parametrize("z", [0.5 + 0.5j, 5.0 + 5.0j, -5.0 - 1.0j])
def test_benchmark_biry(benchmark, z: complex):
    benchmark(za.airy_bi, z)
