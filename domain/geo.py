from __future__ import annotations

import random
from decimal import Decimal

from .models import AxisRange, BoundingBox, SampleRange

FRACTION_SCALE = 1_000_000


def fraction_multiplier(remainder: Decimal) -> int:
    """
    Escala escolhida pelo tamanho da representação textual do resto
    (sinal e "0." inclusos): "0" -> 10, "0.5" -> 1000, "0.810382" -> 10**6.
    """
    n = len(str(remainder))
    if n == 1:
        return 10
    if n == 2:
        return 100
    if n == 3:
        return 1000
    if n == 4:
        return 10000
    if n == 5:
        return 100000
    return FRACTION_SCALE


def split_bound(value: Decimal) -> tuple[int, int]:
    integral = int(value)  # trunca em direção a zero
    remainder = value - integral
    fractional = int(remainder * fraction_multiplier(remainder))
    return integral, fractional


def _axis(max_value: Decimal, min_value: Decimal) -> AxisRange:
    int_max, frac_max = split_bound(max_value)
    int_min, frac_min = split_bound(min_value)

    # ambos negativos: depois de escalar, "max" fica menor que "min"
    if frac_max < 0 and frac_min < 0:
        frac_max, frac_min = frac_min, frac_max

    return AxisRange(
        integral_min=int_min,
        integral_max=int_max,
        fractional_min=frac_min,
        fractional_max=frac_max,
    )


def derive_ranges(box: BoundingBox) -> SampleRange:
    return SampleRange(
        latitude=_axis(box.max_lat, box.min_lat),
        longitude=_axis(box.max_long, box.min_long),
    )


def _draw(rng: random.Random, lo: int, hi: int) -> int:
    # faixa invertida não é erro: sorteia em [hi, lo]
    if lo > hi:
        lo, hi = hi, lo
    return rng.randint(lo, hi)


def _sample_axis(axis: AxisRange, rng: random.Random) -> Decimal:
    integral = _draw(rng, axis.integral_min, axis.integral_max)
    fractional = _draw(rng, axis.fractional_min, axis.fractional_max)
    return Decimal(integral) + Decimal(fractional) / FRACTION_SCALE


def sample_coordinate(
    ranges: SampleRange,
    lat_rng: random.Random,
    long_rng: random.Random,
) -> tuple[Decimal, Decimal]:
    """
    Retorna (latitude, longitude).
    Cada eixo usa seu próprio stream; nada da latitude vaza para a longitude.
    """
    latitude = _sample_axis(ranges.latitude, lat_rng)
    longitude = _sample_axis(ranges.longitude, long_rng)
    return latitude, longitude
