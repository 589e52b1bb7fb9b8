from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class RandomStreams:
    """Um gerador por stream lógico, criado uma vez e passado adiante."""
    latitude: random.Random
    longitude: random.Random
    status: random.Random
    image: random.Random

    @classmethod
    def from_seed(cls, seed: int | None = None) -> "RandomStreams":
        if seed is None:
            # sem seed: cada Random() puxa entropia do SO separadamente
            return cls(random.Random(), random.Random(), random.Random(), random.Random())

        master = random.Random(seed)
        lat, lng, status, image = (master.getrandbits(64) for _ in range(4))
        return cls(
            latitude=random.Random(lat),
            longitude=random.Random(lng),
            status=random.Random(status),
            image=random.Random(image),
        )
