import random

import pytest

from app.domain.entities.damage_verdict import DamageLevel
from app.infrastructure.gateways.damage_assessor_random import RandomDamageAssessor


@pytest.mark.asyncio
async def test_same_seed_gives_same_assessments():
    first = RandomDamageAssessor(rng=random.Random(7))
    second = RandomDamageAssessor(rng=random.Random(7))

    results = [await first.assess("in.jpg", "out.jpg") for _ in range(20)]

    assert results == [await second.assess("in.jpg", "out.jpg") for _ in range(20)]


@pytest.mark.asyncio
async def test_assessments_are_coherent():
    assessor = RandomDamageAssessor(rng=random.Random(1))

    for _ in range(200):
        result = await assessor.assess("in.jpg", "out.jpg")
        assert result.has_damage == (result.level != DamageLevel.NONE)
        assert 0.7 <= result.confidence <= 1.0
