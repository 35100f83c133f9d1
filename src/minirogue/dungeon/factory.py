from __future__ import annotations

import logging
from typing import Optional, Union

from ..config import GenerationSettings
from ..rng import RNGManager
from .map import DungeonMap
from .policy import FloorType

logger = logging.getLogger(__name__)


class DungeonFactory:
    """Builds reproducible floors from a master seed.

    Usage:
      settings = GenerationSettings.from_env(GenerationSettings.load())
      floor = DungeonFactory.generate(3, FloorType.BOSS, seed=1234, settings=settings)

    The same ``(seed, floor, floor_type)`` triple always yields the same map.
    """

    @staticmethod
    def generate(
        floor: int,
        floor_type: FloorType = FloorType.REGULAR,
        seed: Optional[Union[int, str]] = None,
        settings: Optional[GenerationSettings] = None,
    ) -> DungeonMap:
        if settings is None:
            settings = GenerationSettings.load()
        master = seed if seed is not None else settings.seed
        rngm = RNGManager(master)
        rng = rngm.floor_rng(floor, floor_type)
        logger.info(
            "DungeonFactory: floor=%d type=%s master_seed=%s",
            floor,
            floor_type.value,
            rngm.get_master_seed_hex(),
        )
        return DungeonMap(floor, floor_type, rng=rng, settings=settings)
