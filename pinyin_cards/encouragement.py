"""Encouragement messages from the two parent personas."""

import random
from typing import NamedTuple

DAD = "dad"
MOM = "mom"

MESSAGES = {
    DAD: ("咪猪头真棒！", "大猪头爸爸为你骄傲！", "继续加油！", "太厉害了！"),
    MOM: ("宝贝太聪明了！", "蜂蜜小黄鱼妈妈给你比心 ❤️", "读得真好听！", "哇，全对！"),
}

ALL_MESSAGES = frozenset(m for pool in MESSAGES.values() for m in pool)


class Encouragement(NamedTuple):
    persona: str
    message: str


def pick_encouragement(rng: random.Random) -> Encouragement:
    """Pick a persona 50/50, then one of its messages uniformly."""
    persona = DAD if rng.random() < 0.5 else MOM
    return Encouragement(persona, rng.choice(MESSAGES[persona]))


def should_encourage(rng: random.Random, chance_pct: int) -> bool:
    """True with probability `chance_pct` percent."""
    return rng.random() * 100 < chance_pct
