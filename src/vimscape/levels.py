# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Experience curve and level calculations.

The curve is cumulative: reaching level L takes the sum of XP_BASE * XP_MULTIPLIER**n for n from 1 to L.
"""
import bisect
import itertools
import logging
import math
import typing

from .types import BatchDelta, LevelDiff, SkillRows

logger = logging.getLogger(__name__)

XP_BASE = 75.0
XP_MULTIPLIER = 1.10409
MIN_LEVEL = 1
MAX_LEVEL = 99

EXP_THRESHOLDS: tuple[float, ...] = tuple(
    itertools.accumulate(XP_BASE * XP_MULTIPLIER**level for level in range(MIN_LEVEL, MAX_LEVEL + 1))
)


def level_for_exp(total_exp: int) -> int:
    "The smallest level whose cumulative threshold is at least total_exp, clamped to [1, 99]."
    if total_exp <= 0:
        return MIN_LEVEL
    index = bisect.bisect_left(EXP_THRESHOLDS, total_exp)
    return min(index + MIN_LEVEL, MAX_LEVEL)


def exp_to_next_level(total_exp: int) -> typing.Optional[int]:
    level = level_for_exp(total_exp)
    if level >= MAX_LEVEL:
        return None
    # total_exp must exceed the current level's threshold to move on
    threshold = EXP_THRESHOLDS[level - MIN_LEVEL]
    return math.floor(threshold) + 1 - max(total_exp, 0)


def updated_levels(current_rows: SkillRows, batch_delta: BatchDelta) -> dict[str, int]:
    return {name: level_for_exp(current_rows[name].total_exp + exp) for name, exp in batch_delta.items()}


def level_diff(current_rows: SkillRows, new_levels: typing.Mapping[str, int]) -> LevelDiff:
    diff = {name: level for name, level in new_levels.items() if level > current_rows[name].level}
    if diff:
        logger.debug("Level ups: %r", diff)
    return diff
