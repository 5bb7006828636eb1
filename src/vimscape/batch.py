import collections
import logging

from .classify import classify
from .lexer import Lexer
from .types import BatchDelta

logger = logging.getLogger(__name__)


def aggregate(keystrokes: str) -> BatchDelta:
    "Experience gained per skill name over one batch of recorded keystrokes."
    delta: collections.defaultdict[str, int] = collections.defaultdict(int)
    token_count = 0
    for token in Lexer(keystrokes):
        token_count += 1
        experience = classify(token)
        if experience is not None:
            delta[experience.skill.value] += experience.amount
    logger.debug("Lexed %d tokens into %r", token_count, dict(delta))
    return dict(delta)


def merge_deltas(*deltas: BatchDelta) -> BatchDelta:
    merged: collections.defaultdict[str, int] = collections.defaultdict(int)
    for delta in deltas:
        for name, exp in delta.items():
            merged[name] += exp
    return dict(merged)
