# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""The notation the editor integration uses when it records keystrokes.

Printable characters stand for themselves. Non-printable keys are written
between pipes, such as ``|enter|``, and control chords are written ``<C-X>``.
"""
import enum
import typing

import pygtrie


class NamedKey(enum.Enum):
    ENTER = "enter"
    ESCAPE = "escape"
    SPACE = "space"
    TAB = "tab"
    BACKSPACE = "backspace"

    @property
    def notation(self) -> str:
        return f"|{self.value}|"


NAMED_KEYS = pygtrie.CharTrie({key.notation: key for key in NamedKey})
LONGEST_NAMED_KEY = max(len(key.notation) for key in NamedKey)

CHORD_PREFIX = "<C-"
CHORD_SUFFIX = ">"
CHORD_LENGTH = len(CHORD_PREFIX) + 1 + len(CHORD_SUFFIX)


class Match(typing.NamedTuple):
    value: typing.Any
    length: int


def match_named_key(text: str, pos: int) -> typing.Optional[Match]:
    step = NAMED_KEYS.longest_prefix(text[pos : pos + LONGEST_NAMED_KEY])
    if not step:
        return None
    return Match(value=step.value, length=len(step.key))


def match_control_chord(text: str, pos: int) -> typing.Optional[Match]:
    "Match a ``<C-X>`` chord at pos; the value is the single chord character."
    chunk = text[pos : pos + CHORD_LENGTH]
    if len(chunk) != CHORD_LENGTH:
        return None
    if not chunk.startswith(CHORD_PREFIX) or not chunk.endswith(CHORD_SUFFIX):
        return None
    return Match(value=chunk[len(CHORD_PREFIX)], length=CHORD_LENGTH)
