# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import enum
import typing

import msgspec

MAX_COUNT = 999


### Tokens


class Token(msgspec.Struct, frozen=True, tag=True):
    pass


class MoveVerticalBasic(Token, frozen=True):
    # j, k, gj, gk
    count: int = 1


class MoveHorizontalBasic(Token, frozen=True):
    # h, l
    count: int = 1


class MoveVerticalChunk(Token, frozen=True):
    # <C-U>, <C-D>
    count: int = 1


class MoveHorizontalChunk(Token, frozen=True):
    # w, W, e, E, b, B
    count: int = 1


class JumpToHorizontal(Token, frozen=True):
    # f, F, t, T + target; ; and ,
    pass


class JumpToLineNumber(Token, frozen=True):
    # G, gg, :42|enter|
    line: str = ""


class JumpToVertical(Token, frozen=True):
    # M, H, L, <C-F>, <C-B>
    pass


class JumpFromContext(Token, frozen=True):
    # %
    pass


class CameraMovement(Token, frozen=True):
    # zz, zt, zb, <C-E>, <C-Y>
    pass


class WindowManagement(Token, frozen=True):
    # <C-W>x, <C-H>, <C-J>, <C-K>, <C-L>
    pass


class TextManipulationBasic(Token, frozen=True):
    # x, J, gJ, r + char
    count: int = 1


class TextManipulationAdvanced(Token, frozen=True):
    # R...|escape|, c + motion, g~/gu/gU + motion
    pass


class YankPaste(Token, frozen=True):
    # p, P, y + motion
    pass


class UndoRedo(Token, frozen=True):
    # u, U, <C-R>
    pass


class DotRepeat(Token, frozen=True):
    pass


class CommandSearch(Token, frozen=True):
    completed: bool


class DeleteText(Token, frozen=True):
    count: int = 1


class Command(Token, frozen=True):
    completed: bool


class HelpPage(Token, frozen=True):
    completed: bool


class SaveFile(Token, frozen=True):
    completed: bool


class Unhandled(Token, frozen=True):
    text: str


AnyToken = (
    MoveVerticalBasic
    | MoveHorizontalBasic
    | MoveVerticalChunk
    | MoveHorizontalChunk
    | JumpToHorizontal
    | JumpToLineNumber
    | JumpToVertical
    | JumpFromContext
    | CameraMovement
    | WindowManagement
    | TextManipulationBasic
    | TextManipulationAdvanced
    | YankPaste
    | UndoRedo
    | DotRepeat
    | CommandSearch
    | DeleteText
    | Command
    | HelpPage
    | SaveFile
    | Unhandled
)


### Skills


class Skill(enum.Enum):
    """The closed set of skills. Values are the names stored in the skills table."""

    VERTICAL_NAVIGATION = "VerticalNavigation"
    HORIZONTAL_NAVIGATION = "HorizontalNavigation"
    CODE_FLOW = "CodeFlow"
    CAMERA_MOVEMENT = "CameraMovement"
    WINDOW_MANAGEMENT = "WindowManagement"
    TEXT_MANIPULATION = "TextManipulation"
    CLIPBOARD = "Clipboard"
    FINESSE = "Finesse"
    SEARCH = "Search"
    KNOWLEDGE = "Knowledge"
    SAVING = "Saving"

    @classmethod
    def names(cls) -> list[str]:
        return [skill.value for skill in cls]


class Experience(msgspec.Struct, frozen=True):
    skill: Skill
    amount: int


class SkillData(msgspec.Struct, kw_only=True, frozen=True):
    name: str
    total_exp: int = 0
    level: int = 1


BatchDelta = dict[str, int]
LevelDiff = dict[str, int]
SkillRows = typing.Mapping[str, SkillData]
