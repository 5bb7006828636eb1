import pytest

from vimscape.classify import classify
from vimscape.types import (
    CameraMovement,
    Command,
    CommandSearch,
    DeleteText,
    DotRepeat,
    Experience,
    HelpPage,
    JumpFromContext,
    JumpToHorizontal,
    JumpToLineNumber,
    JumpToVertical,
    MoveHorizontalBasic,
    MoveHorizontalChunk,
    MoveVerticalBasic,
    MoveVerticalChunk,
    SaveFile,
    Skill,
    TextManipulationAdvanced,
    TextManipulationBasic,
    UndoRedo,
    Unhandled,
    WindowManagement,
    YankPaste,
)


@pytest.mark.parametrize(
    "token,expected",
    (
        (MoveVerticalBasic(1), Experience(Skill.VERTICAL_NAVIGATION, 1)),
        (MoveVerticalBasic(7), Experience(Skill.VERTICAL_NAVIGATION, 7)),
        (MoveHorizontalBasic(3), Experience(Skill.HORIZONTAL_NAVIGATION, 3)),
        (MoveVerticalChunk(2), Experience(Skill.VERTICAL_NAVIGATION, 10)),
        (MoveHorizontalChunk(4), Experience(Skill.HORIZONTAL_NAVIGATION, 20)),
        (JumpToHorizontal(), Experience(Skill.HORIZONTAL_NAVIGATION, 10)),
        (JumpToLineNumber("42"), Experience(Skill.VERTICAL_NAVIGATION, 10)),
        (JumpToLineNumber(""), Experience(Skill.VERTICAL_NAVIGATION, 10)),
        (JumpToVertical(), Experience(Skill.VERTICAL_NAVIGATION, 10)),
        (JumpFromContext(), Experience(Skill.CODE_FLOW, 10)),
        (CameraMovement(), Experience(Skill.CAMERA_MOVEMENT, 10)),
        (WindowManagement(), Experience(Skill.WINDOW_MANAGEMENT, 10)),
        (TextManipulationBasic(5), Experience(Skill.TEXT_MANIPULATION, 5)),
        (DeleteText(3), Experience(Skill.TEXT_MANIPULATION, 3)),
        (TextManipulationAdvanced(), Experience(Skill.TEXT_MANIPULATION, 10)),
        (YankPaste(), Experience(Skill.CLIPBOARD, 10)),
        (UndoRedo(), Experience(Skill.CLIPBOARD, 10)),
        (DotRepeat(), Experience(Skill.FINESSE, 10)),
        (CommandSearch(True), Experience(Skill.SEARCH, 1)),
        (CommandSearch(False), Experience(Skill.SEARCH, 10)),
        (Command(True), Experience(Skill.FINESSE, 1)),
        (Command(False), Experience(Skill.FINESSE, 10)),
        (HelpPage(True), Experience(Skill.KNOWLEDGE, 1)),
        (HelpPage(False), Experience(Skill.KNOWLEDGE, 10)),
        (SaveFile(True), Experience(Skill.SAVING, 1)),
        (SaveFile(False), Experience(Skill.SAVING, 10)),
    ),
)
def test_classify(token, expected):
    assert classify(token) == expected


def test_unhandled_earns_nothing():
    assert classify(Unhandled("q")) is None
    assert classify(Unhandled("")) is None


def test_every_skill_is_reachable():
    tokens = [
        MoveVerticalBasic(1),
        MoveHorizontalBasic(1),
        JumpFromContext(),
        CameraMovement(),
        WindowManagement(),
        DeleteText(1),
        YankPaste(),
        DotRepeat(),
        CommandSearch(True),
        HelpPage(True),
        SaveFile(True),
    ]
    assert {classify(token).skill for token in tokens} == set(Skill)
