import logging
import typing

from .types import (
    AnyToken,
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

logger = logging.getLogger(__name__)

STEP_EXP = 1
CHUNK_EXP = 5
FIXED_EXP = 10
COMPLETED_COMMAND_EXP = 1
ABANDONED_COMMAND_EXP = 10


def command_exp(completed: bool) -> int:
    # abandoned commands earn more than completed ones
    return COMPLETED_COMMAND_EXP if completed else ABANDONED_COMMAND_EXP


def classify(token: AnyToken) -> typing.Optional[Experience]:
    match token:
        case MoveVerticalBasic(count=count):
            return Experience(Skill.VERTICAL_NAVIGATION, STEP_EXP * count)
        case MoveHorizontalBasic(count=count):
            return Experience(Skill.HORIZONTAL_NAVIGATION, STEP_EXP * count)
        case MoveVerticalChunk(count=count):
            return Experience(Skill.VERTICAL_NAVIGATION, CHUNK_EXP * count)
        case MoveHorizontalChunk(count=count):
            return Experience(Skill.HORIZONTAL_NAVIGATION, CHUNK_EXP * count)
        case JumpToHorizontal():
            return Experience(Skill.HORIZONTAL_NAVIGATION, FIXED_EXP)
        case JumpToLineNumber() | JumpToVertical():
            return Experience(Skill.VERTICAL_NAVIGATION, FIXED_EXP)
        case JumpFromContext():
            return Experience(Skill.CODE_FLOW, FIXED_EXP)
        case CameraMovement():
            return Experience(Skill.CAMERA_MOVEMENT, FIXED_EXP)
        case WindowManagement():
            return Experience(Skill.WINDOW_MANAGEMENT, FIXED_EXP)
        case TextManipulationBasic(count=count) | DeleteText(count=count):
            return Experience(Skill.TEXT_MANIPULATION, STEP_EXP * count)
        case TextManipulationAdvanced():
            return Experience(Skill.TEXT_MANIPULATION, FIXED_EXP)
        case YankPaste() | UndoRedo():
            return Experience(Skill.CLIPBOARD, FIXED_EXP)
        case DotRepeat():
            return Experience(Skill.FINESSE, FIXED_EXP)
        case CommandSearch(completed=completed):
            return Experience(Skill.SEARCH, command_exp(completed))
        case Command(completed=completed):
            return Experience(Skill.FINESSE, command_exp(completed))
        case HelpPage(completed=completed):
            return Experience(Skill.KNOWLEDGE, command_exp(completed))
        case SaveFile(completed=completed):
            return Experience(Skill.SAVING, command_exp(completed))
        case Unhandled(text=text):
            logger.debug("Unhandled keystrokes: %r", text)
    return None
