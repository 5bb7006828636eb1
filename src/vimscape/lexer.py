# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import collections.abc
import re
import typing

import attr

from .keystrokes import NamedKey, match_control_chord, match_named_key
from .types import (
    MAX_COUNT,
    AnyToken,
    CameraMovement,
    Command,
    CommandSearch,
    DeleteText,
    DotRepeat,
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
    TextManipulationAdvanced,
    TextManipulationBasic,
    Token,
    UndoRedo,
    Unhandled,
    WindowManagement,
    YankPaste,
)

DIGITS = frozenset("0123456789")
FIND_MOTIONS = frozenset("fFtT")
OPERATORS = frozenset("dyc")
MOTIONS = frozenset("wWeEbB$^0jkhlG")
G_MOTIONS = frozenset("gjkeE_")
TEXT_OBJECT_PREFIXES = frozenset("ia")
TEXT_OBJECTS = frozenset("wWsp()b[]{}B<>t\"'`")

LINE_NUMBER = re.compile(r"[0-9]+")
HELP_COMMAND = re.compile(r"h(?:elp)?\b")
SAVE_COMMAND = re.compile(r"w(?:rite)?!?(?:\s|$)")
# the editor records % as a call to the matchit plugin
MATCHIT_CALL = "matchit#Match_wrapper"


@attr.frozen
class Idle:
    pass


@attr.frozen(kw_only=True)
class AccumulatingCount:
    count: int
    digits: str


@attr.frozen(kw_only=True)
class OperatorPending:
    op: str
    count: int = attr.field(default=1)
    motion_count: typing.Optional[int] = attr.field(default=None)
    text: str


@attr.frozen(kw_only=True)
class CaseOperatorPending:
    op: str
    count: int = attr.field(default=1)
    motion_count: typing.Optional[int] = attr.field(default=None)
    text: str


@attr.frozen(kw_only=True)
class RegisterPending:
    count: int = attr.field(default=1)
    register_count: typing.Optional[int] = attr.field(default=None)
    text: str


@attr.frozen(kw_only=True)
class CommandMode:
    buffer: str = attr.field(default="")
    text: str


@attr.frozen(kw_only=True)
class SearchMode:
    buffer: str = attr.field(default="")
    text: str


@attr.frozen(kw_only=True)
class ReplaceMode:
    text: str


LexerState = (
    Idle
    | AccumulatingCount
    | OperatorPending
    | CaseOperatorPending
    | RegisterPending
    | CommandMode
    | SearchMode
    | ReplaceMode
)

IDLE = Idle()


def add_digit(count: typing.Optional[int], digit: str) -> int:
    return min((count or 0) * 10 + int(digit), MAX_COUNT)


def multiply_counts(count: int, inner: typing.Optional[int]) -> int:
    return min(count * (inner or 1), MAX_COUNT)


def classify_command(buffer: str, completed: bool) -> AnyToken:
    if LINE_NUMBER.fullmatch(buffer):
        return JumpToLineNumber(buffer)
    if HELP_COMMAND.match(buffer):
        return HelpPage(completed)
    if SAVE_COMMAND.match(buffer):
        return SaveFile(completed)
    if MATCHIT_CALL in buffer:
        return JumpFromContext()
    return Command(completed)


class Lexer:
    """
    Turns a recorded keystroke string into action tokens.

    Each call to next_token starts in the Idle state and steps through states until one of them
    produces a token. Every character of the input ends up in exactly one token; anything that is
    not understood is returned as Unhandled, carrying the literal text.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def __iter__(self) -> collections.abc.Iterator[AnyToken]:
        while (token := self.next_token()) is not None:
            yield token

    def next_token(self) -> typing.Optional[AnyToken]:
        state: LexerState = IDLE
        while True:
            result = self._step(state)
            if result is None or isinstance(result, Token):
                return result
            state = result

    def _step(self, state: LexerState):
        match state:
            case Idle():
                return self._idle()
            case AccumulatingCount():
                return self._accumulating_count(state)
            case OperatorPending():
                return self._operator_pending(state)
            case CaseOperatorPending():
                return self._case_operator_pending(state)
            case RegisterPending():
                return self._register_pending(state)
            case CommandMode() | SearchMode():
                return self._command_line(state)
            case ReplaceMode():
                return self._replace_mode(state)

    def _peek(self, offset: int = 0) -> typing.Optional[str]:
        index = self.pos + offset
        if index < len(self.text):
            return self.text[index]
        return None

    def _advance(self, length: int = 1) -> str:
        consumed = self.text[self.pos : self.pos + length]
        self.pos += len(consumed)
        return consumed

    def _unit_length(self, offset: int = 0) -> int:
        "Length of the keystroke at pos + offset: a whole named key or chord, one character, or 0 at the end."
        if self._peek(offset) is None:
            return 0
        index = self.pos + offset
        key = match_named_key(self.text, index) or match_control_chord(self.text, index)
        return 1 if key is None else key.length

    def _motion_length(self) -> int:
        "Length of the motion or text object at the cursor, or 0 if there isn't one."
        ch = self._peek()
        if ch is None:
            return 0
        if ch in MOTIONS:
            return 1
        follower = self._peek(1)
        if ch in TEXT_OBJECT_PREFIXES:
            return 2 if follower is not None and follower in TEXT_OBJECTS else 0
        if ch == "g":
            return 2 if follower is not None and follower in G_MOTIONS else 0
        if ch in FIND_MOTIONS:
            target = self._unit_length(1)
            return 1 + target if target else 0
        return 0

    # states

    def _idle(self):
        ch = self._peek()
        if ch is None:
            return None
        if ch == "0":
            # a leading zero never starts a count
            return Unhandled(self._advance())
        if ch in DIGITS:
            self._advance()
            return AccumulatingCount(count=int(ch), digits=ch)
        return self._command(count=1, digits="")

    def _accumulating_count(self, state: AccumulatingCount):
        ch = self._peek()
        if ch is not None and ch in DIGITS:
            self._advance()
            return attr.evolve(state, count=add_digit(state.count, ch), digits=state.digits + ch)
        return self._command(count=state.count, digits=state.digits)

    def _command(self, count: int, digits: str):
        ch = self._peek()
        if ch is None:
            return Unhandled(digits)
        match ch:
            case "j" | "k":
                self._advance()
                return MoveVerticalBasic(count)
            case "h" | "l":
                self._advance()
                return MoveHorizontalBasic(count)
            case "w" | "W" | "e" | "E" | "b" | "B":
                self._advance()
                return MoveHorizontalChunk(count)
            case "x" | "J":
                self._advance()
                return TextManipulationBasic(count)
            case "G":
                self._advance()
                return JumpToLineNumber(digits)
            case "r":
                return self._with_target(digits, TextManipulationBasic(count))
            case "f" | "F" | "t" | "T":
                return self._with_target(digits, JumpToHorizontal())
            case "p" | "P":
                self._advance()
                return YankPaste()
            case "u" | "U":
                self._advance()
                return UndoRedo()
            case ".":
                self._advance()
                return DotRepeat()
            case "d" | "y" | "c":
                self._advance()
                return OperatorPending(op=ch, count=count, text=digits + ch)
            case '"':
                return self._register(count, digits)
            case "g":
                return self._g_prefix(count, digits)
            case "z":
                return self._z_prefix(digits)
            case "<":
                return self._control_chord(count, digits)

        if digits:
            # the count was not followed by anything that takes one
            return Unhandled(digits)

        named = match_named_key(self.text, self.pos)
        if named is not None:
            return Unhandled(self._advance(named.length))

        self._advance()
        match ch:
            case ";" | ",":
                return JumpToHorizontal()
            case "M" | "H" | "L":
                return JumpToVertical()
            case "%":
                return JumpFromContext()
            case "R":
                return ReplaceMode(text=ch)
            case ":":
                return CommandMode(text=ch)
            case "/" | "?":
                return SearchMode(text=ch)
        return Unhandled(ch)

    def _with_target(self, digits: str, token: AnyToken):
        "Commands such as f and r which take the next keystroke as their argument."
        command = self._advance()
        target_length = self._unit_length()
        if not target_length:
            return Unhandled(digits + command)
        self._advance(target_length)
        return token

    def _g_prefix(self, count: int, digits: str):
        prefix = self._advance()
        follower = self._peek()
        match follower:
            case None:
                return Unhandled(digits + prefix)
            case "g":
                self._advance()
                return JumpToLineNumber(digits)
            case "j" | "k":
                self._advance()
                return MoveVerticalBasic(count)
            case "J":
                self._advance()
                return TextManipulationBasic(count)
            case "~" | "u" | "U":
                self._advance()
                return CaseOperatorPending(op=follower, count=count, text=digits + prefix + follower)
        return Unhandled(digits + prefix + self._advance(self._unit_length()))

    def _z_prefix(self, digits: str):
        prefix = self._advance()
        follower = self._peek()
        if follower is None:
            return Unhandled(digits + prefix)
        if follower in ("z", "t", "b"):
            self._advance()
            return CameraMovement()
        return Unhandled(digits + prefix + self._advance(self._unit_length()))

    def _control_chord(self, count: int, digits: str):
        chord = match_control_chord(self.text, self.pos)
        if chord is None:
            if digits:
                return Unhandled(digits)
            return Unhandled(self._advance())
        raw = self._advance(chord.length)
        match chord.value:
            case "U" | "D":
                return MoveVerticalChunk(count)
            case "F" | "B":
                return JumpToVertical()
            case "E" | "Y":
                return CameraMovement()
            case "R":
                return UndoRedo()
            case "H" | "J" | "K" | "L":
                return WindowManagement()
            case "W":
                # the window command itself, such as s, v or q
                self._advance(self._unit_length())
                return WindowManagement()
        return Unhandled(digits + raw)

    def _register(self, count: int, digits: str):
        text = digits + self._advance()
        register_length = self._unit_length()
        text += self._advance(register_length)
        if register_length != 1:
            return Unhandled(text)
        return RegisterPending(count=count, text=text)

    def _register_pending(self, state: RegisterPending):
        ch = self._peek()
        if ch is None:
            return Unhandled(state.text)
        if ch in DIGITS and (ch != "0" or state.register_count is not None):
            self._advance()
            return attr.evolve(state, register_count=add_digit(state.register_count, ch), text=state.text + ch)
        if ch in ("p", "P"):
            self._advance()
            return YankPaste()
        if ch in OPERATORS:
            self._advance()
            return OperatorPending(
                op=ch,
                count=multiply_counts(state.count, state.register_count),
                text=state.text + ch,
            )
        return Unhandled(state.text)

    def _operator_pending(self, state: OperatorPending):
        ch = self._peek()
        if ch is None:
            return Unhandled(state.text)
        total = multiply_counts(state.count, state.motion_count)
        if ch == state.op:
            # dd, yy and cc act on whole lines
            self._advance()
            return self._operator_token(state.op, total)
        # d0 is a motion, but d10w is a count
        if ch in DIGITS and (ch != "0" or state.motion_count is not None):
            self._advance()
            return attr.evolve(state, motion_count=add_digit(state.motion_count, ch), text=state.text + ch)
        motion_length = self._motion_length()
        if not motion_length:
            return Unhandled(state.text)
        self._advance(motion_length)
        return self._operator_token(state.op, total)

    def _operator_token(self, op: str, count: int) -> AnyToken:
        match op:
            case "d":
                return DeleteText(count)
            case "y":
                return YankPaste()
        return TextManipulationAdvanced()

    def _case_operator_pending(self, state: CaseOperatorPending):
        ch = self._peek()
        if ch is None:
            return Unhandled(state.text)
        if state.motion_count is None:
            # g~~ and g~g~ both act on the whole line
            if ch == state.op:
                self._advance()
                return TextManipulationAdvanced()
            if ch == "g" and self._peek(1) == state.op:
                self._advance(2)
                return TextManipulationAdvanced()
        if ch in DIGITS and (ch != "0" or state.motion_count is not None):
            self._advance()
            return attr.evolve(state, motion_count=add_digit(state.motion_count, ch), text=state.text + ch)
        motion_length = self._motion_length()
        if not motion_length:
            return Unhandled(state.text)
        self._advance(motion_length)
        return TextManipulationAdvanced()

    def _command_line(self, state: CommandMode | SearchMode):
        bar = self.text.find("|", self.pos)
        if bar == -1:
            # ran out of input before enter or escape
            return Unhandled(state.text + self._advance(len(self.text) - self.pos))
        if bar > self.pos:
            chunk = self._advance(bar - self.pos)
            return attr.evolve(state, buffer=state.buffer + chunk, text=state.text + chunk)

        named = match_named_key(self.text, self.pos)
        if named is None:
            bar_char = self._advance()
            return attr.evolve(state, buffer=state.buffer + bar_char, text=state.text + bar_char)
        text = state.text + self._advance(named.length)
        match named.value:
            case NamedKey.ENTER:
                return self._finish_command_line(state, completed=True)
            case NamedKey.ESCAPE:
                return self._finish_command_line(state, completed=False)
            case NamedKey.SPACE:
                return attr.evolve(state, buffer=state.buffer + " ", text=text)
            case NamedKey.TAB:
                return attr.evolve(state, buffer=state.buffer + "\t", text=text)
            case NamedKey.BACKSPACE:
                return attr.evolve(state, buffer=state.buffer[:-1], text=text)

    def _finish_command_line(self, state: CommandMode | SearchMode, completed: bool) -> AnyToken:
        if isinstance(state, SearchMode):
            return CommandSearch(completed)
        return classify_command(state.buffer, completed)

    def _replace_mode(self, state: ReplaceMode):
        terminator = NamedKey.ESCAPE.notation
        end = self.text.find(terminator, self.pos)
        if end == -1:
            return Unhandled(state.text + self._advance(len(self.text) - self.pos))
        self._advance(end - self.pos + len(terminator))
        return TextManipulationAdvanced()


def tokenize(text: str) -> list[AnyToken]:
    return list(Lexer(text))
