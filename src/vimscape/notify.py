# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import logging
import subprocess
import typing

logger = logging.getLogger(__name__)


class Notifier(typing.Protocol):
    def notify(self, message: str):
        ...


class LoggingNotifier:
    def notify(self, message: str):
        logger.info("%s", message)


class CommandNotifier:
    """Hands each message to an external program, such as notify-send, as its last argument."""

    def __init__(self, argv: list[str], timeout: float = 10.0):
        if not argv:
            raise ValueError("CommandNotifier needs a command to run")
        self.argv = list(argv)
        self.timeout = timeout

    def notify(self, message: str):
        subprocess.run([*self.argv, message], check=True, capture_output=True, timeout=self.timeout)


def level_up_message(skill_name: str, level: int) -> str:
    return f"Level up! {skill_name} is now level {level}."


def make_notifier(notify_command: list[str]) -> Notifier:
    if notify_command:
        return CommandNotifier(notify_command)
    return LoggingNotifier()
