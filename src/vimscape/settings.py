import dataclasses
import enum
import json
import logging
import operator
import pathlib
import typing

import cattrs

DEFAULT_DB_PATH = "~/.local/share/vimscape/vimscape.db"


class LogLevel(enum.Enum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


def structure_path(v: str, typ: type[pathlib.Path]):
    return pathlib.Path(v).expanduser()


def structure_log_level(v: str, typ: type[LogLevel]):
    try:
        return LogLevel[v.upper()]
    except KeyError:
        raise ValueError(f"Unexpected log level {v}") from None


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, structure_path)
settings_converter.register_unstructure_hook(LogLevel, operator.attrgetter("name"))
settings_converter.register_structure_hook(LogLevel, structure_log_level)


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: typing.Optional[pathlib.Path] = None
    db_path: pathlib.Path
    notify_command: list[str] = dataclasses.field(default_factory=list)
    log_level: LogLevel = LogLevel.WARNING

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        if dest is None:
            raise ValueError("No path to save settings to")
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as f:
            json.dump(raw, f, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as f:
            raw = json.load(f)
        raw["_path"] = str(src)
        return settings_converter.structure(raw, cls)

    @classmethod
    def defaults(cls):
        return settings_converter.structure({"db_path": DEFAULT_DB_PATH}, cls)

    @classmethod
    def for_test(cls):
        return settings_converter.structure(
            {
                "_path": "test.settings.json",
                "db_path": "test.db",
                "notify_command": [],
                "log_level": "DEBUG",
            },
            cls,
        )
