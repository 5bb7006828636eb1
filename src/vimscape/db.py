# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import collections.abc
import contextlib
import logging
import pathlib
import typing

from sqlalchemy import Column, MetaData, Table, bindparam, event, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.engine import URL as EngineURL
from sqlalchemy.engine import Connection, Engine, Transaction, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import column, text
from sqlalchemy.types import Integer, String

from .types import BatchDelta, LevelDiff, Skill, SkillData

logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    # several editors may share one store; let SQLite serialize them
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


metadata = MetaData()

skill_table = Table(
    "skills",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False, unique=True),
    Column("exp", Integer, nullable=False, server_default=text("0")),
    Column("level", Integer, nullable=False, server_default=text("1")),
)

DB_VERSION = 1


class VimscapeDbError(Exception):
    pass


class DbVersionError(VimscapeDbError):
    pass


class StoreUnavailable(VimscapeDbError):
    pass


def check_version(conn: Connection, path: pathlib.Path, expected_version: int):
    found_version = conn.scalar(text("PRAGMA user_version").columns(column("version", Integer)))
    if found_version != expected_version:
        raise DbVersionError(f"Expected DB version {expected_version} in {path}, but found {found_version}.")


def set_version(conn: Connection, version: int):
    # looks like pragma does not support bindparams, hence the f-string
    conn.execute(text(f"PRAGMA user_version = {version}"))


def make_engine(sqlite_path: pathlib.Path) -> Engine:
    engine_url = EngineURL.create(drivername="sqlite", database=sqlite_path.__fspath__())
    return create_engine(engine_url)


def make_db(sqlite_path: pathlib.Path) -> "VimscapeDb":
    "Open the store at sqlite_path, creating and seeding it first if needed."
    exists = sqlite_path.is_file()
    sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    engine = make_engine(sqlite_path)
    with engine.begin() as conn:
        if exists:
            check_version(conn, sqlite_path, DB_VERSION)
        else:
            set_version(conn, DB_VERSION)
    db = VimscapeDb(engine)
    db.create_and_seed_schema()
    return db


def open_db(sqlite_path: pathlib.Path) -> "VimscapeDb":
    "Open an existing store. Unlike make_db, this never creates anything."
    if not sqlite_path.is_file():
        raise StoreUnavailable(f"No skills database at {sqlite_path}.")
    engine = make_engine(sqlite_path)
    try:
        with engine.begin() as conn:
            check_version(conn, sqlite_path, DB_VERSION)
    except (SQLAlchemyError, VimscapeDbError):
        engine.dispose()
        raise
    return VimscapeDb(engine)


class SkillTransaction:
    """Writes made through one open transaction. Nothing lands until VimscapeDb commits it."""

    def __init__(self, conn: Connection):
        self.conn = conn

    def apply_exp_delta(self, delta: BatchDelta):
        if not delta:
            return
        stmt = (
            skill_table.update()
            .where(skill_table.c.name == bindparam("skill_name"))
            .values(exp=skill_table.c.exp + bindparam("gained"))
        )
        self.conn.execute(stmt, [{"skill_name": name, "gained": exp} for name, exp in delta.items()])

    def apply_levels(self, levels: LevelDiff):
        if not levels:
            return
        stmt = skill_table.update().where(skill_table.c.name == bindparam("skill_name")).values(level=bindparam("new_level"))
        self.conn.execute(stmt, [{"skill_name": name, "new_level": level} for name, level in levels.items()])


class VimscapeDb:
    def __init__(self, engine: Engine):
        self.engine = engine

    def create_and_seed_schema(self):
        with self.engine.begin() as conn:
            metadata.create_all(conn)
            # ON CONFLICT DO NOTHING with no target covers both the id and the name
            stmt = insert(skill_table).on_conflict_do_nothing()
            conn.execute(stmt, [{"id": i, "name": name} for i, name in enumerate(Skill.names())])

    def get_skill_rows(self) -> list[SkillData]:
        s = select(skill_table.c.name, skill_table.c.exp, skill_table.c.level).order_by(skill_table.c.id.asc())
        try:
            with self.engine.begin() as conn:
                result = conn.execute(s)
                return [SkillData(name=row.name, total_exp=row.exp, level=row.level) for row in result]
        except SQLAlchemyError:
            logger.exception("Could not read skills from %s", self.engine.url)
            return []

    def get_row_by_name(self, name: str) -> typing.Optional[SkillData]:
        s = select(skill_table.c.name, skill_table.c.exp, skill_table.c.level).where(skill_table.c.name == name)
        with self.engine.begin() as conn:
            row = conn.execute(s).one_or_none()
        if row is None:
            return None
        return SkillData(name=row.name, total_exp=row.exp, level=row.level)

    @contextlib.contextmanager
    def transaction(self) -> collections.abc.Iterator[SkillTransaction]:
        """
        Scope for one batch of writes.

        Commits when the block finishes normally; rolls back if anything in the block (or the commit itself) raises.
        """
        with self.engine.connect() as conn:
            trans = conn.begin()
            try:
                yield SkillTransaction(conn)
                self.commit(trans)
            except BaseException:
                if trans.is_active:
                    trans.rollback()
                raise

    def commit(self, trans: Transaction):
        trans.commit()

    def close(self):
        self.engine.dispose()
