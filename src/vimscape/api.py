"""Entry points called by the editor integration.

None of these raise on storage problems; failures are logged and reported through the return value.
"""
import logging
import pathlib
import typing

from sqlalchemy.exc import SQLAlchemyError

from .batch import aggregate
from .db import VimscapeDb, VimscapeDbError, make_db, open_db
from .levels import level_diff, updated_levels
from .notify import LoggingNotifier, Notifier, level_up_message
from .types import BatchDelta, SkillData

logger = logging.getLogger(__name__)


def process_batch(raw_keystrokes: str, store_location: str, notifier: typing.Optional[Notifier] = None) -> bool:
    delta = aggregate(raw_keystrokes)
    try:
        db = open_db(pathlib.Path(store_location))
    except (SQLAlchemyError, VimscapeDbError):
        logger.exception("Could not open skills database at %s", store_location)
        return False
    try:
        return apply_batch(db, delta, notifier if notifier is not None else LoggingNotifier())
    finally:
        db.close()


def apply_batch(db: VimscapeDb, delta: BatchDelta, notifier: Notifier) -> bool:
    rows = {row.name: row for row in db.get_skill_rows()}
    if not rows:
        logger.error("No skill data found in database")
        return False
    missing = sorted(delta.keys() - rows.keys())
    if missing:
        logger.error("Skills %s have no rows in the database", ", ".join(missing))
        return False

    new_levels = updated_levels(rows, delta)
    diff = level_diff(rows, new_levels)

    try:
        with db.transaction() as tx:
            tx.apply_exp_delta(delta)
            tx.apply_levels(diff)
    except SQLAlchemyError:
        logger.exception("Could not save batch; %r was discarded", delta)
        return False

    for name, level in diff.items():
        try:
            notifier.notify(level_up_message(name, level))
        except Exception:
            # the batch is already committed
            logger.exception("Could not send level up notification for %s", name)
    return True


def setup_tables(store_location: str) -> bool:
    try:
        db = make_db(pathlib.Path(store_location))
    except (SQLAlchemyError, VimscapeDbError, OSError):
        logger.exception("Could not set up skills database at %s", store_location)
        return False
    db.close()
    return True


def get_user_data(store_location: str) -> list[SkillData]:
    try:
        db = open_db(pathlib.Path(store_location))
    except (SQLAlchemyError, VimscapeDbError):
        logger.exception("Could not open skills database at %s", store_location)
        return []
    try:
        return db.get_skill_rows()
    finally:
        db.close()


def get_skill_details(name: str, store_location: str) -> typing.Optional[SkillData]:
    try:
        db = open_db(pathlib.Path(store_location))
    except (SQLAlchemyError, VimscapeDbError):
        logger.exception("Could not open skills database at %s", store_location)
        return None
    try:
        return db.get_row_by_name(name)
    except SQLAlchemyError:
        logger.exception("Could not read skill %s", name)
        return None
    finally:
        db.close()
