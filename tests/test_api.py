# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import pytest
from sqlalchemy.exc import OperationalError

from vimscape.api import apply_batch, get_skill_details, get_user_data, process_batch, setup_tables
from vimscape.db import VimscapeDb, make_db, skill_table
from vimscape.types import Skill, SkillData


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, message: str):
        self.messages.append(message)


class BrokenNotifier:
    def notify(self, message: str):
        raise OSError("no notification daemon")


class CommitFailsDb(VimscapeDb):
    def commit(self, trans):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


@pytest.fixture
def store(tmp_path):
    location = str(tmp_path / "skills.db")
    assert setup_tables(location)
    return location


def test_setup_tables_is_repeatable(store):
    assert setup_tables(store)
    assert [row.name for row in get_user_data(store)] == Skill.names()


def test_setup_tables_failure(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")
    assert not setup_tables(str(blocker / "skills.db"))


def test_process_batch(store):
    notifier = RecordingNotifier()
    assert process_batch("5jdd", store, notifier)
    assert get_skill_details("VerticalNavigation", store) == SkillData(name="VerticalNavigation", total_exp=5, level=1)
    assert get_skill_details("TextManipulation", store) == SkillData(name="TextManipulation", total_exp=1, level=1)
    assert notifier.messages == []


def test_batches_accumulate(store):
    assert process_batch("3j", store)
    assert process_batch("4j", store)
    assert get_skill_details("VerticalNavigation", store).total_exp == 7


def test_level_up_notifies_once(store):
    notifier = RecordingNotifier()
    assert process_batch("100j", store, notifier)
    assert notifier.messages == ["Level up! VerticalNavigation is now level 2."]
    assert get_skill_details("VerticalNavigation", store) == SkillData(name="VerticalNavigation", total_exp=100, level=2)

    assert process_batch("j", store, notifier)
    assert len(notifier.messages) == 1


def test_empty_batch(store):
    notifier = RecordingNotifier()
    assert process_batch("", store, notifier)
    assert all(row.total_exp == 0 for row in get_user_data(store))
    assert notifier.messages == []


def test_missing_store(tmp_path):
    location = str(tmp_path / "skills.db")
    assert not process_batch("5j", location)
    assert get_user_data(location) == []
    assert get_skill_details("Search", location) is None
    assert not (tmp_path / "skills.db").exists()


def test_unknown_skill_details(store):
    assert get_skill_details("Juggling", store) is None


def test_failed_commit_changes_nothing(tmp_path):
    db = make_db(tmp_path / "skills.db")
    failing = CommitFailsDb(db.engine)
    notifier = RecordingNotifier()
    assert not apply_batch(failing, {"VerticalNavigation": 100}, notifier)
    assert notifier.messages == []
    assert db.get_row_by_name("VerticalNavigation") == SkillData(name="VerticalNavigation", total_exp=0, level=1)
    db.close()


def test_broken_notifier_keeps_batch(store):
    assert process_batch("100j", store, BrokenNotifier())
    assert get_skill_details("VerticalNavigation", store).level == 2


def test_batch_naming_missing_skill_is_rejected(tmp_path):
    db = make_db(tmp_path / "skills.db")
    notifier = RecordingNotifier()
    assert not apply_batch(db, {"Search": 5, "Juggling": 5}, notifier)
    assert db.get_row_by_name("Search").total_exp == 0
    db.close()


def test_batch_against_empty_table(tmp_path):
    db = make_db(tmp_path / "skills.db")
    with db.engine.begin() as conn:
        conn.execute(skill_table.delete())
    assert not apply_batch(db, {"Search": 5}, RecordingNotifier())
    db.close()
