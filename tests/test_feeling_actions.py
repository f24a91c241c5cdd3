from datetime import datetime, timezone

import pytest

from gmethod.models import FeelingSetting, Happiness, Hate
from gmethod.services.actions.feelings import (
    NO_HAPPINESS_TEXT,
    NO_HATES_TEXT,
    FeelingButtonActions,
    HappinessActions,
    HateActions,
)
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore

from conftest import add_node, add_scope_node


@pytest.fixture
def deps(db, line):
    return db, ContentGraphStore(db), HistoryStore(db), line


@pytest.fixture
def node(db):
    return add_node(db, 300, "気持ち")


def add_entry(db, model, user, text):
    entry = model(user_id=user.id, created_at=datetime(2024, 1, 2, tzinfo=timezone.utc))
    entry.set_plain_content(text)
    db.add(entry)
    db.flush()
    return entry


class TestHates:
    def test_empty_index(self, user, node, deps):
        assert HateActions(*deps).index(user, "", "t", node) == NO_HATES_TEXT

    def test_index_lists_entries(self, db, user, node, deps):
        add_entry(db, Hate, user, "満員電車")
        assert HateActions(*deps).index(user, "", "t", node) == "気持ち\n\n1:\n日付: 2024年1月2日\n内容: 満員電車"

    def test_edit_and_update(self, db, user, node, deps):
        hate = add_entry(db, Hate, user, "満員電車")
        actions = HateActions(*deps)
        actions.history.set_pending_selection(user.id, "1")

        assert actions.edit(user, "", "t", node) == "気持ち\n\n選択中の嫌だー:\n満員電車"
        assert actions.update(user, "渋滞", "t", node) == "気持ち\n\n渋滞"
        assert hate.plain_content == "渋滞"

    def test_destroy_all_only_removes_own_entries(self, db, user, node, deps):
        add_entry(db, Hate, user, "a")
        add_entry(db, Hate, user, "b")
        db.add(Hate(user_id=user.id + 1))
        db.flush()

        assert HateActions(*deps).destroy_all(user, "", "t", node) == "気持ち"
        assert db.query(Hate).count() == 1


class TestHappiness:
    def test_empty_index(self, user, node, deps):
        assert HappinessActions(*deps).index(user, "", "t", node) == NO_HAPPINESS_TEXT

    def test_create_and_destroy(self, db, user, node, deps):
        actions = HappinessActions(*deps)
        actions.create(user, "晴れた", "t", node)
        actions.history.set_pending_selection(user.id, "1")

        assert actions.destroy(user, "", "t", node) == "気持ち\n\n晴れた"
        assert db.query(Happiness).count() == 0


class TestFeelingButtons:
    def test_find_or_create_seeds_defaults_once(self, db, user, node, deps):
        actions = FeelingButtonActions(*deps)
        expected = "気持ち\n\n1: 嫌だ！\n2: ムカつく！\n3: 悔しい！\n4: クソ！\n5: 辛いよ\n6: 設定をカスタマイズする"

        assert actions.find_or_create(user, "", "t", node) == expected
        assert actions.find_or_create(user, "", "t", node) == expected
        assert db.query(FeelingSetting).count() == 5

    def test_echo_button_text(self, db, user, node, deps):
        actions = FeelingButtonActions(*deps)
        actions.find_or_create(user, "", "t", node)
        assert actions.echo(user, "2", "t", node) == "ムカつく！"

    def test_echo_unknown_button_shows_settings(self, db, user, node, deps):
        add_scope_node(db, "lets_customize_feeling_button", "カスタマイズしよう")
        actions = FeelingButtonActions(*deps)
        actions.find_or_create(user, "", "t", node)

        overview = actions.echo(user, "abc", "t", node)
        assert overview.startswith("カスタマイズしよう\n\n1: 嫌だ！")
        assert actions.echo(user, "9", "t", node) == overview
        assert actions.index(user, "", "t", node) == overview

    def test_edit_stores_selection_and_update_applies_it(self, db, user, node, deps):
        actions = FeelingButtonActions(*deps)
        actions.find_or_create(user, "", "t", node)

        assert actions.edit(user, "3", "t", node) == "気持ち\n\n選択中の設定: 悔しい！"
        assert actions.update(user, "もう一回！", "t", node) == "気持ち"
        assert actions.echo(user, "3", "t", node) == "もう一回！"
