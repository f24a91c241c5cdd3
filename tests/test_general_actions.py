import pytest

from gmethod.models import ActionRecord
from gmethod.services.actions.general import GeneralActions
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore

from conftest import add_node


@pytest.fixture
def general(db, line):
    return GeneralActions(db, ContentGraphStore(db), HistoryStore(db), line)


def test_save_selected_option(db, user, general):
    node = add_node(db, 700, "どれにする？", ["はい", "いいえ"])

    assert general.save_selected_option(user, "2", "t", node) == "どれにする？\n\n1: はい\n2: いいえ\n\n"
    assert general.history.get_pending_selection(user.id) == "2"


def test_thanks_count_show(db, user, general):
    node = add_node(db, 701, "あり感の記録")
    db.add(ActionRecord(user_id=user.id, thanks_count=150))
    db.flush()

    assert general.thanks_count_show(user, "", "t", node) == "あり感の記録\n\n現在の回数: 150回\n達成度: 15.0%"


def test_thanks_count_show_without_record(db, user, general):
    node = add_node(db, 701, "あり感の記録")
    assert general.thanks_count_show(user, "", "t", node).endswith("現在の回数: 0回\n達成度: 0.0%")


def test_thanks_count_reset(db, user, general):
    node = add_node(db, 702, "リセットしました")
    db.add(ActionRecord(user_id=user.id, thanks_count=40))
    db.flush()

    assert general.thanks_count_reset(user, "", "t", node) == "リセットしました"
    assert db.query(ActionRecord).one().thanks_count == 0
