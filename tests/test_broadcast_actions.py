import pytest

from gmethod.models import User
from gmethod.services.actions.broadcasts import BroadcastActions
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore

from conftest import add_node, add_scope_node


@pytest.fixture
def broadcasts(db, line):
    add_scope_node(db, "select_broadcast_range", "送信範囲", ["全員", "シックのみ"])
    return BroadcastActions(db, ContentGraphStore(db), HistoryStore(db), line)


@pytest.fixture
def node(db):
    return add_node(db, 500, "送信しますか？")


class TestConfirm:
    def test_stores_range_and_text(self, db, user, node, broadcasts):
        broadcasts.history.set_pending_selection(user.id, "2")

        reply = broadcasts.confirm(user, "明日は新月です", "t", node)

        assert reply == "明日は新月です\n\n送信しますか？\n\n送信対象：シックのみ"
        assert broadcasts.history.get_pending_selection(user.id) == "2:&:明日は新月です"

    def test_without_range_selection(self, db, user, node, broadcasts):
        reply = broadcasts.confirm(user, "本文", "t", node)
        assert reply == "本文\n\n送信しますか？\n\n送信対象："
        assert broadcasts.history.get_pending_selection(user.id) == "0:&:本文"


class TestSend:
    def test_shik_only_pushes_to_shik_users(self, db, user, node, broadcasts, line):
        db.add(User(line_user_id="U-shik", is_shik=True))
        db.add(User(line_user_id="U-basic"))
        db.flush()
        broadcasts.history.set_pending_selection(user.id, "2:&:シックの皆さんへ")

        assert broadcasts.send(user, "", "t", node) == "送信しますか？"
        line.push_many.assert_called_once_with(["U-shik"], "シックの皆さんへ")
        line.broadcast.assert_not_called()

    def test_everyone_is_broadcast(self, db, user, node, broadcasts, line):
        broadcasts.history.set_pending_selection(user.id, "1:&:皆さんへ")

        broadcasts.send(user, "", "t", node)
        line.broadcast.assert_called_once_with("皆さんへ")
        line.push_many.assert_not_called()

    def test_message_may_contain_separator(self, db, user, node, broadcasts, line):
        broadcasts.history.set_pending_selection(user.id, "1:&:a:&:b")

        broadcasts.send(user, "", "t", node)
        line.broadcast.assert_called_once_with("a:&:b")

    def test_nothing_pending_sends_nothing(self, db, user, node, broadcasts, line):
        broadcasts.history.set_pending_selection(user.id, "1")

        assert broadcasts.send(user, "", "t", node) == "送信しますか？"
        line.broadcast.assert_not_called()
        line.push_many.assert_not_called()
