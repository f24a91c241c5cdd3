import json

import pytest

from gmethod.models import Article, ArticleType, Lesson, LessonArticle, Section
from gmethod.services.actions.experiences import NOT_FOUND_TEXT, ExperienceActions
from gmethod.services.content_graph_service import ContentGraphStore
from gmethod.services.history_service import HistoryStore

from conftest import add_node


@pytest.fixture
def experiences(db, line):
    return ExperienceActions(db, ContentGraphStore(db), HistoryStore(db), line)


@pytest.fixture
def node(db):
    return add_node(db, 600, "体験談")


@pytest.fixture
def articles(db):
    experience = ArticleType(name="experience")
    column = ArticleType(name="column")
    db.add_all([experience, column])
    db.flush()

    first = Article(article_type_id=experience.id, title="転職できた")
    second = Article(article_type_id=experience.id, title="家族と仲直り")
    other = Article(article_type_id=column.id, title="コラム")
    db.add_all([first, second, other])
    db.flush()

    db.add_all(
        [
            Section(article_id=second.id, position=2, content="その後"),
            Section(article_id=second.id, position=1, content="はじめに"),
            Lesson(id=3, position=1, title="レッスン3"),
            Lesson(id=7, position=2, title="レッスン7"),
        ]
    )
    db.flush()
    db.add_all(
        [
            LessonArticle(lesson_id=3, article_id=second.id),
            LessonArticle(lesson_id=7, article_id=first.id),
        ]
    )
    db.flush()
    return first, second


class TestArticlesFor:
    def test_all_experience_articles_without_history(self, db, user, node, experiences, articles):
        assert experiences.index(user, "", "t", node) == "体験談\n\n1: 転職できた\n2: 家族と仲直り"

    def test_lesson_from_last_visited_node(self, db, user, node, experiences, articles):
        add_node(db, 51, "レッスン3の体験談")
        experiences.history.append_visit(user.id, 51)

        assert experiences.index(user, "", "t", node) == "体験談\n\n1: 家族と仲直り"

    def test_lesson_from_pending_selection(self, db, user, node, experiences, articles):
        experiences.history.append_visit(user.id, node.id)
        experiences.history.set_pending_selection(user.id, json.dumps({"selected_lesson_id": 7}))

        assert experiences.index(user, "", "t", node) == "体験談\n\n1: 転職できた"

    def test_lesson_without_articles_falls_back_to_all(self, db, user, node, experiences, articles):
        add_node(db, 68, "レッスン5の体験談")
        experiences.history.append_visit(user.id, 68)

        assert len(experiences.articles_for(user)) == 2


class TestShow:
    def test_returns_sections_in_order(self, db, user, node, experiences, articles):
        assert experiences.show(user, "2", "t", node) == ["はじめに", "その後"]

    @pytest.mark.parametrize("text", ["0", "3", "abc"])
    def test_unknown_article(self, db, user, node, experiences, articles, text):
        assert experiences.show(user, text, "t", node) == NOT_FOUND_TEXT
