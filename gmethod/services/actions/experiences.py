import json
from typing import List, Optional

from gmethod.models import Article, ArticleType, LessonArticle, Message, User
from gmethod.models.article import ARTICLE_TYPE_EXPERIENCE
from gmethod.services.actions.base import BaseActions
from gmethod.services.history_service import parse_int
from gmethod.services.line_service import ReplyContent

NOT_FOUND_TEXT = "記事が見つかりませんでした"

# Lesson menus of the dialogue graph, keyed by node id.
LESSON_BY_NODE = {51: 3, 53: 4, 68: 5}


class ExperienceActions(BaseActions):
    def _lesson_articles(self, lesson_id: int) -> List[Article]:
        return (
            self.db.query(Article)
            .join(LessonArticle, LessonArticle.article_id == Article.id)
            .filter(LessonArticle.lesson_id == lesson_id)
            .order_by(LessonArticle.id.asc())
            .all()
        )

    def _selected_lesson_id(self, user: User) -> Optional[int]:
        pending = self.history.get_pending_selection(user.id)
        if not pending:
            return None
        try:
            data = json.loads(pending)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        lesson_id = data.get("selected_lesson_id")
        if isinstance(lesson_id, bool) or not isinstance(lesson_id, (int, float)):
            return None
        return int(lesson_id)

    def articles_for(self, user: User) -> List[Article]:
        """Experience articles of the lesson the user is in, or all of them."""
        visit = self.history.latest_visit(user.id)
        if visit is not None:
            lesson_id = LESSON_BY_NODE.get(visit.message_id)
            if lesson_id is not None:
                articles = self._lesson_articles(lesson_id)
                if articles:
                    return articles

            lesson_id = self._selected_lesson_id(user)
            if lesson_id is not None:
                articles = self._lesson_articles(lesson_id)
                if articles:
                    return articles

        return (
            self.db.query(Article)
            .join(ArticleType, ArticleType.id == Article.article_type_id)
            .filter(ArticleType.name == ARTICLE_TYPE_EXPERIENCE)
            .order_by(Article.id.asc())
            .all()
        )

    def index(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        titles = "\n".join(f"{i}: {article.title}" for i, article in enumerate(self.articles_for(user), start=1))
        return f"{node.text}\n\n{titles}"

    def show(self, user: User, text: str, reply_token: str, node: Message) -> ReplyContent:
        articles = self.articles_for(user)
        number = parse_int(text)
        if number is None or number < 1 or number > len(articles):
            return NOT_FOUND_TEXT
        return [section.content or "" for section in articles[number - 1].sections]
