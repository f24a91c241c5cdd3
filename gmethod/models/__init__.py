from gmethod.models.action_record import ActionRecord, ThanksLevel
from gmethod.models.article import Article, ArticleType, Lesson, LessonArticle, Section
from gmethod.models.g_message import GMessage, GMessageHistory
from gmethod.models.last_message import LastMessage
from gmethod.models.message import Message, Option
from gmethod.models.reply_pattern import ReplyPattern
from gmethod.models.talk_history import TalkHistory
from gmethod.models.user import User
from gmethod.models.user_content import FeelingSetting, Happiness, Hate, Wish

__all__ = [
    "User",
    "Message",
    "Option",
    "ReplyPattern",
    "TalkHistory",
    "LastMessage",
    "ActionRecord",
    "ThanksLevel",
    "Wish",
    "Hate",
    "Happiness",
    "FeelingSetting",
    "GMessage",
    "GMessageHistory",
    "Article",
    "ArticleType",
    "Section",
    "Lesson",
    "LessonArticle",
]
