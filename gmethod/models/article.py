from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from gmethod.database import Base

ARTICLE_TYPE_EXPERIENCE = "experience"


class ArticleType(Base):
    __tablename__ = "article_types"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    article_type_id = Column(Integer, ForeignKey("article_types.id"), nullable=False)
    title = Column(Text, nullable=False)

    article_type = relationship("ArticleType")
    sections = relationship("Section", back_populates="article", order_by="Section.position")


class Section(Base):
    __tablename__ = "sections"

    id = Column(Integer, primary_key=True)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=False)
    position = Column(Integer, nullable=False, default=1)
    content = Column(Text)

    article = relationship("Article", back_populates="sections")


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True)
    position = Column(Integer)
    title = Column(Text, nullable=False)


class LessonArticle(Base):
    __tablename__ = "lesson_articles"

    id = Column(Integer, primary_key=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id"), nullable=False)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=False)
