"""Publication catalog models: authors, keywords and their association rows."""

from __future__ import annotations

from datetime import date

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from scholarhub.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Author(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Researcher profile referenced by publications.

    Authors are pre-existing catalog rows: the publication write path only
    references them and never creates them.
    """

    __tablename__ = "authors"
    __repr_fields__ = ("id", "name")

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    institution: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    website_url: Mapped[str | None] = mapped_column(String(255))
    biography: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (Index("ix_authors_name", "name"),)


class Keyword(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Shared subject keyword, created lazily on first use."""

    __tablename__ = "keywords"
    __repr_fields__ = ("id", "name")

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("name", name="uq_keywords_name"),
        CheckConstraint("length(name) > 0", name="name_not_empty"),
    )


class Publication(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """Scholarly publication record.

    Authors and keywords are linked through :class:`PublicationAuthor` and
    :class:`PublicationKeyword` rows only; there are no ORM back-references,
    repositories read the associations explicitly.
    """

    __tablename__ = "publications"
    __repr_fields__ = ("id", "title")

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    abstract: Mapped[str | None] = mapped_column(Text)
    doi: Mapped[str | None] = mapped_column(String(255))
    publication_date: Mapped[date] = mapped_column(Date, nullable=False)
    journal: Mapped[str | None] = mapped_column(String(255))
    volume: Mapped[str | None] = mapped_column(String(50))
    issue: Mapped[str | None] = mapped_column(String(50))
    pages: Mapped[str | None] = mapped_column(String(50))
    publisher: Mapped[str | None] = mapped_column(String(255))
    citation_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    url: Mapped[str | None] = mapped_column(String(255))
    pdf_path: Mapped[str | None] = mapped_column(String(255))

    __table_args__ = (
        UniqueConstraint("doi", name="uq_publications_doi"),
        CheckConstraint("length(title) > 0", name="title_not_empty"),
        CheckConstraint("citation_count >= 0", name="citation_count_nonneg"),
        Index("ix_publications_publication_date", "publication_date"),
        Index("ix_publications_journal", "journal"),
    )


class PublicationAuthor(ReprMixin, db.Model):
    """Ordered association between a publication and an author.

    ``position`` is 0-based, unique per publication and contiguous.
    """

    __tablename__ = "publication_authors"
    __repr_fields__ = ("publication_id", "author_id", "position")

    publication_id: Mapped[int] = mapped_column(
        ForeignKey("publications.id", ondelete="CASCADE"), primary_key=True
    )
    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id", ondelete="RESTRICT"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("publication_id", "position", name="uq_publication_authors_position"),
        CheckConstraint("position >= 0", name="position_nonneg"),
        Index("ix_publication_authors_author_id", "author_id"),
    )


class PublicationKeyword(ReprMixin, db.Model):
    """Unordered association between a publication and a keyword."""

    __tablename__ = "publication_keywords"
    __repr_fields__ = ("publication_id", "keyword_id")

    publication_id: Mapped[int] = mapped_column(
        ForeignKey("publications.id", ondelete="CASCADE"), primary_key=True
    )
    keyword_id: Mapped[int] = mapped_column(
        ForeignKey("keywords.id", ondelete="CASCADE"), primary_key=True
    )

    __table_args__ = (Index("ix_publication_keywords_keyword_id", "keyword_id"),)
