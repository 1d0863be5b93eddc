"""Factories for the publication catalog: authors, keywords, publications."""

from __future__ import annotations

from datetime import date

import factory
from scholarhub.models.publication import Author, Keyword, Publication

from tests.factories import BaseFactory


class AuthorFactory(BaseFactory):
    class Meta:
        model = Author

    id = None
    name = factory.Faker("name")
    institution = factory.Faker("company")
    email = factory.Sequence(lambda n: f"author{n}@example.org")


class KeywordFactory(BaseFactory):
    class Meta:
        model = Keyword

    id = None
    name = factory.Sequence(lambda n: f"keyword-{n}")


class PublicationFactory(BaseFactory):
    """Bare publication row without author or keyword links."""

    class Meta:
        model = Publication

    id = None
    title = factory.Faker("sentence", nb_words=6)
    abstract = factory.Faker("paragraph")
    doi = factory.Sequence(lambda n: f"10.1000/test.{n}")
    publication_date = date(2024, 1, 15)
    journal = "Journal of Tests"
    citation_count = 0
