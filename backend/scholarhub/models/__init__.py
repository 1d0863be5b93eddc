from scholarhub.models.publication import (
    Author,
    Keyword,
    Publication,
    PublicationAuthor,
    PublicationKeyword,
)
from scholarhub.models.user import User

__all__ = [
    "Author",
    "Keyword",
    "Publication",
    "PublicationAuthor",
    "PublicationKeyword",
    "User",
]
