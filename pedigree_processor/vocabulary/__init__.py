"""
Vocabulary lookups for clinical terms (OMIM disorders, HPO phenotypes).

Each vocabulary follows a standardized interface:
- Defined by abstract Vocabulary base class
- get_term() returns a VocabularyTerm or None
- Backends: in-memory (dict or JSON file) and REST
"""
from .base import Vocabulary, VocabularyTerm, VocabularyLookupError
from .memory import InMemoryVocabulary
from .rest import RestVocabulary
from .factory import VocabularyFactory

__all__ = [
    "Vocabulary",
    "VocabularyTerm",
    "VocabularyLookupError",
    "InMemoryVocabulary",
    "RestVocabulary",
    "VocabularyFactory",
]
