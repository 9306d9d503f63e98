"""
In-memory vocabulary backed by a dictionary or a JSON terms file.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from .base import Vocabulary, VocabularyTerm


def _check_term(term_id: Any, data: Any) -> None:
    if not isinstance(data, dict):
        raise ValueError(f"Term {term_id!r} must be a JSON object, got {type(data).__name__}")


class InMemoryVocabulary(Vocabulary):
    """
    Vocabulary holding all of its terms in memory.

    Terms are keyed by identifier; lookups are exact matches.
    """

    def __init__(self, name: str, terms: Optional[Dict[str, Dict[str, Any]]] = None):
        self._name = name
        self._terms: Dict[str, Dict[str, Any]] = {}
        for term_id, data in (terms or {}).items():
            self.add_term(term_id, data)

    @property
    def name(self) -> str:
        return self._name

    def get_term(self, term_id: str) -> Optional[VocabularyTerm]:
        data = self._terms.get(term_id)
        if data is None:
            return None
        return VocabularyTerm(id=term_id, data=data)

    def add_term(self, term_id: str, data: Dict[str, Any]) -> None:
        """
        Register a term.

        Raises:
            ValueError: if the payload is not a JSON object
        """
        _check_term(term_id, data)
        self._terms[term_id] = data

    def __len__(self) -> int:
        return len(self._terms)

    @classmethod
    def from_terms(cls, name: str, terms: Iterable[Dict[str, Any]]) -> "InMemoryVocabulary":
        """Build from a list of term objects, each carrying an 'id' key."""
        vocabulary = cls(name)
        for term in terms:
            _check_term(None, term)
            if "id" not in term:
                raise ValueError(f"Term without an 'id': {term!r}")
            vocabulary.add_term(str(term["id"]), term)
        return vocabulary

    @classmethod
    def from_file(cls, name: str, path: Union[str, Path]) -> "InMemoryVocabulary":
        """
        Load terms from a JSON file.

        The file holds either a list of term objects with an 'id' key,
        or an object mapping identifiers to term objects.

        Args:
            name: Vocabulary identifier
            path: Path to the JSON terms file

        Returns:
            InMemoryVocabulary with the loaded terms

        Raises:
            ValueError: on an unsupported layout or a non-object term
        """
        with open(path, "r", encoding="utf-8") as f:
            content = json.load(f)

        if isinstance(content, list):
            return cls.from_terms(name, content)
        if isinstance(content, dict):
            return cls(name, content)
        raise ValueError(f"Unsupported terms file format in {path}")
