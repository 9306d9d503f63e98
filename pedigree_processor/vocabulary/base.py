"""
Abstract base class for vocabulary lookups.

All vocabularies follow a standardized contract:
1. name: Vocabulary identifier ('omim', 'hpo', ...)
2. get_term(): Resolve a term identifier to a VocabularyTerm, or None
3. Transport failures raise VocabularyLookupError
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class VocabularyLookupError(RuntimeError):
    """Raised when a vocabulary backend cannot answer a lookup."""


@dataclass
class VocabularyTerm:
    """
    A coded clinical concept resolved from a vocabulary.

    Attributes:
        id: Term identifier (e.g. 'OMIM:100' or 'HP:0001250')
        data: Full term payload as returned by the vocabulary
    """
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        """Human-readable label of the term, if the payload has one."""
        return self.data.get("name") or self.data.get("label")

    def to_json(self) -> Dict[str, Any]:
        """Serialized form of the term, as stored in patient records."""
        serialized = dict(self.data)
        serialized["id"] = self.id
        return serialized


class Vocabulary(ABC):
    """
    Abstract base class for all vocabularies.

    Implementations are expected to be synchronous and cheap to call
    once per identifier.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Vocabulary identifier."""
        pass

    @abstractmethod
    def get_term(self, term_id: str) -> Optional[VocabularyTerm]:
        """
        Look up a single term.

        Args:
            term_id: Term identifier

        Returns:
            VocabularyTerm if found, None otherwise
        """
        pass

    def get_terms(self, term_ids: List[str]) -> List[VocabularyTerm]:
        """Resolve several identifiers, dropping the ones not found."""
        terms = []
        for term_id in term_ids:
            term = self.get_term(term_id)
            if term is not None:
                terms.append(term)
        return terms

    def close(self) -> None:
        """Release backend resources; nothing to release by default."""
        pass

    def __repr__(self) -> str:
        return f"<Vocabulary: {self.name}>"
