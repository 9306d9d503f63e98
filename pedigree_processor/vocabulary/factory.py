"""Factory for creating vocabularies from settings"""
import logging

from .base import Vocabulary
from .memory import InMemoryVocabulary
from .rest import RestVocabulary

logger = logging.getLogger(__name__)


class VocabularyFactory:
    """Factory for creating vocabulary backends"""

    @staticmethod
    def create(name: str, base_url: str = "", terms_file: str = "", timeout: float = 10.0) -> Vocabulary:
        """
        Create a vocabulary backend.

        Args:
            name: Vocabulary identifier ('omim' or 'hpo')
            base_url: Remote vocabularies root; takes precedence when set
            terms_file: JSON terms file used when no base_url is given
            timeout: HTTP timeout for the remote backend

        Returns:
            Vocabulary instance (empty in-memory one when nothing is configured)
        """
        if base_url:
            return RestVocabulary(name, base_url, timeout=timeout)
        if terms_file:
            return InMemoryVocabulary.from_file(name, terms_file)

        logger.warning("No backend configured for vocabulary '%s'; all lookups will miss", name)
        return InMemoryVocabulary(name)

    @staticmethod
    def from_settings(name: str) -> Vocabulary:
        """Create a vocabulary using application settings."""
        from ..config import settings

        terms_files = {
            "omim": settings.omim_terms_file,
            "hpo": settings.hpo_terms_file,
        }
        if name not in terms_files:
            raise ValueError(f"Unknown vocabulary: {name}")

        return VocabularyFactory.create(
            name,
            base_url=settings.vocabulary_base_url,
            terms_file=terms_files[name],
            timeout=settings.vocabulary_timeout,
        )
