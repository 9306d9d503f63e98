"""
REST Vocabulary - remote term lookup over HTTP.

Resolves identifiers against a vocabulary service exposing one resource
per term at ``{base_url}/{vocabulary}/{term_id}`` that answers with the
term as a JSON object (404 when the term is unknown).
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .base import Vocabulary, VocabularyLookupError, VocabularyTerm

logger = logging.getLogger(__name__)


class RestVocabulary(Vocabulary):
    """
    Looks up vocabulary terms from a remote REST endpoint.

    Features:
    - Unknown terms (404) resolve to None
    - Transport errors are retried with exponential backoff
    - Any other failure surfaces as VocabularyLookupError
    """

    def __init__(self, name: str, base_url: str, timeout: float = 10.0):
        """
        Initialize the REST vocabulary.

        Args:
            name: Vocabulary identifier, used as the URL path segment
            base_url: Root URL of the vocabularies resource
            timeout: HTTP request timeout in seconds
        """
        self._name = name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: Optional[httpx.Client] = None

    @property
    def name(self) -> str:
        return self._name

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def term_url(self, term_id: str) -> str:
        return f"{self.base_url}/{self._name}/{quote(term_id, safe='')}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _fetch(self, url: str) -> httpx.Response:
        return self._get_client().get(url, headers={"Accept": "application/json"})

    def get_term(self, term_id: str) -> Optional[VocabularyTerm]:
        """
        Look up a term on the remote vocabulary.

        Args:
            term_id: Term identifier

        Returns:
            VocabularyTerm if found, None if the service does not know it

        Raises:
            VocabularyLookupError: on timeouts, transport or HTTP errors
        """
        if not term_id or not term_id.strip():
            return None

        url = self.term_url(term_id.strip())
        try:
            response = self._fetch(url)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise VocabularyLookupError(f"{self._name} lookup timed out for {term_id}") from e
        except httpx.HTTPStatusError as e:
            raise VocabularyLookupError(
                f"{self._name} API error ({e.response.status_code}) for {term_id}"
            ) from e
        except httpx.HTTPError as e:
            raise VocabularyLookupError(f"{self._name} lookup failed for {term_id}: {e}") from e
        except ValueError as e:
            raise VocabularyLookupError(f"{self._name} returned invalid JSON for {term_id}") from e

        if not isinstance(data, dict):
            raise VocabularyLookupError(f"{self._name} returned a non-object term for {term_id}")

        logger.debug("Resolved %s term %s", self._name, term_id)
        return VocabularyTerm(id=str(data.get("id", term_id)), data=data)
