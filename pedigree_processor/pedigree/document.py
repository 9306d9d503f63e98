"""
Pedigree Document

Wraps the JSON produced by the pedigree editor and extracts the
per-individual property objects that get converted to patient records.

Pedigree JSON layout (version 1.0):
- JSON_version: schema version tag
- GG: graph array; each node may carry a 'prop' object with the
  individual's data (relationship nodes carry none)
- members: flat list of individuals, used by simplified exports
  that have no GG graph
"""
import json
from typing import Any, Dict, List, Optional

VERSION_KEY = "JSON_version"
GRAPH_KEY = "GG"
PROPERTIES_KEY = "prop"
MEMBERS_KEY = "members"
PATIENT_ID_KEY = "phenotipsId"


class PedigreeFormatError(ValueError):
    """Raised when pedigree text is not a JSON object."""


class Pedigree:
    """
    A pedigree document: the raw graph JSON plus an optional SVG image.

    Usage:
        pedigree = Pedigree.from_json(text)
        for node in pedigree.extract_patient_properties():
            ...
    """

    def __init__(self, data: Dict[str, Any], image: str = ""):
        self.data = data
        self.image = image

    @classmethod
    def from_json(cls, text: str, image: str = "") -> "Pedigree":
        """
        Parse a pedigree from its JSON text.

        Raises:
            PedigreeFormatError: if the text is not a JSON object
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise PedigreeFormatError(f"Invalid pedigree JSON: {e}") from e

        if not isinstance(data, dict):
            raise PedigreeFormatError("Pedigree JSON must be an object")
        return cls(data, image)

    @property
    def version(self) -> Optional[str]:
        """
        The declared JSON_version, or None when the document has none.

        Raises:
            PedigreeFormatError: if the tag is present but null
        """
        if VERSION_KEY not in self.data:
            return None
        value = self.data[VERSION_KEY]
        if value is None:
            raise PedigreeFormatError(f"'{VERSION_KEY}' is null")
        return str(value)

    def extract_patient_properties(self) -> List[Dict[str, Any]]:
        """
        Get the property objects of every individual in the pedigree.

        Returns:
            List of per-individual JSON objects in document order
        """
        if GRAPH_KEY in self.data:
            properties = []
            for node in self.data[GRAPH_KEY]:
                if not isinstance(node, dict):
                    continue
                prop = node.get(PROPERTIES_KEY)
                if isinstance(prop, dict) and prop:
                    properties.append(prop)
            return properties

        members = self.data.get(MEMBERS_KEY)
        if isinstance(members, list):
            return [member for member in members if isinstance(member, dict)]

        return []

    def extract_ids(self) -> List[str]:
        """Identifiers of the individuals already linked to patient records."""
        return [
            str(node[PATIENT_ID_KEY])
            for node in self.extract_patient_properties()
            if node.get(PATIENT_ID_KEY)
        ]

    def is_empty(self) -> bool:
        return not self.extract_patient_properties()

    def __repr__(self) -> str:
        return f"<Pedigree version={self.data.get(VERSION_KEY)!r}>"
