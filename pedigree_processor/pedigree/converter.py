"""
Pedigree Converter Service

Converts a pedigree document into one patient record per individual.

Orchestrates, for each node:
1. Identifiers
2. Name and sex
3. Life status
4. Dates of birth and death
5. Phenotypes
6. Disorders (with OMIM lookups)
7. Family history
8. Genes

Every field group is isolated: an error is logged, recorded and the
group's output left out, while the remaining groups and nodes proceed.
A conversion never raises.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..vocabulary import Vocabulary
from .document import Pedigree
from .mappers import (
    IdMapper,
    BasicDataMapper,
    LifeStatusMapper,
    DateMapper,
    PhenotypeMapper,
    DisorderMapper,
    FamilyHistoryMapper,
    GeneMapper,
    node_label,
)

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = "1.0"


@dataclass
class FieldError:
    """A field group that could not be converted for one node."""
    node_index: Optional[int]
    group: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"node_index": self.node_index, "group": self.group, "message": self.message}


@dataclass
class ConversionResult:
    """Result of a pedigree conversion."""
    records: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[FieldError] = field(default_factory=list)
    version: Optional[str] = None
    version_mismatch: bool = False

    @property
    def count(self) -> int:
        return len(self.records)


class PedigreeConverter:
    """
    Converts pedigree JSON into patient record JSON.

    Usage:
        converter = PedigreeConverter(omim=omim_vocabulary)
        records = converter.convert(pedigree)

        # or, to inspect what went wrong
        result = converter.convert_with_report(pedigree)
    """

    def __init__(
        self,
        omim: Vocabulary,
        hpo: Optional[Vocabulary] = None,
        expected_version: str = SUPPORTED_VERSION,
    ):
        """
        Initialize the converter.

        Args:
            omim: Vocabulary used to resolve disorder identifiers
            hpo: Phenotype vocabulary; phenotypes are currently copied as-is
            expected_version: Pedigree JSON_version the mapping targets
        """
        self.omim = omim
        self.hpo = hpo
        self.expected_version = expected_version
        self._mappers = [
            IdMapper,
            BasicDataMapper,
            LifeStatusMapper,
            DateMapper("dob", "date_of_birth"),
            DateMapper("dod", "date_of_death"),
            PhenotypeMapper,
            DisorderMapper(omim),
            FamilyHistoryMapper,
            GeneMapper,
        ]

    def convert(self, pedigree: Optional[Pedigree]) -> List[Dict[str, Any]]:
        """
        Convert every individual of a pedigree to a patient record.

        Args:
            pedigree: Pedigree document, or None

        Returns:
            One record per individual, in document order; empty for None
        """
        return self.convert_with_report(pedigree).records

    def convert_with_report(self, pedigree: Optional[Pedigree]) -> ConversionResult:
        """
        Convert a pedigree and collect the field errors encountered.

        Args:
            pedigree: Pedigree document, or None

        Returns:
            ConversionResult with records and errors
        """
        result = ConversionResult()
        if pedigree is None:
            return result

        try:
            result.version = pedigree.version
            if result.version is not None and result.version.lower() != self.expected_version.lower():
                result.version_mismatch = True
                logger.warning(
                    "The version of the pedigree JSON (%s) differs from the expected (%s).",
                    result.version,
                    self.expected_version,
                )
        except Exception as e:
            logger.error("Could not read pedigree version: %s", e)
            result.errors.append(FieldError(None, "version", str(e)))

        try:
            nodes = pedigree.extract_patient_properties()
        except Exception as e:
            logger.error("Could not extract individuals from pedigree: %s", e)
            result.errors.append(FieldError(None, "extraction", str(e)))
            return result

        for index, node in enumerate(nodes):
            result.records.append(self._convert_node(node, index, result.errors))

        return result

    def _convert_node(self, node: Dict[str, Any], index: int, errors: List[FieldError]) -> Dict[str, Any]:
        """Run every field group on one node."""
        record: Dict[str, Any] = {}

        for mapper in self._mappers:
            try:
                failures = mapper.map(node, record)
            except Exception as e:
                logger.error(
                    "Could not convert %s of %s: %s", mapper.group, node_label(node, index), e
                )
                errors.append(FieldError(index, mapper.group, str(e)))
                continue

            for message in failures or []:
                errors.append(FieldError(index, mapper.group, message))

        return record
