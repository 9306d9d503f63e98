"""
Pedigree Field Mappers

Maps the properties of a single pedigree node onto the patient record
schema. Each mapper handles one field group and writes into the record
in place, so a failure in one group leaves the others untouched.

Mappings:
- phenotipsId, externalID → id, external_id
- fName, lName → patient_name.first_name, patient_name.last_name
- gender → sex
- lifeStatus → life_status
- dob, dod → date_of_birth, date_of_death
- features, nonstandard_features → same keys
- disorders → disorders (resolved through OMIM)
- genes → genes
- family_history → family_history
"""
import logging
from typing import Any, Dict, List

from ..vocabulary import Vocabulary

logger = logging.getLogger(__name__)

ALIVE = "alive"
DECEASED = "deceased"


def pedigree_date_to_date(pedigree_date: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a pedigree date object to a patient record date.

    Both schemas currently share the same date object, so this is an
    identity mapping.
    """
    return pedigree_date


def node_label(node: Dict[str, Any], index: int) -> str:
    """Identify a node in log messages."""
    patient_id = node.get("phenotipsId")
    if patient_id:
        return f"node {index} ({patient_id})"
    return f"node {index}"


def _copy_list(node: Dict[str, Any], record: Dict[str, Any], source_key: str, target_key: str) -> None:
    value = node.get(source_key)
    if isinstance(value, list):
        record[target_key] = value


class IdMapper:
    """Maps pedigree identifiers to record identifiers."""

    group = "ids"

    @staticmethod
    def map(node: Dict[str, Any], record: Dict[str, Any]) -> None:
        if node.get("phenotipsId") is not None:
            record["id"] = str(node["phenotipsId"])
        if node.get("externalID") is not None:
            record["external_id"] = str(node["externalID"])


class BasicDataMapper:
    """Maps name and sex."""

    group = "basic_data"

    @staticmethod
    def map(node: Dict[str, Any], record: Dict[str, Any]) -> None:
        name = {}
        if node.get("fName") is not None:
            name["first_name"] = node["fName"]
        if node.get("lName") is not None:
            name["last_name"] = node["lName"]
        if name:
            record["patient_name"] = name

        if node.get("gender") is not None:
            record["sex"] = node["gender"]


class LifeStatusMapper:
    """Collapses pedigree life statuses to alive/deceased."""

    group = "life_status"

    @staticmethod
    def map(node: Dict[str, Any], record: Dict[str, Any]) -> None:
        status = node.get("lifeStatus")
        if status is None:
            status = ALIVE

        # stillborn, miscarriage, aborted and unborn all count as deceased
        record["life_status"] = ALIVE if str(status).lower() == ALIVE else DECEASED


class DateMapper:
    """Maps one pedigree date field onto its record counterpart."""

    def __init__(self, source_key: str, target_key: str):
        self.source_key = source_key
        self.target_key = target_key
        self.group = target_key

    def map(self, node: Dict[str, Any], record: Dict[str, Any]) -> None:
        if self.source_key not in node:
            return

        value = node[self.source_key]
        if not isinstance(value, dict):
            raise TypeError(f"'{self.source_key}' is not a date object: {value!r}")
        record[self.target_key] = pedigree_date_to_date(value)


class PhenotypeMapper:
    """Copies observed and free-text phenotypes."""

    group = "phenotypes"

    @staticmethod
    def map(node: Dict[str, Any], record: Dict[str, Any]) -> None:
        _copy_list(node, record, "features", "features")
        _copy_list(node, record, "nonstandard_features", "nonstandard_features")


class DisorderMapper:
    """Resolves disorder identifiers through the OMIM vocabulary."""

    group = "disorders"

    def __init__(self, omim: Vocabulary):
        self.omim = omim

    def map(self, node: Dict[str, Any], record: Dict[str, Any]) -> List[str]:
        """
        Resolve each disorder and keep the serialized terms.

        Returns:
            Messages for the identifiers whose lookup failed
        """
        failures = []
        terms = []

        disorder_ids = node.get("disorders")
        if isinstance(disorder_ids, list):
            for term_id in disorder_ids:
                try:
                    term = self.omim.get_term(str(term_id))
                    if term is None:
                        logger.info("Disorder %s not found in %s; dropped", term_id, self.omim.name)
                        continue
                    terms.append(term.to_json())
                except Exception as e:
                    message = f"Could not convert disorder {term_id}: {e}"
                    logger.error(message)
                    failures.append(message)

        record["disorders"] = terms
        return failures


class GeneMapper:
    """Copies candidate/confirmed genes."""

    group = "genes"

    @staticmethod
    def map(node: Dict[str, Any], record: Dict[str, Any]) -> None:
        _copy_list(node, record, "genes", "genes")


class FamilyHistoryMapper:
    """Copies family history; an absent value becomes an explicit null."""

    group = "family_history"

    @staticmethod
    def map(node: Dict[str, Any], record: Dict[str, Any]) -> None:
        record["family_history"] = node.get("family_history")
