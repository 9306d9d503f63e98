"""
Pedigree Conversion Tests

Comprehensive tests for:
1. Pedigree document parsing and individual extraction
2. Field mapper unit tests
3. Converter integration tests (isolation, ordering, logging)
"""
import json
import logging

import pytest
from unittest.mock import Mock

from pedigree_processor.pedigree import (
    Pedigree,
    PedigreeFormatError,
    PedigreeConverter,
    ConversionResult,
)
from pedigree_processor.pedigree.mappers import (
    IdMapper,
    BasicDataMapper,
    LifeStatusMapper,
    DateMapper,
    PhenotypeMapper,
    DisorderMapper,
    GeneMapper,
    FamilyHistoryMapper,
    pedigree_date_to_date,
)
from pedigree_processor.vocabulary import InMemoryVocabulary, VocabularyLookupError


# ============================================================================
# Sample Data for Testing
# ============================================================================

OMIM_TERMS = {
    "OMIM:100": {"id": "OMIM:100", "label": "X"},
    "OMIM:219700": {"id": "OMIM:219700", "name": "Cystic fibrosis", "symbol": "CF"},
}

SAMPLE_PROBAND = {
    "phenotipsId": "P0000001",
    "externalID": "FAM-01-II-1",
    "fName": "Jane",
    "lName": "Doe",
    "gender": "F",
    "lifeStatus": "alive",
    "dob": {"decade": "1980s", "year": 1984, "month": 5, "day": 15},
    "features": [{"id": "HP:0001250", "label": "Seizure", "type": "phenotype", "observed": "yes"}],
    "nonstandard_features": [{"label": "unusual gait", "type": "phenotype", "observed": "yes"}],
    "disorders": ["OMIM:219700"],
    "genes": [{"gene": "CFTR", "status": "solved"}],
    "family_history": {"consanguinity": False},
}

SAMPLE_FATHER = {
    "phenotipsId": "P0000002",
    "fName": "John",
    "gender": "M",
    "lifeStatus": "deceased",
    "dod": {"year": 2010},
}

SAMPLE_PEDIGREE = {
    "JSON_version": "1.0",
    "GG": [
        {"id": 0, "prop": SAMPLE_PROBAND},
        {"id": 1, "prop": SAMPLE_FATHER},
        {"id": 2, "chhub": True, "outedges": [{"to": 0}]},
        {"id": 3, "rel": True, "prop": {}},
        {"id": 4, "prop": {"gender": "U"}},
    ],
    "ranks": [1, 2, 3],
    "order": [[], [0, 1], [2]],
}


@pytest.fixture
def omim():
    return InMemoryVocabulary("omim", OMIM_TERMS)


@pytest.fixture
def converter(omim):
    return PedigreeConverter(omim=omim, hpo=InMemoryVocabulary("hpo"))


# ============================================================================
# Pedigree Document Tests
# ============================================================================

class TestPedigree:
    """Test pedigree parsing and extraction."""

    def test_extract_patient_properties_skips_empty_nodes(self):
        """Only graph nodes with non-empty properties are individuals."""
        pedigree = Pedigree(SAMPLE_PEDIGREE)

        properties = pedigree.extract_patient_properties()

        assert len(properties) == 3
        assert properties[0]["phenotipsId"] == "P0000001"
        assert properties[1]["phenotipsId"] == "P0000002"
        assert properties[2] == {"gender": "U"}

    def test_extract_members_without_graph(self):
        """Flat exports list individuals under 'members'."""
        pedigree = Pedigree({"members": [{"gender": "M"}, "junk", {"gender": "F"}]})

        assert pedigree.extract_patient_properties() == [{"gender": "M"}, {"gender": "F"}]

    def test_extract_ids(self):
        """Only individuals linked to a record contribute an id."""
        pedigree = Pedigree(SAMPLE_PEDIGREE)

        assert pedigree.extract_ids() == ["P0000001", "P0000002"]

    def test_version(self):
        assert Pedigree({"JSON_version": "1.0"}).version == "1.0"
        assert Pedigree({"JSON_version": 1.1}).version == "1.1"
        assert Pedigree({}).version is None

    def test_null_version_is_a_format_error(self):
        with pytest.raises(PedigreeFormatError):
            Pedigree({"JSON_version": None}).version

    def test_from_json(self):
        pedigree = Pedigree.from_json(json.dumps(SAMPLE_PEDIGREE), image="<svg/>")

        assert pedigree.version == "1.0"
        assert pedigree.image == "<svg/>"
        assert not pedigree.is_empty()

    def test_from_json_rejects_invalid_text(self):
        with pytest.raises(PedigreeFormatError):
            Pedigree.from_json("{not json")

    def test_from_json_rejects_non_object(self):
        with pytest.raises(PedigreeFormatError):
            Pedigree.from_json("[1, 2, 3]")

    def test_empty_document(self):
        assert Pedigree({}).is_empty()


# ============================================================================
# Mapper Unit Tests
# ============================================================================

class TestIdMapper:
    """Test identifier mapping."""

    def test_map_ids(self):
        record = {}
        IdMapper.map({"phenotipsId": "P1", "externalID": "E1"}, record)

        assert record == {"id": "P1", "external_id": "E1"}

    def test_missing_ids_are_absent(self):
        record = {}
        IdMapper.map({}, record)

        assert record == {}


class TestBasicDataMapper:
    """Test name and sex mapping."""

    def test_map_full_name_and_sex(self):
        record = {}
        BasicDataMapper.map({"fName": "Jane", "lName": "Doe", "gender": "F"}, record)

        assert record["patient_name"] == {"first_name": "Jane", "last_name": "Doe"}
        assert record["sex"] == "F"

    def test_map_partial_name(self):
        """A missing name part is absent rather than null."""
        record = {}
        BasicDataMapper.map({"lName": "Doe"}, record)

        assert record["patient_name"] == {"last_name": "Doe"}
        assert "sex" not in record

    def test_no_name(self):
        record = {}
        BasicDataMapper.map({"gender": "U"}, record)

        assert "patient_name" not in record
        assert record["sex"] == "U"


class TestLifeStatusMapper:
    """Test life status collapsing."""

    def test_missing_defaults_to_alive(self):
        record = {}
        LifeStatusMapper.map({}, record)

        assert record["life_status"] == "alive"

    @pytest.mark.parametrize("status", ["alive", "Alive", "ALIVE"])
    def test_alive_is_case_insensitive(self, status):
        record = {}
        LifeStatusMapper.map({"lifeStatus": status}, record)

        assert record["life_status"] == "alive"

    @pytest.mark.parametrize("status", ["deceased", "Deceased", "miscarriage", "stillborn", "unborn", "aborted"])
    def test_everything_else_is_deceased(self, status):
        record = {}
        LifeStatusMapper.map({"lifeStatus": status}, record)

        assert record["life_status"] == "deceased"


class TestDateMapper:
    """Test date pass-through."""

    def test_date_is_passed_through(self):
        date = {"year": 1984, "month": 5}
        record = {}
        DateMapper("dob", "date_of_birth").map({"dob": date}, record)

        assert record["date_of_birth"] == date

    def test_missing_date_is_absent(self):
        record = {}
        DateMapper("dod", "date_of_death").map({}, record)

        assert record == {}

    def test_non_object_date_raises(self):
        with pytest.raises(TypeError):
            DateMapper("dob", "date_of_birth").map({"dob": "1984-05-15"}, {})

    def test_pedigree_date_to_date_is_identity(self):
        date = {"decade": "1980s"}
        assert pedigree_date_to_date(date) is date


class TestListMappers:
    """Test phenotype, gene and family history copying."""

    def test_phenotypes_copied(self):
        record = {}
        PhenotypeMapper.map(SAMPLE_PROBAND, record)

        assert record["features"] == SAMPLE_PROBAND["features"]
        assert record["nonstandard_features"] == SAMPLE_PROBAND["nonstandard_features"]

    def test_missing_lists_are_omitted(self):
        record = {}
        PhenotypeMapper.map({}, record)
        GeneMapper.map({}, record)

        assert record == {}

    def test_non_list_values_are_omitted(self):
        record = {}
        PhenotypeMapper.map({"features": "HP:0001250"}, record)
        GeneMapper.map({"genes": {"gene": "CFTR"}}, record)

        assert record == {}

    def test_family_history_absent_is_null(self):
        record = {}
        FamilyHistoryMapper.map({}, record)

        assert "family_history" in record
        assert record["family_history"] is None


class TestDisorderMapper:
    """Test disorder resolution through OMIM."""

    def test_resolved_disorders_are_serialized(self, omim):
        record = {}
        failures = DisorderMapper(omim).map({"disorders": ["OMIM:219700", "OMIM:100"]}, record)

        assert failures == []
        assert record["disorders"] == [
            {"id": "OMIM:219700", "name": "Cystic fibrosis", "symbol": "CF"},
            {"id": "OMIM:100", "label": "X"},
        ]

    def test_unresolved_disorders_are_dropped(self, omim):
        record = {}
        failures = DisorderMapper(omim).map({"disorders": ["OMIM:999999", "OMIM:100"]}, record)

        assert failures == []
        assert record["disorders"] == [{"id": "OMIM:100", "label": "X"}]

    def test_lookup_errors_are_dropped_and_reported(self, caplog):
        omim = Mock()
        omim.name = "omim"
        omim.get_term.side_effect = VocabularyLookupError("service down")

        record = {}
        with caplog.at_level(logging.ERROR):
            failures = DisorderMapper(omim).map({"disorders": ["OMIM:100"]}, record)

        assert record["disorders"] == []
        assert len(failures) == 1
        assert "OMIM:100" in failures[0]
        assert "Could not convert disorder OMIM:100" in caplog.text

    def test_missing_disorders_is_empty_list(self, omim):
        record = {}
        DisorderMapper(omim).map({}, record)

        assert record["disorders"] == []

    def test_unserializable_term_only_drops_that_disorder(self, omim, caplog):
        """A term failing to serialize keeps the other resolved disorders."""
        bad_term = Mock()
        bad_term.to_json.side_effect = ValueError("unserializable term")
        vocabulary = Mock()
        vocabulary.name = "omim"
        vocabulary.get_term.side_effect = lambda term_id: bad_term if term_id == "OMIM:bad" else omim.get_term(term_id)

        converter = PedigreeConverter(omim=vocabulary)
        with caplog.at_level(logging.ERROR):
            result = converter.convert_with_report(Pedigree({"GG": [
                {"prop": {"disorders": ["OMIM:100", "OMIM:bad"]}},
            ]}))

        assert result.records[0]["disorders"] == [{"id": "OMIM:100", "label": "X"}]
        assert [e.group for e in result.errors] == ["disorders"]
        assert "OMIM:bad" in result.errors[0].message
        assert "Could not convert disorder OMIM:bad" in caplog.text


# ============================================================================
# Converter Integration Tests
# ============================================================================

class TestPedigreeConverter:
    """Test full pedigree conversion."""

    def test_convert_none_returns_empty(self, converter):
        assert converter.convert(None) == []

    def test_worked_example(self, converter):
        """A minimal node maps to exactly the expected record."""
        pedigree = Pedigree({"GG": [{"id": 0, "prop": {
            "phenotipsId": "P1",
            "gender": "M",
            "lifeStatus": "alive",
            "disorders": ["OMIM:100"],
        }}]})

        records = converter.convert(pedigree)

        assert records == [{
            "id": "P1",
            "sex": "M",
            "life_status": "alive",
            "disorders": [{"id": "OMIM:100", "label": "X"}],
            "family_history": None,
        }]

    def test_convert_full_pedigree(self, converter):
        records = converter.convert(Pedigree(SAMPLE_PEDIGREE))

        assert len(records) == 3
        proband, father, unlinked = records

        assert proband["id"] == "P0000001"
        assert proband["external_id"] == "FAM-01-II-1"
        assert proband["patient_name"] == {"first_name": "Jane", "last_name": "Doe"}
        assert proband["date_of_birth"] == SAMPLE_PROBAND["dob"]
        assert proband["disorders"] == [{"id": "OMIM:219700", "name": "Cystic fibrosis", "symbol": "CF"}]
        assert proband["genes"] == [{"gene": "CFTR", "status": "solved"}]
        assert proband["family_history"] == {"consanguinity": False}

        assert father["life_status"] == "deceased"
        assert father["date_of_death"] == {"year": 2010}
        assert "date_of_birth" not in father

        assert unlinked == {
            "sex": "U",
            "life_status": "alive",
            "disorders": [],
            "family_history": None,
        }

    def test_records_keep_document_order(self, converter):
        nodes = [{"id": i, "prop": {"phenotipsId": f"P{i}"}} for i in range(5)]

        records = converter.convert(Pedigree({"GG": nodes}))

        assert [r["id"] for r in records] == ["P0", "P1", "P2", "P3", "P4"]
        assert all(r["life_status"] == "alive" for r in records)

    def test_missing_optional_lists_are_omitted(self, converter):
        records = converter.convert(Pedigree({"GG": [{"prop": {"gender": "F"}}]}))

        for key in ("features", "nonstandard_features", "genes"):
            assert key not in records[0]

    def test_field_error_is_isolated(self, converter, caplog):
        """A malformed date only drops the date, not the rest of the record."""
        pedigree = Pedigree({"GG": [
            {"prop": {"phenotipsId": "P1", "dob": "1984", "gender": "F", "genes": [{"gene": "BRCA1"}]}},
            {"prop": {"phenotipsId": "P2"}},
        ]})

        with caplog.at_level(logging.ERROR):
            result = converter.convert_with_report(pedigree)

        assert result.count == 2
        first = result.records[0]
        assert "date_of_birth" not in first
        assert first["sex"] == "F"
        assert first["genes"] == [{"gene": "BRCA1"}]
        assert first["family_history"] is None

        assert len(result.errors) == 1
        assert result.errors[0].group == "date_of_birth"
        assert result.errors[0].node_index == 0
        assert "P1" in caplog.text

    def test_lookup_failure_does_not_abort_batch(self):
        def get_term(term_id):
            if term_id == "OMIM:bad":
                raise VocabularyLookupError("timeout")
            return InMemoryVocabulary("omim", OMIM_TERMS).get_term(term_id)

        omim = Mock()
        omim.name = "omim"
        omim.get_term.side_effect = get_term
        converter = PedigreeConverter(omim=omim)

        result = converter.convert_with_report(Pedigree({"GG": [
            {"prop": {"disorders": ["OMIM:bad", "OMIM:100"]}},
            {"prop": {"disorders": ["OMIM:100"]}},
        ]}))

        assert [r["disorders"] for r in result.records] == [
            [{"id": "OMIM:100", "label": "X"}],
            [{"id": "OMIM:100", "label": "X"}],
        ]
        assert [e.group for e in result.errors] == ["disorders"]

    def test_version_mismatch_warns_and_continues(self, converter, caplog):
        pedigree = Pedigree({"JSON_version": "2.0", "GG": [{"prop": {"gender": "M"}}]})

        with caplog.at_level(logging.WARNING):
            result = converter.convert_with_report(pedigree)

        assert result.version_mismatch is True
        assert result.count == 1
        assert "differs from the expected" in caplog.text

    def test_matching_version_does_not_warn(self, converter, caplog):
        with caplog.at_level(logging.WARNING):
            result = converter.convert_with_report(Pedigree(SAMPLE_PEDIGREE))

        assert result.version_mismatch is False
        assert "differs from the expected" not in caplog.text

    def test_missing_version_does_not_warn(self, converter):
        result = converter.convert_with_report(Pedigree({"GG": []}))

        assert result.version is None
        assert result.version_mismatch is False

    def test_null_version_is_logged_and_conversion_continues(self, converter, caplog):
        pedigree = Pedigree({"JSON_version": None, "GG": [{"prop": {"gender": "F"}}]})

        with caplog.at_level(logging.ERROR):
            result = converter.convert_with_report(pedigree)

        assert result.count == 1
        assert result.version is None
        assert [e.group for e in result.errors] == ["version"]
        assert "Could not read pedigree version" in caplog.text

    def test_malformed_graph_returns_empty(self, converter, caplog):
        """Extraction failures are logged, never raised."""
        with caplog.at_level(logging.ERROR):
            result = converter.convert_with_report(Pedigree({"GG": 42}))

        assert result.records == []
        assert result.errors[0].group == "extraction"
        assert "Could not extract individuals" in caplog.text

    def test_unreadable_version_is_logged(self, converter):
        class BrokenVersionPedigree(Pedigree):
            @property
            def version(self):
                raise KeyError("JSON_version")

        result = converter.convert_with_report(BrokenVersionPedigree({"GG": [{"prop": {"gender": "M"}}]}))

        assert result.count == 1
        assert result.errors[0].group == "version"

    def test_convert_is_reentrant(self, converter):
        pedigree = Pedigree(SAMPLE_PEDIGREE)

        assert converter.convert(pedigree) == converter.convert(pedigree)
        assert SAMPLE_PEDIGREE["GG"][0]["prop"]["phenotipsId"] == "P0000001"

    def test_result_defaults(self):
        result = ConversionResult()

        assert result.count == 0
        assert result.errors == []


class TestLoggingConfig:
    """Test root logger configuration."""

    def test_configure_logging_sets_level(self):
        from pedigree_processor.logging_config import configure_logging

        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)
