import pytest

from ballotcheck.ballot_classifier import BallotMode, classify_ballot
from ballotcheck.errors import BallotValidationError, MalformedResponseError
from ballotcheck.server_response import ReferenceMetadata


CANDIDATES = ReferenceMetadata(candidates={"1": {"firstName": "A", "lastName": "B"}, "5": {"firstName": "C", "lastName": "D"}})
QUESTIONS = ReferenceMetadata(questions={"7": {"position": 1, "label": "Q1"}}, approval_label="Oui", refusal_label="Non")


def test_blank_sentinel_wins_over_other_keys():
    c = classify_ballot({"0": "blank", "5": 1}, CANDIDATES)
    assert c.is_blank is True
    assert c.selections == ()


def test_only_metadata_keys_is_empty_ballot():
    with pytest.raises(BallotValidationError) as ei:
        classify_ballot({"userCategoryId": 4, "pollingStationId": 9}, CANDIDATES)
    assert ei.value.reason == "empty"


def test_empty_record_is_empty_ballot():
    with pytest.raises(BallotValidationError):
        classify_ballot({}, CANDIDATES)


def test_unknown_item_invalidates_whole_ballot():
    with pytest.raises(BallotValidationError) as ei:
        classify_ballot({"1": 1, "99": 1}, CANDIDATES)
    assert ei.value.reason == "unknown_item"
    assert ei.value.item_id == "99"


def test_selections_keep_record_order_and_drop_metadata():
    raw = {"5": 0, "userCategoryId": 1, "1": 1, "pollingStationId": 2}
    c = classify_ballot(raw, CANDIDATES)
    assert c.mode is BallotMode.CANDIDATE
    assert c.selections == (("5", 0), ("1", 1))
    # input untouched
    assert "userCategoryId" in raw


def test_question_mode_when_no_candidates():
    c = classify_ballot({"7": "yes"}, QUESTIONS)
    assert c.mode is BallotMode.QUESTION
    assert c.selections == (("7", "yes"),)


def test_candidates_win_even_when_empty():
    ref = ReferenceMetadata(candidates={}, questions={"7": {"position": 1, "label": "Q1"}})
    with pytest.raises(BallotValidationError):
        classify_ballot({"7": "yes"}, ref)


def test_missing_reference_is_malformed_response():
    with pytest.raises(MalformedResponseError):
        classify_ballot({"7": "yes"}, ReferenceMetadata())


def test_classification_is_idempotent():
    raw = {"5": 1, "1": 0}
    assert classify_ballot(raw, CANDIDATES) == classify_ballot(raw, CANDIDATES)


def test_blank_ballot_without_reference_data():
    c = classify_ballot({"0": "blank"}, ReferenceMetadata())
    assert c.is_blank is True
    with pytest.raises(MalformedResponseError):
        classify_ballot({"5": 1}, ReferenceMetadata())
