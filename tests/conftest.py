from __future__ import annotations

from typing import Any, Dict

import pytest

from ballotcheck.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def candidates_response() -> Dict[str, Any]:
    return {
        "voteLabel": "Élection du CSE",
        "voteSubLabel": "1er tour",
        "electionLabel": "Titulaires",
        "ballotTitle": "Collège cadres",
        "candidates": {
            "3": {"firstName": "Ada", "lastName": "Lovelace", "ballotPaperTitle": "Liste A"},
            "4": {"firstName": "Alan", "lastName": "Turing", "ballotPaperTitle": "Liste A"},
        },
        "questions": None,
    }


@pytest.fixture
def questions_response() -> Dict[str, Any]:
    return {
        "voteLabel": "Consultation",
        "voteSubLabel": "",
        "electionLabel": "Référendum",
        "questions": {
            "7": {"position": 1, "label": "Q1"},
            "8": {"position": 2, "label": "Q2", "ballotPaperTitle": "Questions"},
        },
        "questionsApprovalLabel": "Oui",
        "questionsRefusalLabel": "Non",
    }
