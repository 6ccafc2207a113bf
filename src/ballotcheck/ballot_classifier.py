"""
Ballot paper classification.

A decrypted ballot paper maps item ids to raw values. Classification strips
the per-voter metadata keys, then decides between:
  - blank    key "0" == "blank" (nothing else is looked at)
  - selected every remaining id exists in the active reference mapping
and raises BallotValidationError for an empty paper or any unknown id,
which means the ballot will be counted as void.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from ballotcheck.errors import BallotValidationError
from ballotcheck.server_response import ReferenceMetadata


METADATA_KEYS = ("userCategoryId", "pollingStationId")
BLANK_KEY = "0"
BLANK_VALUE = "blank"


class BallotMode(str, Enum):
    CANDIDATE = "candidate"
    QUESTION = "question"


@dataclass(frozen=True)
class ClassifiedBallot:
    is_blank: bool
    mode: BallotMode
    selections: Tuple[Tuple[str, Any], ...] = ()

    @property
    def first_item_id(self) -> str:
        return self.selections[0][0]


def strip_metadata(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in raw.items() if k not in METADATA_KEYS}


def classify_ballot(raw: Dict[str, Any], reference: ReferenceMetadata) -> ClassifiedBallot:
    paper = strip_metadata(raw)
    if not paper:
        raise BallotValidationError("empty")

    mode = BallotMode.CANDIDATE if reference.is_candidate_mode else BallotMode.QUESTION

    if paper.get(BLANK_KEY) == BLANK_VALUE:
        return ClassifiedBallot(is_blank=True, mode=mode)

    items = reference.active_items()
    for item_id in paper:
        if not items.get(item_id):
            raise BallotValidationError("unknown_item", item_id=item_id)

    return ClassifiedBallot(is_blank=False, mode=mode, selections=tuple(paper.items()))
