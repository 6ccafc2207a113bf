from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ballotcheck.ballot_classifier import BallotMode, ClassifiedBallot
from ballotcheck.server_response import ReferenceMetadata


DEFAULT_TITLE = "Bulletin"
BLANK_LABEL = "Blanc"
ABSTENTION_LABEL = "Abstention"
INVALID_LABEL = "Nul"


class LineState(str, Enum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"
    NEUTRAL = "neutral"
    YES = "yes"
    NO = "no"
    ABSTENTION = "abstention"
    BLANK = "blank"
    INVALID = "invalid"


@dataclass(frozen=True)
class DisplayLine:
    text: str
    state: LineState
    answer_label: Optional[str] = None
    struck: bool = False


@dataclass(frozen=True)
class DisplayModel:
    title: str
    lines: Tuple[DisplayLine, ...]


_INVALID = (INVALID_LABEL, LineState.INVALID)


def _is_selected(value: Any) -> bool:
    # the selection sentinel is the number 1; JSON true is not a selection
    return not isinstance(value, bool) and isinstance(value, (int, float)) and value == 1


def _fmt_position(position: Any) -> str:
    if isinstance(position, float) and position.is_integer():
        return str(int(position))
    return str(position)


def _answers(reference: ReferenceMetadata) -> Dict[str, Tuple[Optional[str], LineState]]:
    return {
        "yes": (reference.approval_label, LineState.YES),
        "no": (reference.refusal_label, LineState.NO),
        "abstention": (ABSTENTION_LABEL, LineState.ABSTENTION),
        "blank": (BLANK_LABEL, LineState.BLANK),
    }


def ballot_title(classified: ClassifiedBallot, reference: ReferenceMetadata) -> str:
    if classified.is_blank:
        return DEFAULT_TITLE
    item = reference.active_items()[classified.first_item_id]
    return item.get("ballotPaperTitle") or DEFAULT_TITLE


def _candidate_lines(classified: ClassifiedBallot, reference: ReferenceMetadata) -> Tuple[DisplayLine, ...]:
    out = []
    for item_id, value in classified.selections:
        candidate = reference.active_items()[item_id]
        text = f"{candidate['firstName']} {candidate['lastName']}"
        if _is_selected(value):
            out.append(DisplayLine(text=text, state=LineState.CHECKED))
        else:
            out.append(DisplayLine(text=text, state=LineState.UNCHECKED, struck=True))
    return tuple(out)


def _question_lines(classified: ClassifiedBallot, reference: ReferenceMetadata) -> Tuple[DisplayLine, ...]:
    answers = _answers(reference)
    out = []
    for item_id, value in classified.selections:
        question = reference.active_items()[item_id]
        label, state = answers.get(value, _INVALID) if isinstance(value, str) else _INVALID
        out.append(DisplayLine(
            text=f"{_fmt_position(question['position'])} - {question['label']}",
            state=state,
            answer_label=label,
        ))
    return tuple(out)


def render_ballot(classified: ClassifiedBallot, reference: ReferenceMetadata) -> DisplayModel:
    """Builds the display model; pure, same input gives the same output."""
    if classified.is_blank:
        lines: Tuple[DisplayLine, ...] = (DisplayLine(text=BLANK_LABEL, state=LineState.NEUTRAL),)
    elif classified.mode is BallotMode.CANDIDATE:
        lines = _candidate_lines(classified, reference)
    else:
        lines = _question_lines(classified, reference)
    return DisplayModel(title=ballot_title(classified, reference), lines=lines)
