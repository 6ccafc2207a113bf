import pytest

from ballotcheck.ballot_classifier import classify_ballot
from ballotcheck.ballot_renderer import LineState, render_ballot
from ballotcheck.server_response import ReferenceMetadata


def _render(raw, ref):
    return render_ballot(classify_ballot(raw, ref), ref)


def test_candidate_checked():
    ref = ReferenceMetadata(candidates={"3": {"firstName": "A", "lastName": "B"}})
    d = _render({"3": 1}, ref)
    assert d.title == "Bulletin"
    assert len(d.lines) == 1
    assert d.lines[0].text == "A B"
    assert d.lines[0].state is LineState.CHECKED
    assert d.lines[0].struck is False


@pytest.mark.parametrize("value", [0, "1", True, None])
def test_candidate_unchecked_is_struck(value):
    ref = ReferenceMetadata(candidates={"3": {"firstName": "A", "lastName": "B"}})
    line = _render({"3": value}, ref).lines[0]
    assert line.state is LineState.UNCHECKED
    assert line.struck is True


def test_title_comes_from_first_selection():
    ref = ReferenceMetadata(candidates={
        "1": {"firstName": "A", "lastName": "B", "ballotPaperTitle": "Liste 1"},
        "2": {"firstName": "C", "lastName": "D", "ballotPaperTitle": "Liste 2"},
    })
    d = _render({"2": 1, "1": 1}, ref)
    assert d.title == "Liste 2"
    assert [ln.text for ln in d.lines] == ["C D", "A B"]


def test_blank_ballot():
    ref = ReferenceMetadata(candidates={"1": {"firstName": "A", "lastName": "B", "ballotPaperTitle": "Liste 1"}})
    d = _render({"0": "blank"}, ref)
    assert d.title == "Bulletin"
    assert [(ln.text, ln.state) for ln in d.lines] == [("Blanc", LineState.NEUTRAL)]


def test_question_no_answer():
    ref = ReferenceMetadata(questions={"7": {"position": 1, "label": "Q1"}}, refusal_label="Non")
    line = _render({"7": "no"}, ref).lines[0]
    assert line.text == "1 - Q1"
    assert line.answer_label == "Non"
    assert line.state is LineState.NO


def test_question_unknown_answer_is_void():
    ref = ReferenceMetadata(questions={"7": {"position": 1, "label": "Q1"}}, refusal_label="Non")
    line = _render({"7": "xyz"}, ref).lines[0]
    assert line.answer_label == "Nul"
    assert line.state is LineState.INVALID


def test_question_answer_table():
    ref = ReferenceMetadata(
        questions={
            "1": {"position": 1, "label": "A", "ballotPaperTitle": "Référendum"},
            "2": {"position": 2.0, "label": "B"},
            "3": {"position": "3", "label": "C"},
            "4": {"position": 4, "label": "D"},
            "5": {"position": 5, "label": "E"},
        },
        approval_label="Pour",
        refusal_label="Contre",
    )
    d = _render({"1": "yes", "2": "no", "3": "abstention", "4": "blank", "5": ["yes"]}, ref)
    assert d.title == "Référendum"
    assert [(ln.text, ln.answer_label, ln.state) for ln in d.lines] == [
        ("1 - A", "Pour", LineState.YES),
        ("2 - B", "Contre", LineState.NO),
        ("3 - C", "Abstention", LineState.ABSTENTION),
        ("4 - D", "Blanc", LineState.BLANK),
        ("5 - E", "Nul", LineState.INVALID),
    ]


def test_blank_ballot_needs_no_reference_data():
    d = _render({"0": "blank"}, ReferenceMetadata())
    assert d.title == "Bulletin"
    assert [(ln.text, ln.state) for ln in d.lines] == [("Blanc", LineState.NEUTRAL)]
