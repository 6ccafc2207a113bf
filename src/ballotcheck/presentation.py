"""
Plain-text presentation of verification outcomes.

Messages are the French strings shown by the deployed controller page.
Errors are matched against the taxonomy in order, so subclasses come first.
"""
from __future__ import annotations

from typing import Callable, List, Tuple, Type

from ballotcheck.ballot_renderer import DisplayLine, DisplayModel, LineState
from ballotcheck.errors import (
    BallotValidationError,
    ConfigurationError,
    DecryptionError,
    DomainValidationError,
    MalformedControlElementsError,
    MalformedResponseError,
    PlaintextDecodeError,
    PresenceMismatchError,
    ServerDataError,
    ServerError,
    TransportError,
    VerificationError,
)
from ballotcheck.verification import VerificationMode, VerificationOutcome


INTEGRITY_BANNER = "Les éléments de contrôle donnés correspondent au bulletin ci-dessous."
PRESENCE_BANNER = "Votre bulletin est bien présent dans l’urne et n’a pas été modifié."
PRESENCE_CARD_HEADER = "Valeur du bulletin chiffré dans l’urne"

_PASTE_HINT = "Assurez-vous d’avoir collé les éléments de contrôle sans modification."
_SUPPORT_HINT = "Si le problème persiste, contactez le support technique."


def _malformed_response(e: MalformedResponseError) -> str:
    if e.status is not None:
        return f"Erreur. La réponse du serveur est incorrecte. Statut {e.status}"
    return "Erreur. La réponse du serveur est incorrecte."


def _ballot_invalid(e: BallotValidationError) -> str:
    if e.reason == "empty":
        return "Le bulletin est vide et sera comptabilisé comme un nul."
    return "Le bulletin est invalide et sera comptabilisé comme un nul."


_MESSAGES: List[Tuple[Type[VerificationError], Callable]] = [
    (ConfigurationError, lambda e: "Erreur de configuration du formulaire."),
    (MalformedControlElementsError, lambda e: "Les éléments de contrôle fournis sont mal formatés. "
                                              "Assurez-vous de les avoir collés sans modification."),
    (DomainValidationError, lambda e: "Domaine incorrect."),
    (PlaintextDecodeError, lambda e: f"Le contenu déchiffré du bulletin est illisible. {_SUPPORT_HINT}"),
    (DecryptionError, lambda e: f"Échec du déchiffrement. {_PASTE_HINT}"),
    (BallotValidationError, _ballot_invalid),
    (ServerDataError, lambda e: f"Les données retournées par le serveur sont incorrectes. {_SUPPORT_HINT}"),
    (MalformedResponseError, _malformed_response),
    (TransportError, lambda e: "Impossible de joindre le serveur."),
    (ServerError, lambda e: e.message),
    (PresenceMismatchError, lambda e: "Le bulletin chiffré fourni ne correspond pas à l’empreinte associée. "
                                      f"{_PASTE_HINT} {_SUPPORT_HINT}"),
]


def error_message(error: BaseException) -> str:
    for cls, fmt in _MESSAGES:
        if isinstance(error, cls):
            return fmt(error)
    return unknown_error_message(error)


def unknown_error_message(error: BaseException) -> str:
    return f"Erreur inconnue. Contactez le support technique si elle se reproduit avec le détail suivant : \"{error}\""


MARKERS = {
    LineState.CHECKED: "[x]",
    LineState.UNCHECKED: "[ ]",
    LineState.NEUTRAL: "   ",
    LineState.YES: "[x]",
    LineState.NO: "[-]",
    LineState.ABSTENTION: "[/]",
    LineState.BLANK: "[ ]",
    LineState.INVALID: "[!]",
}


_ANSWER_STATES = {LineState.YES, LineState.NO, LineState.ABSTENTION, LineState.BLANK, LineState.INVALID}


def render_line(line: DisplayLine) -> str:
    text = f"~~{line.text}~~" if line.struck else line.text
    if line.state in _ANSWER_STATES:
        label = f"{line.answer_label} " if line.answer_label else ""
        return f"{text} : {label}{MARKERS[line.state]}"
    return f"{MARKERS[line.state]} {text}"


def render_display(display: DisplayModel) -> List[str]:
    out = [display.title, "-" * len(display.title)]
    out.extend(render_line(ln) for ln in display.lines)
    return out


def render_outcome(outcome: VerificationOutcome) -> str:
    if outcome.error is not None:
        return error_message(outcome.error)

    out: List[str] = [ln for ln in (outcome.header or []) if ln]
    if outcome.mode is VerificationMode.INTEGRITY:
        out.append(INTEGRITY_BANNER)
        out.append("")
        if outcome.display is not None:
            out.extend(render_display(outcome.display))
    else:
        out.append(PRESENCE_BANNER)
        out.append("")
        out.append(PRESENCE_CARD_HEADER)
        out.append(str(outcome.encrypted_ballot))
    return "\n".join(out)
