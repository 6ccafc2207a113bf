from ballotcheck.aead_codec import decrypt_ballot_paper, encrypt_ballot_paper
from ballotcheck.ballot_classifier import BallotMode, ClassifiedBallot, classify_ballot
from ballotcheck.ballot_renderer import DisplayLine, DisplayModel, LineState, render_ballot
from ballotcheck.config import Settings, load_settings
from ballotcheck.control_elements import ControlElements, check_domain, parse_control_elements
from ballotcheck.server_response import ControlResponse, ReferenceMetadata
from ballotcheck.verification import (
    VerificationController,
    VerificationMode,
    VerificationOutcome,
    VerificationState,
    verify_integrity,
    verify_presence,
)
from ballotcheck.version import __version__

__all__ = [
    "BallotMode",
    "ClassifiedBallot",
    "ControlElements",
    "ControlResponse",
    "DisplayLine",
    "DisplayModel",
    "LineState",
    "ReferenceMetadata",
    "Settings",
    "VerificationController",
    "VerificationMode",
    "VerificationOutcome",
    "VerificationState",
    "check_domain",
    "classify_ballot",
    "decrypt_ballot_paper",
    "encrypt_ballot_paper",
    "load_settings",
    "parse_control_elements",
    "render_ballot",
    "verify_integrity",
    "verify_presence",
    "__version__",
]
