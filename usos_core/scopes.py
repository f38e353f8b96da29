"""Authorization scopes of the USOS API (see ``services/apiref/scopes``)."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

SCOPE_SEPARATOR = "|"


class Scope(str, Enum):
    """Named permission grants an access token can carry."""

    ADMINISTRATIVE_DOCUMENTS = "adm_documents"
    CARDS = "cards"
    CHANGE_ALL_PREFERENCES = "change_all_preferences"
    COURSE_TESTS = "crstests"
    DORMS = "dorm_admin"
    CHANGE_USER_ATTRIBUTES = "edit_user_attrs"
    EMAIL = "email"
    EVENTS = "events"
    GRADES = "grades"
    GRADES_WRITE = "grades_write"
    MAIL_CLIENT = "mailclient"
    MOBILE_NUMBERS = "mobile_numbers"
    OFFLINE_ACCESS = "offline_access"
    OTHER_EMAILS = "other_emails"
    PAYMENTS = "payments"
    PERSONAL = "personal"
    PHOTO = "photo"
    PLACEMENT_TESTS = "placement_tests"
    SESSION_DEBUGGING = "session_debugging_perms"
    CLEARANCE_SLIPS = "slips"
    CLEARANCE_SLIPS_ADMIN = "slips_admin"
    STAFF_PERSPECTIVE = "staff_perspective"
    STUDENT_EXAMS = "student_exams"
    STUDENT_EXAMS_EDIT = "student_exams_write"
    STUDIES = "studies"
    SURVEYS_FILLING = "surveys_filling"
    SURVEYS_REPORTS = "surveys_reports"
    THESES_PROTOCOLS_EDIT = "theses_protocols_write"

    def __str__(self) -> str:
        return self.value


def parse_scope(name: str) -> Scope | str:
    """Return the matching :class:`Scope`, or the raw name if it is not known."""
    try:
        return Scope(name)
    except ValueError:
        return name


class Scopes:
    """Immutable set of scopes, rendered as a ``|``-delimited string."""

    __slots__ = ("_scopes",)

    def __init__(self, scopes: Iterable[Scope | str] = ()) -> None:
        self._scopes = frozenset(parse_scope(str(scope)) for scope in scopes)

    def __iter__(self) -> Iterator[Scope | str]:
        return iter(sorted(self._scopes, key=str))

    def __len__(self) -> int:
        return len(self._scopes)

    def __contains__(self, item: object) -> bool:
        return item in self._scopes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scopes):
            return NotImplemented
        return self._scopes == other._scopes

    def __hash__(self) -> int:
        return hash(self._scopes)

    def __str__(self) -> str:
        return SCOPE_SEPARATOR.join(str(scope) for scope in self)

    def __repr__(self) -> str:
        return f"Scopes({str(self)!r})"
