"""
Data models for the roster, the candidate list and the shared app state.

Records arrive from the Apps Script endpoint with Spanish wire keys
(carnet, nombre, ...). They are parsed into frozen dataclasses here and
written back with the same keys when cached.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from ballotsync.errors import ValidationFailure


# Candidate id -> accumulated vote count
VoteTally = dict[int, int]


def _require(payload: Any, keys: tuple[str, ...], kind: str) -> dict:
    if not isinstance(payload, dict):
        raise ValidationFailure(f"{kind} record must be an object, got {type(payload).__name__}")
    missing = [key for key in keys if key not in payload]
    if missing:
        raise ValidationFailure(f"{kind} record missing keys: {', '.join(missing)}")
    return payload


def _as_bool(value: Any) -> bool:
    # Sheets exports checkboxes as booleans, hand-typed cells as text
    if isinstance(value, str):
        return value.strip().lower() in ("true", "si", "sí", "1", "yes")
    return bool(value)


def _as_int(value: Any) -> int:
    """Integral id from a number or numeric text; 3, 3.0 and "3" are accepted, 1.5 is not."""
    if isinstance(value, bool):
        raise ValidationFailure(f"Candidate id is not numeric: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationFailure(f"Candidate id is not an integer: {value!r}")
        return int(value)
    if isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            raise ValidationFailure(f"Candidate id is not numeric: {value!r}")
        if not number.is_finite() or number != number.to_integral_value():
            raise ValidationFailure(f"Candidate id is not an integer: {value!r}")
        return int(number)
    raise ValidationFailure(f"Candidate id is not numeric: {value!r}")


@dataclass(frozen=True)
class Student:
    """
    A student on the voting roster.

    Attributes:
        identifier: Student card number (carnet), unique
        name: Full name
        course: Course / section, e.g. "11-A"
        eligible: Whether the student may vote
    """
    identifier: str
    name: str
    course: str
    eligible: bool = True

    WIRE_KEYS = ("carnet", "nombre", "curso", "habilitado")

    @classmethod
    def from_payload(cls, payload: Any) -> "Student":
        """Build a Student from an endpoint/cache record."""
        data = _require(payload, cls.WIRE_KEYS, "Student")
        return cls(
            identifier=str(data["carnet"]),
            name=str(data["nombre"]),
            course=str(data["curso"]),
            eligible=_as_bool(data["habilitado"]),
        )

    def to_payload(self) -> dict:
        return {
            "carnet": self.identifier,
            "nombre": self.name,
            "curso": self.course,
            "habilitado": self.eligible,
        }


@dataclass(frozen=True)
class Candidate:
    """
    A candidate on the ballot.

    Attributes:
        identifier: Numeric candidate id, unique
        name: Full name
        short_code: Initials shown on the ballot (sigla)
        photo_reference: Photo URL
        platform_statement: Campaign proposals
    """
    identifier: int
    name: str
    short_code: str
    photo_reference: str = ""
    platform_statement: str = ""

    WIRE_KEYS = ("id", "nombre", "sigla")

    @classmethod
    def from_payload(cls, payload: Any) -> "Candidate":
        """Build a Candidate from an endpoint/cache record."""
        data = _require(payload, cls.WIRE_KEYS, "Candidate")
        return cls(
            identifier=_as_int(data["id"]),
            name=str(data["nombre"]),
            short_code=str(data["sigla"]),
            photo_reference=str(data.get("foto") or ""),
            platform_statement=str(data.get("propuestas") or ""),
        )

    def to_payload(self) -> dict:
        return {
            "id": self.identifier,
            "nombre": self.name,
            "sigla": self.short_code,
            "foto": self.photo_reference,
            "propuestas": self.platform_statement,
        }


def parse_students(payload: Any) -> list[Student]:
    """Parse a list of student records, raising ValidationFailure on bad shape."""
    if not isinstance(payload, list):
        raise ValidationFailure("Students payload must be a list")
    return [Student.from_payload(item) for item in payload]


def parse_candidates(payload: Any) -> list[Candidate]:
    """Parse a list of candidate records, raising ValidationFailure on bad shape."""
    if not isinstance(payload, list):
        raise ValidationFailure("Candidates payload must be a list")
    return [Candidate.from_payload(item) for item in payload]


def rebuild_tally(previous: VoteTally, candidates: list[Candidate]) -> VoteTally:
    """
    Rebuild the vote tally for a new candidate list.

    Counts of retained candidates are carried over unchanged, new
    candidates start at zero and removed candidates are dropped.
    """
    return {c.identifier: previous.get(c.identifier, 0) for c in candidates}


@dataclass
class AppState:
    """
    Shared application state owned by the host application.

    The reconciler rewrites all three fields after a successful sync.
    """
    students: list[Student] = field(default_factory=list)
    candidates: list[Candidate] = field(default_factory=list)
    votes: VoteTally = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "students": [s.to_payload() for s in self.students],
            "candidates": [c.to_payload() for c in self.candidates],
            "votes": dict(self.votes),
        }
