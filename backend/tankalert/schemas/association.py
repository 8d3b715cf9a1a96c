from pydantic import BaseModel
from typing import Optional


class MatchCandidate(BaseModel):
    """A record offered to the matcher: an identifier and the name to compare."""
    key: str
    name: str

    class Config:
        frozen = True


class NameMatch(BaseModel):
    source_key: str
    source_name: str
    target_key: Optional[str] = None
    target_name: Optional[str] = None
    confidence: float = 0.0
    alternatives: list[tuple[str, float]] = []

    class Config:
        frozen = True


class MatchReport(BaseModel):
    """Every source lands in exactly one of the three buckets."""
    matches: list[NameMatch] = []
    review: list[NameMatch] = []
    unmatched: list[NameMatch] = []

    class Config:
        frozen = True


class AssociationSummary(BaseModel):
    events_examined: int
    drivers_associated: int
    vehicles_associated: int
    driver_report: MatchReport
    unmatched_registrations: list[str] = []
    ambiguous_registrations: list[str] = []
