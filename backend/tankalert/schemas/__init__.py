from tankalert.schemas.analytics import (
    StatusBand, Confidence, ReadingPoint, TankCalibration, TankSnapshot,
    StatusThresholds, ConsumptionEstimate, FillStatus,
)
from tankalert.schemas.tank import (
    FuelTankCreate, FuelTankResponse, DipReadingCreate, DipReadingResponse, ReadingImportResult,
)
from tankalert.schemas.association import MatchCandidate, NameMatch, MatchReport, AssociationSummary

__all__ = [
    "StatusBand", "Confidence", "ReadingPoint", "TankCalibration", "TankSnapshot",
    "StatusThresholds", "ConsumptionEstimate", "FillStatus",
    "FuelTankCreate", "FuelTankResponse", "DipReadingCreate", "DipReadingResponse", "ReadingImportResult",
    "MatchCandidate", "NameMatch", "MatchReport", "AssociationSummary",
]
