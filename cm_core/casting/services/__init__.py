from cm_core.casting.services.actors import CsvImportReport, ExternalActorService, ProjectAssociator
from cm_core.casting.services.codes import CastingCodeService, CastingCodeUpdate
from cm_core.casting.services.conversion import AccountConversionService, ConversionReport
from cm_core.casting.services.intake import SubmissionInput, SubmissionIntakeService, SubmissionOutcome
from cm_core.casting.services.review import SubmissionReviewService

__all__ = [
    "AccountConversionService",
    "CastingCodeService",
    "CastingCodeUpdate",
    "ConversionReport",
    "CsvImportReport",
    "ExternalActorService",
    "ProjectAssociator",
    "SubmissionInput",
    "SubmissionIntakeService",
    "SubmissionOutcome",
    "SubmissionReviewService",
]
