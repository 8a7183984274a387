"""Infrastructure import API routes."""

from fastapi import APIRouter, Depends, HTTPException

from instanti8.importer.parsers.detection import ImportFormatError
from instanti8.importer.schemas import (
    DetectionResult,
    DetectRequest,
    ImportConfiguration,
    ImportResult,
)
from instanti8.importer.service import InfrastructureImportService

router = APIRouter(prefix="/api/infrastructure", tags=["infrastructure"])


def get_import_service() -> InfrastructureImportService:
    """Dependency placeholder, overridden at startup."""
    raise RuntimeError("InfrastructureImportService not configured")


@router.post("/import")
async def import_infrastructure(
    request: ImportConfiguration,
    service: InfrastructureImportService = Depends(get_import_service),
) -> ImportResult:
    """Parse, validate and optionally convert or plan an IaC source."""
    return await service.import_configuration(request)


@router.post("/detect")
async def detect_infrastructure(
    request: DetectRequest,
    service: InfrastructureImportService = Depends(get_import_service),
) -> DetectionResult:
    try:
        return await service.detect(request.source)
    except ImportFormatError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
