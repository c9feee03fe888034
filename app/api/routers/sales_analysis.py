"""
app/api/routers/sales_analysis.py

Sales analysis HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from app.api.dependencies import get_sales_upload
from app.domain.errors import EmptyDatasetError, InvalidDatasetError, UnsupportedUploadError
from app.mappers.sales_report_mapper import to_sales_analysis_response
from app.schemas.sales_analysis import SalesAnalysisResponse
from app.services.sales_analysis_service import SalesAnalysisService, get_sales_analysis_service

router = APIRouter(tags=["analysis"])


@router.post("/analyze-sales", response_model=SalesAnalysisResponse)
def analyze_sales(
    file: UploadFile = Depends(get_sales_upload),
    include_weather: bool = Query(default=False, description="Correlate revenue with daily weather"),
    analysis_service: SalesAnalysisService = Depends(get_sales_analysis_service),
) -> SalesAnalysisResponse:
    """
    Parse, validate and analyze one uploaded sales file.
    """

    try:
        report = analysis_service.analyze_upload(
            file.file.read(),
            include_weather=include_weather,
        )
    except UnsupportedUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except (EmptyDatasetError, InvalidDatasetError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.to_dict(),
        ) from exc
    finally:
        file.file.close()

    return to_sales_analysis_response(report)
