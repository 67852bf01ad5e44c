"""Geocoding endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query, status

from ...errors import GeocodingError
from ...services.geocoding import geocode_address

router = APIRouter(tags=["geocoding"])


@router.get("/geocode", status_code=status.HTTP_200_OK)
def geocode(address: str = Query(..., description="Free-text address to resolve")) -> dict:
    try:
        suggestions = geocode_address(address)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except GeocodingError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {"suggestions": [asdict(suggestion) for suggestion in suggestions]}
