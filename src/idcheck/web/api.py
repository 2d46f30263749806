"""
FastAPI web application for the idcheck validation service.

This module provides REST API endpoints for:
- Validating one value against a registered rule
- Listing the registered rules
- Converting locale-formatted numbers
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, status
from pydantic import BaseModel

from .. import __version__, default_dispatcher
from ..currency import convert_locale_number
from ..engine.dispatcher import ValidationDispatcher
from ..exceptions import LocaleNumberError
from ..models import Domain, Field, Jurisdiction, Outcome, ValidationRequest

logger = logging.getLogger(__name__)

# Pydantic models for API requests/responses
class ValidateRequest(BaseModel):
    """Request model for a single validation."""
    jurisdiction: Jurisdiction
    domain: Domain
    field: Field
    value: str
    region: Optional[str] = None

class ValidateResponse(BaseModel):
    """Response model for a single validation."""
    valid: bool
    outcome: Outcome
    normalized: Optional[str] = None

class RuleInfo(BaseModel):
    key: str
    normalization: str
    checksum: str
    regions: List[str] = []

class ConvertRequest(BaseModel):
    value: str
    jurisdiction: Jurisdiction = Jurisdiction.BR

class ConvertResponse(BaseModel):
    value: float

# FastAPI app configuration
app = FastAPI(
    title="idcheck API",
    description="Structural and check-digit validation of identification numbers",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)


# Dependency so tests can swap in a dispatcher over their own registry
def get_dispatcher() -> ValidationDispatcher:
    return default_dispatcher()


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "idcheck API - ID number validation",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "idcheck-api"}


@app.post("/validate", response_model=ValidateResponse)
def validate(body: ValidateRequest, dispatcher: ValidationDispatcher = Depends(get_dispatcher)):
    """
    Validate one value.

    Invalid values are not errors: the response is 200 with ``valid: false`` and
    the failure kind in ``outcome``.
    """
    request = ValidationRequest(
        raw_value=body.value,
        jurisdiction=body.jurisdiction,
        domain=body.domain,
        field=body.field,
        region=body.region,
    )
    outcome = dispatcher.validate(request)
    return ValidateResponse(valid=outcome.valid, outcome=outcome.kind, normalized=outcome.normalized)


@app.get("/rules", response_model=List[RuleInfo])
def list_rules(
    jurisdiction: Optional[Jurisdiction] = None,
    dispatcher: ValidationDispatcher = Depends(get_dispatcher),
):
    """List registered rules, optionally for one jurisdiction."""
    registry = dispatcher.registry
    return [
        RuleInfo(
            key=str(rule.key),
            normalization=rule.normalization.value,
            checksum=rule.checksum.kind,
            regions=registry.regions(rule.key),
        )
        for rule in registry.rules(jurisdiction)
    ]


@app.post("/convert", response_model=ConvertResponse)
async def convert(body: ConvertRequest):
    """Convert a locale-formatted number ("1.234,56") to a float."""
    try:
        return ConvertResponse(value=convert_locale_number(body.value, body.jurisdiction))
    except LocaleNumberError as e:
        logger.info(f"Rejected conversion: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
