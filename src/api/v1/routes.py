"""
API v1 routes.

Defines REST endpoints for the account signup API.

Handlers are plain ``def`` so FastAPI runs them in its threadpool: password
hashing is CPU-bound and store calls are blocking.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.api.dependencies import get_registration_service
from src.api.models import (
    AccountResponse,
    EmailAvailabilityResponse,
    ErrorResponse,
    SignupRequest,
    SignupResponse,
)
from src.domain.exceptions import StoreUnavailable, ValidationFailed
from src.domain.ports import FailureReason
from src.domain.registration import RegistrationService

router = APIRouter(tags=["v1"])

_STATUS_BY_REASON = {
    FailureReason.VALIDATION_FAILED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FailureReason.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    FailureReason.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post(
    "/signup",
    response_model=SignupResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": SignupResponse, "description": "Email already in use"},
        422: {"model": SignupResponse, "description": "Validation error"},
        503: {"model": SignupResponse, "description": "Account store unavailable"},
    },
    summary="Sign up a new user",
    description="Create an account from an email address and a confirmed password.",
)
def signup(
    request_data: SignupRequest,
    response: Response,
    service: RegistrationService = Depends(get_registration_service),
) -> SignupResponse:
    """
    Register a new account.

    - **email**: Email address, matched case-sensitively
    - **password**: Password (minimum 8 characters)
    - **password_confirmation**: Must equal password

    Every outcome returns the same body shape; the status code tells them apart.
    """
    result = service.register(
        request_data.email, request_data.password, request_data.password_confirmation
    )

    if not result.success:
        response.status_code = _STATUS_BY_REASON[result.reason]
        return SignupResponse(success=False, message=result.message, field=result.field)

    account = result.account
    return SignupResponse(
        success=True,
        message=result.message,
        account=AccountResponse(
            id=account.id, email=account.email, created_at=account.created_at
        ),
    )


@router.get(
    "/email-availability",
    response_model=EmailAvailabilityResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Malformed email"},
        503: {"model": ErrorResponse, "description": "Account store unavailable"},
    },
    summary="Check email availability",
    description="Advisory pre-check for the signup form. "
    "A later signup may still fail with 409 if another request claims the email first.",
)
def email_availability(
    email: str = Query(..., description="Email address to check"),
    service: RegistrationService = Depends(get_registration_service),
) -> EmailAvailabilityResponse:
    """Report whether an email is already registered."""
    try:
        result = service.check_availability(email)
    except ValidationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message,
        ) from None
    except StoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to check email availability",
        ) from None
    return EmailAvailabilityResponse(available=result.available, message=result.message)
