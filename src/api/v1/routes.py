"""
API v1 routes.

Defines REST endpoints for signup, resending the verification email,
and redeeming a verification token. Mounted under /v1 plus the
configured signup route (default /v1/signup).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_signup_service
from src.api.models import ErrorResponse, ResendRequest, SignupRequest, UnavailableResponse
from src.domain.exceptions import ErrorCode, InfrastructureError, SignupError
from src.domain.ports import VerifyResult
from src.domain.signup import SignupService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

_UNAVAILABLE = {"model": UnavailableResponse, "description": "Persistence or mail delivery failed"}


def error_response(code: ErrorCode) -> JSONResponse:
    """403 response carrying a stable signup error code."""
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"error": {"code": code.value}},
    )


def service_unavailable(exc: InfrastructureError) -> HTTPException:
    logger.error("Signup infrastructure failure: %r", exc)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unavailable",
    )


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        403: {"model": ErrorResponse, "description": "Invalid input or name taken"},
        503: _UNAVAILABLE,
    },
    summary="Sign up a new account",
    description="Submit name, email, password and account type. "
    "A verification link is emailed to the address.",
)
def signup(
    request_data: SignupRequest,
    service: SignupService = Depends(get_signup_service),
) -> Response:
    """
    Create an unverified account and email its verification link.

    An email that is already registered gets the same 204 response;
    its owner is notified instead.
    """
    try:
        service.signup(
            request_data.name,
            request_data.email,
            request_data.password,
            request_data.account_type,
        )
    except SignupError as exc:
        return error_response(exc.code)
    except InfrastructureError as exc:
        raise service_unavailable(exc) from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/resend-verification",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        403: {"model": ErrorResponse, "description": "Invalid email, unknown account or already verified"},
        503: _UNAVAILABLE,
    },
    summary="Resend the verification email",
    description="Issue a new verification link for an unverified account. "
    "Any previously emailed link stops working.",
)
def resend_verification(
    request_data: ResendRequest,
    service: SignupService = Depends(get_signup_service),
) -> Response:
    try:
        service.resend_verification(request_data.email)
    except SignupError as exc:
        return error_response(exc.code)
    except InfrastructureError as exc:
        raise service_unavailable(exc) from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        403: {"model": ErrorResponse, "description": "Verification link expired"},
        404: {"description": "Unknown or malformed token"},
        503: _UNAVAILABLE,
    },
    summary="Verify email address",
    description="Redeem the token from a verification link.",
)
def verify(
    token: str,
    service: SignupService = Depends(get_signup_service),
) -> Response:
    """
    Redeem a verification token.

    Malformed and unknown tokens both return a plain 404 so the
    response does not reveal which tokens ever existed.
    """
    try:
        result = service.verify(token)
    except InfrastructureError as exc:
        raise service_unavailable(exc) from None

    if result == VerifyResult.VERIFIED:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    if result == VerifyResult.EXPIRED:
        return error_response(ErrorCode.LINK_EXPIRED)
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
