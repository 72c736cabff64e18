"""Routes exposing each collaborator and rendering its failures."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi import Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from errchain.api.errors import FailureResponse
from errchain.api.errors import raise_for_result
from errchain.core.config import Settings
from errchain.core.config import get_settings
from errchain.db.base import get_db_session
from errchain.services.ages import parse_and_validate_age
from errchain.services.arithmetic import divide
from errchain.services.external import ExternalServiceClient
from errchain.services.users import get_user
from errchain.services.users import process_user
from errchain.services.users import validate_user_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["operations"])


class DivisionResponse(BaseModel):
    result: float


class AgeResponse(BaseModel):
    age: int


class UserResponse(BaseModel):
    user: str


class UserProfileResponse(BaseModel):
    summary: str


class UserData(BaseModel):
    """Unvalidated user fields; every field is checked independently."""

    name: str = ""
    email: str = ""
    age: str = ""


class UserValidationResponse(BaseModel):
    valid: bool


class ExternalCallResponse(BaseModel):
    response: str


def get_external_client(settings: Settings = Depends(get_settings)) -> ExternalServiceClient:
    """Build the external service client for a request."""
    return ExternalServiceClient.from_settings(settings)


@router.get("/divide", response_model=DivisionResponse)
def divide_endpoint(a: float, b: float) -> DivisionResponse:
    """Divide two numbers."""
    return DivisionResponse(result=raise_for_result(divide(a, b)))


@router.get("/ages/{age_text}", response_model=AgeResponse)
def parse_age_endpoint(age_text: str) -> AgeResponse:
    """Parse and range-check an age."""
    return AgeResponse(age=raise_for_result(parse_and_validate_age(age_text)))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user_endpoint(
    user_id: int,
    session: Session = Depends(get_db_session),
) -> UserResponse:
    """Look up a user by id."""
    return UserResponse(user=raise_for_result(get_user(session, user_id)))


@router.get("/users/{user_id}/profile", response_model=UserProfileResponse)
def get_user_profile_endpoint(
    user_id: int,
    age: str,
    session: Session = Depends(get_db_session),
) -> UserProfileResponse:
    """Look up a user and attach a parsed age."""
    return UserProfileResponse(summary=raise_for_result(process_user(session, user_id, age)))


@router.post("/users/validate", response_model=UserValidationResponse)
def validate_user_endpoint(payload: UserData) -> UserValidationResponse:
    """Validate user fields and report every failure together."""
    errors = validate_user_data(payload.name, payload.email, payload.age)
    if not errors.is_empty():
        logger.info("User data rejected with %d errors", len(errors))
        raise FailureResponse(
            *errors.to_list(),
            message=f"Validation failed with {len(errors)} error{'' if len(errors) == 1 else 's'}",
            accumulated=True,
        )
    return UserValidationResponse(valid=True)


@router.get("/external", response_model=ExternalCallResponse)
def call_external_endpoint(
    endpoint: str = "",
    client: ExternalServiceClient = Depends(get_external_client),
) -> ExternalCallResponse:
    """Proxy a call to the external service."""
    return ExternalCallResponse(response=raise_for_result(client.call(endpoint)))
