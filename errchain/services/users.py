"""User lookup, processing and validation collaborators."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errchain.core.accumulator import ErrorList
from errchain.core.errors import DatabaseError
from errchain.core.errors import PlainError
from errchain.core.errors import ValidationError
from errchain.core.errors import wrap
from errchain.core.result import Err
from errchain.core.result import Ok
from errchain.core.result import Result
from errchain.core.sentinels import ERR_INVALID_USER_ID
from errchain.core.sentinels import ERR_USER_NOT_FOUND
from errchain.db.repository.users import get_user_by_id
from errchain.services.ages import parse_and_validate_age

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


def _lookup_failure(cause: PlainError) -> Err:
    return Err(DatabaseError(operation="SELECT", table=USERS_TABLE, cause=cause))


def get_user(session: Session, user_id: int) -> Result[str]:
    """Return the name of user ``user_id``."""
    if user_id <= 0:
        return _lookup_failure(ERR_INVALID_USER_ID)

    try:
        user = get_user_by_id(session, user_id)
    except SQLAlchemyError as exc:
        logger.warning("User lookup failed for user_id=%s", user_id, exc_info=True)
        return _lookup_failure(PlainError(message=str(exc) or type(exc).__name__))

    if user is None:
        return _lookup_failure(ERR_USER_NOT_FOUND)
    return Ok(user.name)


def process_user(session: Session, user_id: int, age_text: str) -> Result[str]:
    """Look up a user and parse their age, stopping at the first failure."""
    user = get_user(session, user_id)
    if isinstance(user, Err):
        return Err(wrap("failed to get user", user.error))

    age = parse_and_validate_age(age_text)
    if isinstance(age, Err):
        return Err(wrap("failed to process age", age.error))

    return Ok(f"User: {user.value}, Age: {age.value}")


def validate_user_data(name: str, email: str, age_text: str) -> ErrorList:
    """Check every field and collect all failures, at most one per field."""
    errors = ErrorList()

    if not name:
        errors.add(ValidationError(field="name", message="is required"))

    if not email:
        errors.add(ValidationError(field="email", message="is required"))
    elif "@" not in email:
        errors.add(ValidationError(field="email", message="invalid format"))

    if not age_text:
        errors.add(ValidationError(field="age", message="is required"))
    else:
        age = parse_and_validate_age(age_text)
        if isinstance(age, Err):
            errors.add(age.error)

    return errors
