"""Immutable error values with wrapping, chain inspection, sentinels and accumulation."""

from errchain.core.accumulator import ErrorList
from errchain.core.chain import api_error_code
from errchain.core.chain import find
from errchain.core.chain import is_database_error
from errchain.core.chain import is_validation_error
from errchain.core.chain import iter_chain
from errchain.core.chain import matches
from errchain.core.chain import root_cause
from errchain.core.chain import unwrap
from errchain.core.errors import APIError
from errchain.core.errors import ChainError
from errchain.core.errors import DatabaseError
from errchain.core.errors import PlainError
from errchain.core.errors import ValidationError
from errchain.core.errors import WrappedError
from errchain.core.errors import wrap
from errchain.core.result import Err
from errchain.core.result import Ok
from errchain.core.result import Result
from errchain.core.sentinels import SentinelRegistry
from errchain.core.sentinels import sentinels

__all__ = [
    "APIError",
    "ChainError",
    "DatabaseError",
    "Err",
    "ErrorList",
    "Ok",
    "PlainError",
    "Result",
    "SentinelRegistry",
    "ValidationError",
    "WrappedError",
    "api_error_code",
    "find",
    "is_database_error",
    "is_validation_error",
    "iter_chain",
    "matches",
    "root_cause",
    "sentinels",
    "unwrap",
    "wrap",
]
