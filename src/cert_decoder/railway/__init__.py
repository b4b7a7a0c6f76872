"""
Railway-Oriented Programming helpers for the decode boundary.

    from cert_decoder.railway import Result

    result = (
        Result.from_computation(lambda: pem_to_der(text))
        .flat_map(lambda der: Result.from_computation(lambda: decode_der(der)))
        .map(lambda record: record.subject_common_name)
    )
"""

from cert_decoder.railway.assertions import ResultAssertions
from cert_decoder.railway.failure import FailureDescription
from cert_decoder.railway.result import Failure, Result, Success

__all__ = [
    "Result",
    "Success",
    "Failure",
    "FailureDescription",
    "ResultAssertions",
]
