"""Round-trip verification of the reversible stages."""

from .roundtrip import RoundtripFailure, RoundtripResult, STAGES, run_all_stages, run_roundtrip_tests

__all__ = [
    "RoundtripFailure",
    "RoundtripResult",
    "STAGES",
    "run_all_stages",
    "run_roundtrip_tests",
]
