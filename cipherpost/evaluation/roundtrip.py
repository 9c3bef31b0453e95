"""Round-trip verification of every reversible stage.

Generates seeded random payloads (lengths 0 and 1 always included) and
checks that each stage inverts exactly:

- permutation:   unshuffle(shuffle(b)) == b
- substitution:  inverse(M, transform(M, b)) == b for both matrices
- text:          encode_text(encode_text(s)) == s
- pipeline:      decode(encode(b)) == b

Payload generation is seeded; the shuffle inside each stage still draws
from the OS CSPRNG.
"""
from __future__ import annotations

import random
import string
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..cipher.permutation import shuffle, unshuffle
from ..cipher.pipeline import decode, encode
from ..cipher.substitution import (
    ASCENDING,
    DESCENDING,
    inverse_transform_buffer,
    transform_buffer,
)
from ..cipher.text import decode_text, encode_text

STAGES = ("permutation", "substitution", "text", "pipeline")


@dataclass
class RoundtripFailure:
    """Details of a single failed vector."""
    vector_index: int
    input_hex: str
    output_hex: str
    error: Optional[str]


@dataclass
class RoundtripResult:
    """Aggregate result for one stage."""
    stage: str
    total_vectors: int
    passed: int
    failed: int
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] {self.stage}: "
            f"{self.passed}/{self.total_vectors} vectors passed "
            f"({self.elapsed_seconds:.2f}s)"
        )


def _check_permutation(data: bytes) -> bytes:
    shuffled, table = shuffle(data)
    return unshuffle(shuffled, table)


def _check_substitution(data: bytes) -> bytes:
    if len(data) % 2:
        data = data[:-1]
    for matrix in (ASCENDING, DESCENDING):
        out = inverse_transform_buffer(matrix, transform_buffer(matrix, data))
        if out != data:
            return out
    return data


def _check_text(data: bytes) -> bytes:
    s = data.decode("latin-1")
    decoded = decode_text(encode_text(s))
    if decoded != s:
        return decoded.encode("latin-1")
    return encode_text(encode_text(s)).encode("latin-1")


def _check_pipeline(data: bytes) -> bytes:
    return decode(encode(data)) or b""


_CHECKS: Dict[str, Callable[[bytes], bytes]] = {
    "permutation": _check_permutation,
    "substitution": _check_substitution,
    "text": _check_text,
    "pipeline": _check_pipeline,
}


def _payload(rng: random.Random, index: int, max_len: int, stage: str) -> bytes:
    n = index if index < 2 else rng.randrange(0, max_len + 1)
    if stage == "text":
        # printable ASCII plus a few latin-1 letters that must pass through untouched
        alphabet = string.printable + "\u00e9\u00df\u00c6"
        return "".join(rng.choice(alphabet) for _ in range(n)).encode("latin-1")
    return bytes(rng.randrange(0, 256) for _ in range(n))


def run_roundtrip_tests(
    stage: str,
    *,
    num_vectors: int = 200,
    max_len: int = 512,
    seed: int = 1337,
    max_failures_recorded: int = 10,
) -> RoundtripResult:
    """Run ``num_vectors`` random payloads through one stage and its inverse."""
    if stage not in _CHECKS:
        raise ValueError(f"Unknown stage {stage!r}; expected one of {STAGES}")
    check = _CHECKS[stage]

    rng = random.Random(seed)
    passed = 0
    failed = 0
    failures: List[RoundtripFailure] = []

    start = time.perf_counter()

    for i in range(num_vectors):
        data = _payload(rng, i, max_len, stage)
        expected = data[:-1] if stage == "substitution" and len(data) % 2 else data
        try:
            out = check(data)
            if out == expected:
                passed += 1
            else:
                failed += 1
                if len(failures) < max_failures_recorded:
                    failures.append(RoundtripFailure(i, data.hex(), out.hex(), None))
        except Exception as exc:
            failed += 1
            if len(failures) < max_failures_recorded:
                failures.append(RoundtripFailure(i, data.hex(), "<error>", str(exc)))

    elapsed = time.perf_counter() - start

    return RoundtripResult(
        stage=stage,
        total_vectors=num_vectors,
        passed=passed,
        failed=failed,
        failures=failures,
        elapsed_seconds=round(elapsed, 4),
        seed=seed,
    )


def run_all_stages(
    *,
    num_vectors: int = 200,
    max_len: int = 512,
    seed: int = 1337,
) -> List[RoundtripResult]:
    return [
        run_roundtrip_tests(stage, num_vectors=num_vectors, max_len=max_len, seed=seed)
        for stage in STAGES
    ]
