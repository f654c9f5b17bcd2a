"""Human-readable case identifiers, e.g. PRR-2026-7KQ2. Not UUIDs; collisions are a statistical risk."""

import re
import secrets
from datetime import datetime
from typing import Callable

# Crockford base32: no I, L, O, U to avoid misreads over the phone.
CASE_ID_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
CASE_ID_SUFFIX_LENGTH = 4
DEFAULT_CASE_ID_PREFIX = "PRR"

CASE_ID_PATTERN = re.compile(
    rf"^[A-Z][A-Z0-9]*-\d{{4}}-[{CASE_ID_ALPHABET}]{{{CASE_ID_SUFFIX_LENGTH}}}$"
)

CaseIdGenerator = Callable[[datetime], str]


def generate_case_id(now: datetime, prefix: str = DEFAULT_CASE_ID_PREFIX) -> str:
    suffix = "".join(secrets.choice(CASE_ID_ALPHABET) for _ in range(CASE_ID_SUFFIX_LENGTH))
    return f"{prefix}-{now.year:04d}-{suffix}"


def make_case_id_generator(prefix: str = DEFAULT_CASE_ID_PREFIX) -> CaseIdGenerator:
    """Bind a prefix so the service only has to pass the clock reading."""

    def _generate(now: datetime) -> str:
        return generate_case_id(now, prefix)

    return _generate


def is_valid_case_id(case_id: str) -> bool:
    return bool(CASE_ID_PATTERN.match(case_id or ""))
