"""Built-in secret signatures.

A single registry serves both detection modes. Strict mode re-checks every
match against its validator and drops low-entropy matches; the fast mode used
by commit hooks trusts the rules alone.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Callable

from proteccapi.config import DEFAULT_ENTROPY_THRESHOLD
from proteccapi.scanner.base import Signature, SignatureKind


def _exact(pattern: str) -> Callable[[str], bool]:
    compiled = re.compile(pattern)
    return lambda key: compiled.fullmatch(key) is not None


SIGNATURES: tuple[Signature, ...] = (
    Signature(
        kind=SignatureKind.AWS_ACCESS_KEY,
        rule=re.compile(r"AKIA[0-9A-Z]{16}"),
        validator=_exact(r"AKIA[0-9A-Z]{16}"),
        env_key="AWS_ACCESS_KEY_ID",
    ),
    # The 40-char body alone matches almost any base64 run, so the rule is
    # anchored on an AWS secret label (AWS_SECRET, aws_secret_access_key,
    # secretAccessKey, ...) followed by "=" or ":".
    Signature(
        kind=SignatureKind.AWS_SECRET_KEY,
        rule=re.compile(
            r"(?i)(?:aws[_-]?secret(?:[_-]?access)?(?:[_-]?key)?|secret[_-]?access[_-]?key)"
            r"[\"']?\s*[=:]\s*[\"']?([A-Za-z0-9/+=]{40})(?![A-Za-z0-9/+=])"
        ),
        validator=_exact(r"[A-Za-z0-9/+=]{40}"),
        env_key="AWS_SECRET_ACCESS_KEY",
    ),
    Signature(
        kind=SignatureKind.GITHUB_TOKEN,
        rule=re.compile(r"gh[oprs]_[A-Za-z0-9_]{36}"),
        validator=_exact(r"gh[oprs]_[A-Za-z0-9_]{36}"),
        env_key="GITHUB_TOKEN",
    ),
    Signature(
        kind=SignatureKind.OPENAI_API_KEY,
        rule=re.compile(r"sk-(?:live|test)-[A-Za-z0-9]{32}"),
        validator=_exact(r"sk-(?:live|test)-[A-Za-z0-9]{32}"),
        env_key="OPENAI_API_KEY",
    ),
    Signature(
        kind=SignatureKind.GOOGLE_CLOUD_API_KEY,
        rule=re.compile(r"AIza[0-9A-Za-z\-_]{35}"),
        validator=_exact(r"AIza[0-9A-Za-z\-_]{35}"),
        env_key="GOOGLE_CLOUD_API_KEY",
    ),
    Signature(
        kind=SignatureKind.STRIPE_API_KEY,
        rule=re.compile(r"(?:sk_live|pk_live)_[A-Za-z0-9]{24}"),
        validator=_exact(r"(?:sk_live|pk_live)_[A-Za-z0-9]{24}"),
        env_key="STRIPE_API_KEY",
    ),
)


def get_signatures(strict: bool = True) -> tuple[Signature, ...]:
    """Return the active signature registry.

    In fast mode the validators are stripped so that callers can apply every
    signature uniformly.

    Args:
        strict: Keep validators when True.

    Returns:
        Tuple of signatures in declaration order.
    """
    if strict:
        return SIGNATURES
    return tuple(
        Signature(kind=s.kind, rule=s.rule, validator=None, env_key=s.env_key)
        for s in SIGNATURES
    )


def find_signature(name: str, signatures: tuple[Signature, ...] = SIGNATURES) -> Signature | None:
    """Look up a signature by its display name."""
    for signature in signatures:
        if signature.name == name:
            return signature
    return None


def redact_secret(secret: str, visible_chars: int = 4) -> str:
    """Mask all but the edges of a secret, e.g. ``AKIA************MNOP``.

    Values too short to keep both edges hidden are masked entirely.
    """
    hidden = len(secret) - 2 * visible_chars
    if hidden <= 0:
        return "*" * len(secret)
    return secret[:visible_chars] + "*" * hidden + secret[-visible_chars:]


def calculate_entropy(text: str) -> float:
    """Shannon entropy of text in bits per character (0.0 for empty text)."""
    if not text:
        return 0.0
    length = len(text)
    return -sum(
        (count / length) * math.log2(count / length) for count in Counter(text).values()
    )


def is_high_confidence(candidate: str, threshold: float = DEFAULT_ENTROPY_THRESHOLD) -> bool:
    """Return True if the candidate's entropy exceeds the threshold."""
    return calculate_entropy(candidate) > threshold
