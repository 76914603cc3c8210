# Overview: Password strength heuristics, reuse detection, and generation for the vault.

from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass


COMMON_PASSWORDS = frozenset({
    "password", "123456", "password123", "admin", "qwerty",
    "letmein", "welcome", "monkey", "1234567890", "abc123",
})

# Scores below this count as weak in vault statistics
WEAK_SCORE_THRESHOLD = 2

GUESSES_PER_SECOND = 1_000_000_000

_REPEATED = re.compile(r"(.)\1{2,}")
_COMMON_PATTERN = re.compile(r"123|abc|qwe|password|admin", re.IGNORECASE)

SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
SIMILAR = "il1Lo0O"
AMBIGUOUS = "{}[]()/\\'\"`~,;.<>"


@dataclass(frozen=True)
class StrengthReport:
    score: int
    feedback: list[str]
    crack_time: str
    has_uppercase: bool
    has_lowercase: bool
    has_numbers: bool
    has_symbols: bool
    length: int

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "feedback": list(self.feedback),
            "crackTime": self.crack_time,
            "hasUppercase": self.has_uppercase,
            "hasLowercase": self.has_lowercase,
            "hasNumbers": self.has_numbers,
            "hasSymbols": self.has_symbols,
            "length": self.length,
        }


def estimate_crack_time(combinations: float) -> str:
    """Average time to exhaust half the keyspace at GUESSES_PER_SECOND."""
    seconds = combinations / (2 * GUESSES_PER_SECOND)
    if seconds < 60:
        return "Less than a minute"
    if seconds < 3600:
        return f"{round(seconds / 60)} minutes"
    if seconds < 86400:
        return f"{round(seconds / 3600)} hours"
    if seconds < 31536000:
        return f"{round(seconds / 86400)} days"
    if seconds < 31536000000:
        return f"{round(seconds / 31536000)} years"
    return "Centuries"


def analyze(password: str) -> StrengthReport:
    """
    Score a password 0-4.

    Length contributes 0-3, each character class present adds 1,
    a run of 3+ identical characters costs 1 and a common pattern costs 2.
    """
    feedback: list[str] = []
    score = 0

    has_upper = bool(re.search(r"[A-Z]", password))
    has_lower = bool(re.search(r"[a-z]", password))
    has_digit = bool(re.search(r"\d", password))
    has_symbol = bool(re.search(r"[^A-Za-z0-9]", password))
    length = len(password)

    if length < 8:
        feedback.append("Use at least 8 characters")
    elif length < 12:
        score += 1
        feedback.append("Consider using 12+ characters for better security")
    elif length < 16:
        score += 2
    else:
        score += 3

    score += sum((has_upper, has_lower, has_digit, has_symbol))

    if not has_upper:
        feedback.append("Add uppercase letters")
    if not has_lower:
        feedback.append("Add lowercase letters")
    if not has_digit:
        feedback.append("Add numbers")
    if not has_symbol:
        feedback.append("Add symbols")

    if _REPEATED.search(password):
        feedback.append("Avoid repeated characters")
        score = max(0, score - 1)

    if _COMMON_PATTERN.search(password):
        feedback.append("Avoid common patterns")
        score = max(0, score - 2)

    charset = (26 if has_upper else 0) + (26 if has_lower else 0) + (10 if has_digit else 0) + (32 if has_symbol else 0)
    try:
        combinations = float(charset) ** length
    except OverflowError:
        combinations = float("inf")

    return StrengthReport(
        score=min(4, max(0, score)),
        feedback=feedback or ["Strong password!"],
        crack_time=estimate_crack_time(combinations),
        has_uppercase=has_upper,
        has_lowercase=has_lower,
        has_numbers=has_digit,
        has_symbols=has_symbol,
        length=length,
    )


def is_common(password: str) -> bool:
    return password.lower() in COMMON_PASSWORDS


def reused_flags(passwords: list[str]) -> list[bool]:
    """For each password, whether the same value appears elsewhere in the list."""
    counts: dict[str, int] = {}
    for value in passwords:
        counts[value] = counts.get(value, 0) + 1
    return [counts[value] > 1 for value in passwords]


def generate(
    length: int = 16,
    *,
    uppercase: bool = True,
    lowercase: bool = True,
    numbers: bool = True,
    symbols: bool = True,
    exclude_similar: bool = False,
    exclude_ambiguous: bool = False,
) -> str:
    """Random password from the selected classes using a CSPRNG."""
    charset = ""
    if uppercase:
        charset += string.ascii_uppercase
    if lowercase:
        charset += string.ascii_lowercase
    if numbers:
        charset += string.digits
    if symbols:
        charset += SYMBOLS
    if exclude_similar:
        charset = "".join(c for c in charset if c not in SIMILAR)
    if exclude_ambiguous:
        charset = "".join(c for c in charset if c not in AMBIGUOUS)
    if not charset:
        raise ValueError("No character types selected")
    return "".join(secrets.choice(charset) for _ in range(length))
