"""
Temporary password generation and password strength rules.
"""
import re
import secrets
from typing import List

from workforce.exceptions import ValidationError

# Characters that are easy to misread when copied from an email are left out
UPPERCASE = "ABCDEFGHJKLMNPQRSTUVWXYZ"
LOWERCASE = "abcdefghijkmnpqrstuvwxyz"
DIGITS = "23456789"
SYMBOLS = "!@#$%&*"


def generate_secure_password(length: int = 12) -> str:
    """
    Generate a random password with at least one upper case letter,
    lower case letter, digit and symbol.
    """
    if length < 8:
        raise ValueError("Password length must be at least 8")
    pools = [UPPERCASE, LOWERCASE, DIGITS, SYMBOLS]
    chars = [secrets.choice(pool) for pool in pools]
    alphabet = "".join(pools)
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def password_problems(password: str) -> List[str]:
    """Human readable reasons a password is too weak."""
    problems = []
    if len(password or "") < 8:
        problems.append("Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password or ""):
        problems.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password or ""):
        problems.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password or ""):
        problems.append("Password must contain at least one number")
    return problems


def validate_password_strength(password: str) -> str:
    """Raise ValidationError with the first problem found."""
    problems = password_problems(password)
    if problems:
        raise ValidationError(problems[0])
    return password
