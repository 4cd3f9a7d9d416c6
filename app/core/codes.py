# app/core/codes.py
import secrets
import string
import time

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length: int = 8) -> str:
    """
    Uniform random code over A-Z0-9.

    Example: "K4T2M9QX" (36^8 ≈ 2.8e12 combinations at the default length).
    """
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def now_millis() -> int:
    return int(time.time() * 1000)


def generate_community_id() -> str:
    """Time-based prefix + 6-char random suffix, e.g. community_1718000000000_AB12CD."""
    return f"community_{now_millis()}_{generate_code(6)}"


def generate_announcement_id() -> str:
    return f"announcement_{now_millis()}_{generate_code(4)}"
