from __future__ import annotations

import hashlib
import secrets

CODE_LENGTH = 6


def generate_login_code() -> str:
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def hash_login_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()
