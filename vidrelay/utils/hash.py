import hashlib


def hash_stable(data: str, length: int = 16) -> str:
    """Stable short SHA256 digest, used for fallback names"""
    return hashlib.sha256(data.encode("utf-8")).hexdigest()[:length]
