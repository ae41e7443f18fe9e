import hashlib
import re


def clean_text(text: str) -> str:
    return ' '.join(text.split())


def slugify(text: str) -> str:
    """
    Lossy, deterministic slug: runs of characters outside [A-Za-z0-9-] become
    one hyphen, leading/trailing hyphens are dropped, result is lowercased.
    "Tech Crunch" -> "tech-crunch"
    """
    return re.sub(r'[^A-Za-z0-9-]+', '-', text or '').strip('-').lower()


def md5_hex(value: str) -> str:
    return hashlib.md5((value or '').encode('utf-8')).hexdigest()
