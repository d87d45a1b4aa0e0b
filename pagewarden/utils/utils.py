import re
import unicodedata

NON_PRINTABLE_ASCII_PATTERN = re.compile(r"[^\x20-\x7E]")


def normalize_string(text: str) -> str:
    normalized = unicodedata.normalize("NFD", text).strip().lower()
    normalized = NON_PRINTABLE_ASCII_PATTERN.sub("", normalized)
    return re.sub(r"[?!]", "", normalized)
