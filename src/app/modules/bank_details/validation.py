"""
Bank Details Validation

IBAN (ISO 13616, checked with ISO 7064 MOD 97-10), BIC (ISO 9362) and
account holder checks.
"""

import re

IBAN_MIN_LENGTH = 15
IBAN_MAX_LENGTH = 34
FRENCH_IBAN_LENGTH = 27

_IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")
_BIC_PATTERN = re.compile(r"^[A-Z]{4}[A-Z]{2}[A-Z0-9]{2}([A-Z0-9]{3})?$")
_HOLDER_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s'-]+$")
_WHITESPACE = re.compile(r"\s")


def normalize(value: str) -> str:
    """Strip all whitespace and upper-case."""
    return _WHITESPACE.sub("", value).upper()


def _iban_checksum_ok(iban: str) -> bool:
    rearranged = iban[4:] + iban[:4]
    # A=10 ... Z=35
    digits = "".join(str(int(char, 36)) for char in rearranged)
    return int(digits) % 97 == 1


def is_valid_iban(iban: str | None) -> bool:
    if not iban:
        return False

    clean = normalize(iban)

    if not IBAN_MIN_LENGTH <= len(clean) <= IBAN_MAX_LENGTH:
        return False

    if not _IBAN_PATTERN.match(clean):
        return False

    if clean.startswith("FR") and len(clean) != FRENCH_IBAN_LENGTH:
        return False

    return _iban_checksum_ok(clean)


def is_valid_bic(bic: str | None) -> bool:
    if not bic:
        return False

    clean = normalize(bic)
    if len(clean) not in (8, 11):
        return False

    return _BIC_PATTERN.match(clean) is not None


def format_iban(iban: str | None) -> str:
    """Group an IBAN in blocks of four: FR76 1234 5678 ..."""
    if not iban:
        return ""

    clean = normalize(iban)
    return " ".join(clean[i : i + 4] for i in range(0, len(clean), 4))


def is_valid_account_holder(name: str | None) -> bool:
    if not name or len(name.strip()) < 2:
        return False
    return _HOLDER_PATTERN.match(name.strip()) is not None
