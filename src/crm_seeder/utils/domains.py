"""
Domain and email helpers.

Company names are turned into internet domains, and emails are built from a
person's name and such a domain. The same helpers read domains back out of
emails and website URLs when matching CRM records.
"""

from __future__ import annotations

import random
import re
import string
from typing import Optional
from urllib.parse import urlparse

TOP_LEVEL_DOMAINS = ("com", "io", "net", "co", "org", "tech")

CORPORATE_SUFFIXES = frozenset(
    {
        "inc",
        "llc",
        "ltd",
        "corp",
        "corporation",
        "co",
        "company",
        "group",
        "holdings",
        "plc",
        "gmbh",
        "and",
        "sons",
    }
)

MIN_STEM_LENGTH = 3
STEM_SUFFIX_LENGTH = 4

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_SCHEME = re.compile(r"^https?://")


def company_domain_stem(name: str) -> str:
    """Lowercase, strip punctuation and corporate suffix words, join the rest."""
    cleaned = _NON_ALNUM.sub("", (name or "").lower())
    words = [w for w in cleaned.split() if w not in CORPORATE_SUFFIXES]
    return "".join(words)


def derive_domain(name: str, rng: Optional[random.Random] = None) -> str:
    """Build ``<stem>.<tld>`` for a company name, padding stems that are too short."""
    rng = rng or random.Random()
    stem = company_domain_stem(name)
    if len(stem) < MIN_STEM_LENGTH:
        alphabet = string.ascii_lowercase + string.digits
        stem += "".join(rng.choice(alphabet) for _ in range(STEM_SUFFIX_LENGTH))
    return f"{stem}.{rng.choice(TOP_LEVEL_DOMAINS)}"


def _local_part(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "", (value or "").lower())


def build_email(
    first_name: str, last_name: str, domain: str, rng: Optional[random.Random] = None
) -> str:
    """Pick one of five common corporate address formats uniformly at random."""
    rng = rng or random.Random()
    first = _local_part(first_name) or "contact"
    last = _local_part(last_name) or "user"
    formats = (
        f"{first}.{last}",
        f"{first}{last}",
        f"{first[0]}{last}",
        f"{first}_{last}",
        first,
    )
    return f"{rng.choice(formats)}@{domain}"


def email_domain(email: Optional[str]) -> str:
    """Lowercased host part of an address, or "" when it is not ``local@host``."""
    if not email:
        return ""
    parts = email.split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return ""
    return parts[1].strip().lower()


def domain_from_website(website: Optional[str]) -> str:
    """Hostname of a website URL without a leading ``www.``."""
    if not website:
        return ""
    candidate = website if website.startswith("http") else f"https://{website}"
    try:
        hostname = urlparse(candidate).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return _SCHEME.sub("", website.replace("www.", "", 1))
    return hostname[4:] if hostname.startswith("www.") else hostname
