#!/usr/bin/env python3
"""
Parameter Extraction Primitives

Pure functions that pull structured values (location, amounts, rates,
identifiers, construction paths) out of a raw query string. Every extractor
scans the full query independently and returns an empty string or zero when
nothing is found, so callers never have to handle a missing value specially.
"""

import re
from typing import Dict, List, Optional, Pattern, Tuple, Union

Number = Union[int, float]

# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

STATE_NAMES: Dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "district of columbia": "DC", "florida": "FL", "georgia": "GA", "hawaii": "HI",
    "idaho": "ID", "illinois": "IL", "indiana": "IN", "iowa": "IA",
    "kansas": "KS", "kentucky": "KY", "louisiana": "LA", "maine": "ME",
    "maryland": "MD", "massachusetts": "MA", "michigan": "MI", "minnesota": "MN",
    "mississippi": "MS", "missouri": "MO", "montana": "MT", "nebraska": "NE",
    "nevada": "NV", "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM",
    "new york": "NY", "north carolina": "NC", "north dakota": "ND", "ohio": "OH",
    "oklahoma": "OK", "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI",
    "south carolina": "SC", "south dakota": "SD", "tennessee": "TN", "texas": "TX",
    "utah": "UT", "vermont": "VT", "virginia": "VA", "washington": "WA",
    "west virginia": "WV", "wisconsin": "WI", "wyoming": "WY",
}

STATE_CODES = frozenset(STATE_NAMES.values())

# State codes that are also everyday words, plus "mi" (mortgage insurance) and
# "co" ("co-borrower"). They only count as a state when written in upper case
# in a mixed-case query.
_AMBIGUOUS_STATE_WORDS = frozenset({
    "in", "or", "me", "hi", "ok", "oh", "id", "de", "la", "al", "pa", "ma",
    "mi", "co",
})

_TWO_LETTER_TOKEN = re.compile(r"\b([A-Za-z]{2})\b")
_STATE_NAME_PATTERN = re.compile(
    r"\b(" + "|".join(sorted(STATE_NAMES, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)

# Up to three capitalised words right before "county", e.g. "Los Angeles County".
_COUNTY_CAPITALIZED = re.compile(r"(?<!\w)((?:[A-Z][\w.'-]*\s+){0,2}[A-Z][\w.'-]*)\s+(?i:county)\b")
_COUNTY_ANY = re.compile(r"([\w.'-]+)\s+county\b", re.IGNORECASE)
_COUNTY_FILLER = frozenset({
    "in", "for", "the", "of", "at", "from", "near", "show", "what", "is", "are",
    "get", "within", "by", "per", "each", "which", "my", "a", "this", "that", "your",
})
# Mixed-case or all-caps words ("HomeReady", "FHA") ahead of a county name
_PRODUCT_WORD = re.compile(r"^[A-Z][\w.'-]*[A-Z]")

_ZIP_PATTERN = re.compile(r"(?<![\w$,.])(\d{5})(?:-\d{4})?(?![\w,%]|\.\d)")


def extract_state(query: str) -> str:
    """
    Find a US state in the query and return its two-letter code

    Upper-case state tokens ("CA") win over lower-case ones ("ca"), which win
    over spelled-out names ("California"). In an all-caps query case carries
    no signal, so everyday words like "IN" are skipped unless nothing else
    matches.
    """
    tokens = _TWO_LETTER_TOKEN.findall(query)
    shouting = not any(char.islower() for char in query)

    if not shouting:
        for token in tokens:
            if token.isupper() and token in STATE_CODES:
                return token

    for token in tokens:
        if token.lower() not in _AMBIGUOUS_STATE_WORDS and token.upper() in STATE_CODES:
            return token.upper()

    name_match = _STATE_NAME_PATTERN.search(query)
    if name_match:
        return STATE_NAMES[name_match.group(1).lower()]

    if shouting:
        for token in tokens:
            if token in STATE_CODES:
                return token

    return ""


def extract_county(query: str) -> str:
    """Return the county name preceding the word "county", without the suffix"""
    match = _COUNTY_CAPITALIZED.search(query)
    if match:
        words = match.group(1).split()
        while words and words[0].lower() in _COUNTY_FILLER:
            words.pop(0)
        while len(words) > 1 and _PRODUCT_WORD.match(words[0]) and not words[1].isupper():
            words.pop(0)
        if words:
            return " ".join(words)

    match = _COUNTY_ANY.search(query)
    if match and match.group(1).lower() not in _COUNTY_FILLER:
        return match.group(1).title()

    return ""


def extract_zip_code(query: str) -> str:
    match = _ZIP_PATTERN.search(query)
    return match.group(1) if match else ""


def extract_location(query: str) -> Dict[str, str]:
    """
    Extract state, county and zip code

    Args:
        query: The raw query text

    Returns:
        Dict with state, county and zipCode (empty strings when absent)
    """
    return {
        "state": extract_state(query),
        "county": extract_county(query),
        "zipCode": extract_zip_code(query),
    }

# ---------------------------------------------------------------------------
# Numeric values
# ---------------------------------------------------------------------------

# integer part (with optional thousands separators), decimals, k/m suffix
_AMOUNT_CORE = r"(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d+))?\s*([km])?\b"

_DOLLAR_AMOUNT = re.compile(r"\$\s?" + _AMOUNT_CORE, re.IGNORECASE)
_BARE_AMOUNT = re.compile(r"(?<![\w$.,])" + _AMOUNT_CORE, re.IGNORECASE)

_INCOME_LABELS = r"(?:annual\s+|household\s+|yearly\s+|gross\s+)?(?:income|salary|earnings)"
_LOAN_LABELS = r"(?:loan|mortgage|balance|upb)"

_MIN_BARE_AMOUNT = 1000

_RATE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"(?<![\d.])(\d{1,2}(?:\.\d{1,3})?)\s*%\s*(?:note\s+|interest\s+|mortgage\s+)?(?:rate|interest|coupon)\b", re.IGNORECASE),
    re.compile(r"\b(?:note\s+rate|interest\s+rate|rate|coupon)\s*(?:of|at|is|:|=)?\s*(\d{1,2}\.\d{1,3})\s*%?", re.IGNORECASE),
    re.compile(r"(?<![\d.])(\d{1,2}\.\d{1,3})\s*%", re.IGNORECASE),
]

_LTV_PATTERNS: List[Pattern[str]] = [
    re.compile(r"(?<![\d.])(\d{1,3}(?:\.\d{1,2})?)\s*%?\s*(?:c?ltv|loan[\s-]to[\s-]value)\b", re.IGNORECASE),
    re.compile(r"\b(?:c?ltv|loan[\s-]to[\s-]value)(?:\s+ratio)?\s*(?:of|at|is|:|=)?\s*(\d{1,3}(?:\.\d{1,2})?)\s*%?", re.IGNORECASE),
]

_SCORE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"(?<![\w$,.])([3-8]\d{2})\s*(?:credit|fico|score)\b", re.IGNORECASE),
    re.compile(r"\b(?:credit\s+score|fico(?:\s+score)?|score)\s*(?:of|is|:|=)?\s*([3-8]\d{2})(?![\d,])", re.IGNORECASE),
]

# Any standalone 3-digit token. Deliberately loose: "a 450 sq ft unit" will
# read as a credit score of 450 when no labelled score is present.
_BARE_THREE_DIGITS = re.compile(r"(?<![\w$,.])(\d{3})(?![\w,]|\.\d|\s*%)")


def _to_number(text: str) -> Number:
    value = float(text)
    return int(value) if value.is_integer() else value


def _parse_amount(integer_part: str, decimals: Optional[str], suffix: Optional[str]) -> int:
    digits = integer_part.replace(",", "")
    value = float(f"{digits}.{decimals}" if decimals else digits)
    if suffix:
        value *= 1_000 if suffix.lower() == "k" else 1_000_000
    return int(round(value))


def _first_amount(pattern: Pattern[str], query: str, require_minimum: bool) -> int:
    # _AMOUNT_CORE holds the only capturing groups in every amount pattern
    for match in pattern.finditer(query):
        amount = _parse_amount(match.group(1), match.group(2), match.group(3))
        if require_minimum and "$" not in match.group(0) and amount < _MIN_BARE_AMOUNT:
            continue
        return amount
    return 0


def extract_amount(query: str) -> int:
    """
    Find a dollar-amount-like token

    A "$"-prefixed amount is preferred; otherwise the first bare number of at
    least 1,000 (with optional separators or k/m suffix) is used.
    """
    amount = _first_amount(_DOLLAR_AMOUNT, query, require_minimum=False)
    if amount:
        return amount
    return _first_amount(_BARE_AMOUNT, query, require_minimum=True)


def _labeled_amount(query: str, label: str) -> int:
    after_amount = re.compile(r"\$?\s?" + _AMOUNT_CORE + r"\s+(?:[a-z]+\s+){0,2}?" + label + r"\b", re.IGNORECASE)
    before_amount = re.compile(
        r"\b" + label + r"\s*(?:amount\s+)?(?:of|is|at|:|=|about|around|for)?\s*\$?\s?" + _AMOUNT_CORE,
        re.IGNORECASE,
    )
    for pattern in (after_amount, before_amount):
        amount = _first_amount(pattern, query, require_minimum=True)
        if amount:
            return amount
    return 0


def extract_income(query: str) -> int:
    """Income amount: an amount next to an income label, else the first amount"""
    return _labeled_amount(query, _INCOME_LABELS) or extract_amount(query)


def extract_loan_amount(query: str) -> int:
    """Loan amount: an amount next to a loan label, else the first amount"""
    return _labeled_amount(query, _LOAN_LABELS) or extract_amount(query)


def _first_number(patterns: List[Pattern[str]], query: str) -> Number:
    for pattern in patterns:
        match = pattern.search(query)
        if match:
            return _to_number(match.group(1))
    return 0


def extract_note_rate(query: str) -> Number:
    return _first_number(_RATE_PATTERNS, query)


def extract_ltv(query: str) -> Number:
    return _first_number(_LTV_PATTERNS, query)


def extract_credit_score(query: str) -> int:
    """Credit score: a labelled 3-digit value, else any bare 3-digit token"""
    score = _first_number(_SCORE_PATTERNS, query)
    if score:
        return int(score)
    match = _BARE_THREE_DIGITS.search(query)
    return int(match.group(1)) if match else 0

# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

_POOL_PATTERN = re.compile(
    r"\bpool\s*(?:number|num|no\.?|id|#)?\s*[:#]?\s*((?=[A-Za-z0-9]*\d)[A-Za-z0-9]{4,12})\b",
    re.IGNORECASE,
)
_CUSIP_PATTERN = re.compile(r"\bcusip\s*(?:number|no\.?|#)?\s*[:#]?\s*([A-Za-z0-9]{9})\b", re.IGNORECASE)
_BORROWER_PATTERN = re.compile(
    r"\b(?:borrower(?:'s)?(?:\s+last)?(?:\s+name)?|last\s+name|name)\s*(?:is|named|:|=)?\s*([A-Za-z][A-Za-z'\-]+)",
    re.IGNORECASE,
)
_NAME_STOPWORDS = frozenset({"at", "is", "for", "with", "named", "name", "the", "and", "of", "on", "in"})

_STREET_SUFFIXES = (
    r"st|street|ave|avenue|rd|road|blvd|boulevard|dr|drive|ln|lane|way|ct|court|"
    r"pl|place|pkwy|parkway|hwy|highway|ter|terrace|cir|circle"
)
_ADDRESS_PATTERN = re.compile(
    r"\b(?:located\s+at|address(?:\s+is)?|property(?:\s+at)?|at)\s*:?\s*"
    r"(\d{1,6}\s+(?:[A-Za-z0-9.'#-]+\s+){0,4}?(?:" + _STREET_SUFFIXES + r"))\b\.?",
    re.IGNORECASE,
)
_CITY_AFTER_ADDRESS = re.compile(r"\s*,?\s*([A-Za-z][A-Za-z .'-]*?)\s*,?\s+([A-Za-z]{2})\b")

_CASEFILE_PATTERN = re.compile(
    r"\bcase\s*file(?:\s*id)?\s*(?:number|no\.?|#)?\s*[:#]?\s*((?=[A-Za-z0-9-]*\d)[A-Za-z0-9-]{6,})",
    re.IGNORECASE,
)
_DOCUMENT_FILE_PATTERN = re.compile(
    r"\b(?:document\s*file|doc(?:ument)?\s*id|file)\s*(?:id|number|no\.?|#)?\s*[:#]?\s*((?=[A-Za-z0-9-]*\d)[A-Za-z0-9-]{6,})",
    re.IGNORECASE,
)


def extract_pool_number(query: str) -> str:
    match = _POOL_PATTERN.search(query)
    return match.group(1).upper() if match else ""


def extract_cusip(query: str) -> str:
    match = _CUSIP_PATTERN.search(query)
    return match.group(1).upper() if match else ""


def extract_borrower_last_name(query: str) -> str:
    for match in _BORROWER_PATTERN.finditer(query):
        name = match.group(1)
        if name.lower() in _NAME_STOPWORDS:
            continue
        return name[0].upper() + name[1:]
    return ""


def extract_property_address(query: str) -> Tuple[str, str]:
    """
    Extract a street address and the city that follows it

    Returns:
        Tuple of (street_address, city); empty strings when absent
    """
    match = _ADDRESS_PATTERN.search(query)
    if not match:
        return "", ""

    address = match.group(1).strip().rstrip(".")
    city = ""
    city_match = _CITY_AFTER_ADDRESS.match(query, match.end())
    if city_match and city_match.group(2).upper() in STATE_CODES:
        city = city_match.group(1).strip()
    return address, city


def extract_casefile_id(query: str) -> str:
    match = _CASEFILE_PATTERN.search(query)
    return match.group(1) if match else ""


def extract_document_file_id(query: str) -> str:
    match = _DOCUMENT_FILE_PATTERN.search(query)
    return match.group(1) if match else ""

# ---------------------------------------------------------------------------
# Construction spending path
# ---------------------------------------------------------------------------

# Longest phrases first so "public safety" is not mistaken for the section.
CONSTRUCTION_SUBSECTORS: List[Tuple[str, str]] = [
    ("sewage and waste disposal", "Sewage and waste disposal"),
    ("conservation and development", "Conservation and development"),
    ("amusement and recreation", "Amusement and recreation"),
    ("highway and street", "Highway and street"),
    ("public safety", "Public safety"),
    ("water supply", "Water supply"),
    ("health care", "Health care"),
    ("single-family", "New single-family"),
    ("single family", "New single-family"),
    ("multi-family", "New multifamily"),
    ("multifamily", "New multifamily"),
    ("transportation", "Transportation"),
    ("communication", "Communication"),
    ("manufacturing", "Manufacturing"),
    ("improvement", "Improvements"),
    ("educational", "Educational"),
    ("education", "Educational"),
    ("commercial", "Commercial"),
    ("religious", "Religious"),
    ("lodging", "Lodging"),
    ("office", "Office"),
    ("power", "Power"),
]

_PUBLIC_SECTION = re.compile(r"\bpublic\b(?!\s+safety)")
_PRIVATE_SECTION = re.compile(r"\bprivate\b")


def extract_construction_path(query: str) -> Tuple[str, str, str]:
    """
    Map keywords onto a (section, sector, subsector) path

    Section defaults to "Total"; sector and subsector are empty when not
    mentioned.
    """
    normalized = query.lower()

    if _PRIVATE_SECTION.search(normalized):
        section = "Private"
    elif _PUBLIC_SECTION.search(normalized):
        section = "Public"
    else:
        section = "Total"

    if "nonresidential" in normalized or "non-residential" in normalized:
        sector = "Nonresidential"
    elif "residential" in normalized:
        sector = "Residential"
    else:
        sector = ""

    subsector = ""
    for keyword, name in CONSTRUCTION_SUBSECTORS:
        if keyword in normalized:
            subsector = name
            break

    return section, sector, subsector

# ---------------------------------------------------------------------------
# Loan attributes
# ---------------------------------------------------------------------------

def extract_loan_purpose(query: str) -> str:
    normalized = query.lower()
    if "cash-out" in normalized or "cash out" in normalized or "cashout" in normalized:
        return "CASHOUT_REFINANCE"
    if any(term in normalized for term in ["rate/term", "rate and term", "rate-term", "refinance", "refi"]):
        return "LIMITED_CASHOUT_REFINANCE"
    if "purchase" in normalized or "buying" in normalized:
        return "PURCHASE"
    return ""


def extract_property_type(query: str) -> str:
    normalized = query.lower()
    if "condo" in normalized:
        return "CONDOMINIUM"
    if re.search(r"\bpud\b|planned unit", normalized):
        return "PUD"
    if any(term in normalized for term in ["2-4 unit", "2-unit", "3-unit", "4-unit", "two unit", "duplex", "triplex", "fourplex"]):
        return "TWO_TO_FOUR_UNIT"
    if "manufactured" in normalized:
        return "MANUFACTURED"
    if any(term in normalized for term in ["single family", "single-family", "sfr"]):
        return "SINGLE_FAMILY"
    return ""


def extract_occupancy(query: str) -> str:
    normalized = query.lower()
    if "second home" in normalized or "vacation home" in normalized:
        return "SECOND_HOME"
    if any(term in normalized for term in ["investment property", "investor property", "rental property", "non-owner"]):
        return "INVESTMENT"
    if any(term in normalized for term in ["primary residence", "owner occupied", "owner-occupied"]):
        return "PRIMARY_RESIDENCE"
    return ""
