"""
Deterministic normalization rules.

Every lookup table the pipeline consults lives here. They are read-only:
tuples, frozensets and mapping proxies, never mutated at runtime.
"""

from types import MappingProxyType

TARGET_ENCODING = "utf-8"
NORMALIZED_DELIMITER = ","

# Checked in this order against the first non-empty line.
DELIMITER_PRIORITY = ("\t", ";")

# --- Header keywords (generic pass, first match per cell wins) ---
DATE_KEYWORDS = ("date",)
DESCRIPTION_KEYWORDS = ("description", "transactions", "details", "particulars")
DEBIT_KEYWORDS = ("debit", "dr", "withdrawal", "amount")
CREDIT_KEYWORDS = ("credit", "cr", "deposit")
TRANSACTION_TYPE_KEYWORDS = ("domestic", "international")
CARD_KEYWORDS = ("card",)

# --- Section header regexes (column-header rows inside a section) ---
SECTION_DATE_PATTERN = r"date"
SECTION_DEBIT_PATTERN = r"debit"
SECTION_CREDIT_PATTERN = r"credit"
SECTION_DESCRIPTION_PATTERN = r"description|details|particulars|transaction"

# --- Bank-specific header phrasing, keyed by the filename bank hint ---
BANK_HEADER_RULES = MappingProxyType({
    "HDFC": (
        ("debit amount", "debit"),
        ("credit amount", "credit"),
        ("withdrawal amt", "debit"),
        ("deposit amt", "credit"),
    ),
    "ICICI": (
        ("withdrawal amount", "debit"),
        ("deposit amount", "credit"),
    ),
    "AXIS": (
        ("debit amount", "debit"),
        ("credit amount", "credit"),
        ("withdrawal amount", "debit"),
        ("deposit amount", "credit"),
    ),
    "IDFC": (
        ("debit amount", "debit"),
        ("credit amount", "credit"),
        ("withdrawal amount", "debit"),
        ("deposit amount", "credit"),
    ),
})

# --- Transaction types / currencies ---
DOMESTIC = "Domestic"
INTERNATIONAL = "International"

# Ordered: first keyword hit decides.
CURRENCY_KEYWORDS = (
    (("usd", "dollar"), "USD"),
    (("eur", "euro"), "EUR"),
    (("gbp", "pound"), "POUND"),
)
DEFAULT_DOMESTIC_CURRENCY = "INR"
DEFAULT_INTERNATIONAL_CURRENCY = "USD"

AMOUNT_JUNK_PATTERN = r"[₹$€£,\s]"

# --- Known cities: canonical spelling -> aliases (matched case-insensitively) ---
KNOWN_CITIES = MappingProxyType({
    "NEWDELHI": ("new delhi", "newdelhi"),
    "DELHI": ("delhi",),
    "MUMBAI": ("mumbai", "bombay"),
    "BANGALORE": ("bangalore", "bengaluru"),
    "CHENNAI": ("chennai", "madras"),
    "KOLKATA": ("kolkata", "calcutta"),
    "HYDERABAD": ("hyderabad",),
    "JAIPUR": ("jaipur",),
    "GURGAON": ("gurgaon", "gurugram"),
    "NOIDA": ("noida",),
    "PUNE": ("pune",),
    "AHMEDABAD": ("ahmedabad",),
    "CHANDIGARH": ("chandigarh",),
    "LUCKNOW": ("lucknow",),
    "LONDON": ("london",),
    "NEWYORK": ("new york", "newyork"),
    "SANFRANCISCO": ("san francisco", "sanfrancisco"),
    "LOSANGELES": ("los angeles", "losangeles"),
    "SINGAPORE": ("singapore",),
    "DUBAI": ("dubai",),
    "PARIS": ("paris",),
    "TOKYO": ("tokyo",),
    "HONGKONG": ("hong kong", "hongkong"),
    "SYDNEY": ("sydney",),
    "FRANKFURT": ("frankfurt",),
    "AMSTERDAM": ("amsterdam",),
    "BANGKOK": ("bangkok",),
})

# --- Export ---
EXPORT_COLUMNS = (
    "Date",
    "Transaction Description",
    "Debit",
    "Credit",
    "Currency",
    "Card Name",
    "Transaction Type",
    "Location",
)
