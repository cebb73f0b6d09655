"""
Shortlist column configuration and backend name mappings.

Provides display names for shortlist columns, the sort column translation
table and the fixed export column order.
"""

# Client-visible shortlist columns, in table order: column id -> header
SHORTLIST_COLUMNS = {
    "score": "Score",
    "tier": "Tier",
    "county": "County",
    "case_no": "Case",
    "owner_name": "Owner",
    "property_address": "Address",
    "city": "City",
    "value": "Value",
    "petition_date": "Petition Date",
    "absentee": "Absentee",
    "parcel": "Parcel",
    "qpublic": "qPublic",
    "why": "Why",
}

# Client column id -> backend column, only where they differ
SORT_COLUMN_MAP = {
    "value": "property_value_2025",
    "absentee": "absentee_flag",
    "parcel": "parcel_number",
    "qpublic": "qpublic_report_url",
    "why": "rationale",
}

# Reverse mapping: backend column -> client column id
SORT_COLUMN_FROM_BACKEND = {v: k for k, v in SORT_COLUMN_MAP.items()}

# Fixed CSV export column order (backend field names)
EXPORT_COLUMNS = [
    "score",
    "tier",
    "county",
    "case_no",
    "owner_name",
    "property_address",
    "city",
    "state",
    "zip",
    "party",
    "mailing_address",
    "petition_type",
    "petition_date",
    "death_date",
    "absentee_flag",
    "days_since_petition",
    "days_since_death",
    "holdings_in_file",
    "property_value_2025",
    "parcel_number",
    "qpublic_report_url",
    "source_url",
    "rationale",
]


def get_backend_column(column: str) -> str:
    """Get the backend column name for a client column id.

    Args:
        column: Client column id (e.g., "value")

    Returns:
        Backend column name (e.g., "property_value_2025")
    """
    return SORT_COLUMN_MAP.get(column, column)


def get_client_column(backend_column: str) -> str:
    """Get the client column id for a backend column name.

    Args:
        backend_column: Backend column name (e.g., "absentee_flag")

    Returns:
        Client column id (e.g., "absentee")
    """
    return SORT_COLUMN_FROM_BACKEND.get(backend_column, backend_column)


def get_column_header(column: str) -> str:
    """Get the table header for a client column id."""
    return SHORTLIST_COLUMNS.get(column, column)
