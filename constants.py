"""
Built-in option lists and fixed values for loan cases.

The option lists are the defaults for each configuration category; the active
values are loaded from the app_configuration table and may differ.
"""

# Configuration categories (keys of app_configuration.category)
LOAN_TYPE = "LOAN_TYPE"
CASE_TYPE = "CASE_TYPE"
JOB_PROFILE = "JOB_PROFILE"
CASE_STATUS = "CASE_STATUS"
DOCUMENT_TYPE = "DOCUMENT_TYPE"
BANK_NAME = "BANK_NAME"
TEAM_MEMBER = "TEAM_MEMBER"

CATEGORIES = (
    LOAN_TYPE,
    CASE_TYPE,
    JOB_PROFILE,
    CASE_STATUS,
    DOCUMENT_TYPE,
    BANK_NAME,
    TEAM_MEMBER,
)

# Display order only; any status may move to any other status.
STATUS_OPTIONS = [
    "Document Pending",
    "Login",
    "In Progress",
    "Hold",
    "RIC",
    "Complete",
    "Approved",
    "Disbursed",
    "Reject",
]
DEFAULT_STATUS = "Document Pending"
APPROVAL_STATUSES = frozenset({"Approved", "Disbursed"})
DISBURSED_STATUS = "Disbursed"

LOAN_TYPES = ["Personal", "Home", "Car", "Business", "Education"]

CASE_TYPES = ["New", "BT", "Top-Up"]

JOB_PROFILES = ["Government", "Private", "Business"]

DOCUMENT_TYPES = [
    "TVR Form",
    "Aadhaar Card",
    "Pan Card",
    "Salary Slip",
    "Bank Statement",
    "Loan Tracks",
]

OTHER_BANK = "Other"

BANK_NAMES = [
    "HDFC Bank",
    "ICICI Bank",
    "Axis Bank",
    "Kotak Mahindra Bank",
    "IndusInd Bank",
    "Yes Bank",
    "Bajaj Finance Ltd.",
    "Tata Capital Financial Services",
    "HDB Financial Services (HDFC Group)",
    "Aditya Birla Finance Ltd.",
    "Mahindra & Mahindra Financial Services",
    "L&T Finance Ltd.",
    "Piramal Capital & Housing Finance",
    "Shriram Finance Ltd.",
    "Cholamandalam Investment & Finance",
    "Muthoot Finance Ltd.",
    "Fullerton India",
    "IIFL Finance",
    "Hero FinCorp",
    OTHER_BANK,
]

DEFAULT_OFFICERS = ["John Doe", "Jane Smith", "Peter Jones", "Mary Williams"]

DEFAULT_OPTIONS: dict[str, list[str]] = {
    LOAN_TYPE: LOAN_TYPES,
    CASE_TYPE: CASE_TYPES,
    JOB_PROFILE: JOB_PROFILES,
    CASE_STATUS: STATUS_OPTIONS,
    DOCUMENT_TYPE: DOCUMENT_TYPES,
    BANK_NAME: BANK_NAMES,
    TEAM_MEMBER: DEFAULT_OFFICERS,
}

MAX_TOTAL_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB per case

CASE_CREATED_REMARKS = "Case created"
