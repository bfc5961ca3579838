"""
Seed default configuration options and a handful of sample loan cases.
Run: python -m scripts.seed_cases (from the project root, with DB reachable).
"""
import asyncio
import os
import sys

# Add parent so we can import from the project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import AsyncSessionLocal, init_db
from schemas.loan_case import ApprovalDetails
from services.case_store import default_config_items
from services.errors import ConfigurationAlreadySeededError
from services.gateway import CaseGateway
from services.validation import validate_case_draft


SAMPLE_CASES = [
    {
        "id": "LC-001",
        "draft": {
            "applicantName": "Alice Johnson",
            "loanAmount": 5000,
            "loanType": "Personal",
            "caseType": "New",
            "contactNumber": "123-456-7890",
            "email": "alice.j@example.com",
            "address": "123 Main St, Anytown, USA",
            "applicationDate": "2023-10-01",
            "teamMember": "John Doe",
            "status": "Document Pending",
            "notes": "Applicant has a stable income and good credit history.",
            "salary": 60000,
            "location": "Anytown, USA",
            "dob": "1990-05-15",
            "panCardNumber": "ABCDE1234F",
            "jobProfile": "Private",
            "jobDesignation": "Software Engineer",
            "referenceName": "Bob Johnson",
            "bankName": "HDFC Bank",
            "bankOfficeSm": "SM-1",
            "tenure": 24,
            "obligation": 500,
        },
        "updates": [
            ("In Progress", "Initial review started.", None),
            ("Approved", "All criteria met.", ApprovalDetails(
                approved_amount=5000, roi=8.5, approved_tenure=24, processing_fee=100, insurance_amount=50,
            )),
        ],
    },
    {
        "id": "LC-002",
        "draft": {
            "applicantName": "Bob Williams",
            "loanAmount": 250000,
            "loanType": "Home",
            "caseType": "New",
            "contactNumber": "234-567-8901",
            "email": "bob.w@example.com",
            "address": "456 Oak Ave, Anytown, USA",
            "applicationDate": "2023-10-05",
            "teamMember": "Jane Smith",
            "status": "Document Pending",
            "notes": "Awaiting property appraisal documents.",
            "salary": 90000,
            "location": "Anytown, USA",
            "dob": "1985-08-20",
            "panCardNumber": "FGHIJ5678K",
            "jobProfile": "Government",
            "jobDesignation": "Project Manager",
            "referenceName": "Carol Williams",
            "bankName": "HDFC Bank",
            "bankOfficeSm": "SM-2",
            "tenure": 240,
            "obligation": 1500,
        },
        "updates": [
            ("In Progress", "Application received and assigned.", None),
        ],
    },
    {
        "id": "LC-003",
        "draft": {
            "applicantName": "Charlie Brown",
            "loanAmount": 15000,
            "loanType": "Car",
            "caseType": "New",
            "contactNumber": "345-678-9012",
            "email": "charlie.b@example.com",
            "address": "789 Pine Ln, Anytown, USA",
            "applicationDate": "2023-10-10",
            "teamMember": "John Doe",
            "status": "Document Pending",
            "salary": 45000,
            "location": "Anytown, USA",
            "dob": "1995-11-30",
            "panCardNumber": "KLMNO9012L",
            "jobProfile": "Business",
            "jobDesignation": "Small Business Owner",
            "referenceName": "Sally Brown",
            "bankName": "Other",
            "otherBankName": "Saraswat Co-operative Bank",
            "bankOfficeSm": "SM-1",
            "tenure": 48,
            "obligation": 200,
        },
        "updates": [],
    },
    {
        "id": "LC-004",
        "draft": {
            "applicantName": "Diana Prince",
            "loanAmount": 100000,
            "loanType": "Business",
            "caseType": "BT",
            "contactNumber": "456-789-0123",
            "email": "diana.p@example.com",
            "address": "101 Maple Dr, Anytown, USA",
            "applicationDate": "2023-10-12",
            "teamMember": "Peter Jones",
            "status": "Document Pending",
            "notes": "Business plan lacks sufficient detail on revenue projections.",
            "salary": 120000,
            "location": "Metropolis",
            "dob": "1980-03-22",
            "panCardNumber": "PQRST3456M",
            "jobProfile": "Business",
            "jobDesignation": "CEO",
            "referenceName": "Steve Trevor",
            "bankName": "Axis Bank",
            "bankOfficeSm": "SM-3",
            "tenure": 60,
            "obligation": 3000,
        },
        "updates": [
            ("In Progress", "Reviewing business plan.", None),
            ("Reject", "Insufficient financial projections.", None),
        ],
    },
]


async def seed():
    await init_db()
    gateway = CaseGateway(AsyncSessionLocal)
    try:
        count = await gateway.seed_configuration(default_config_items())
        print(f"Seeded {count} configuration values")
    except ConfigurationAlreadySeededError:
        print("Configuration already seeded, skipping")

    for data in SAMPLE_CASES:
        if await gateway.get_case(data["id"]):
            print(f"Case {data['id']} already exists, skipping")
            continue
        draft = validate_case_draft(data["draft"])
        await gateway.create_case(draft, case_id=data["id"])
        for status, remarks, details in data["updates"]:
            await gateway.update_case_status(data["id"], status, remarks, details)
        print(f"Seeded case: {data['id']} ({draft.applicant_name})")
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
