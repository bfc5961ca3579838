from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from database import Base


class LoanCase(Base):
    __tablename__ = "loan_cases"

    id = Column(String(64), primary_key=True, index=True)
    # Applicant
    applicant_name = Column(String(256), nullable=False)
    contact_number = Column(String(32), nullable=False)
    email = Column(String(256), nullable=False)
    address = Column(Text, nullable=False)
    location = Column(String(128), nullable=False)
    dob = Column(Date, nullable=False)
    pan_card_number = Column(String(16), nullable=False)
    salary = Column(Float, nullable=False)
    job_profile = Column(String(64), nullable=False)
    job_designation = Column(String(128), nullable=False)
    reference_name = Column(String(256), nullable=False)
    # Loan
    loan_amount = Column(Float, nullable=False)
    loan_type = Column(String(64), nullable=False)
    case_type = Column(String(64), nullable=False)
    tenure = Column(Integer, nullable=False)
    obligation = Column(Float, nullable=False, default=0)
    application_date = Column(Date, nullable=False)
    team_member = Column(String(128), nullable=False, index=True)
    notes = Column(Text, nullable=True)
    # Bank
    bank_name = Column(String(128), nullable=False, index=True)
    other_bank_name = Column(String(256), nullable=True)
    bank_office_sm = Column(String(256), nullable=False)
    status = Column(String(32), nullable=False, default="Document Pending", index=True)
    # Approval details (set on transition into Approved / Disbursed)
    approved_amount = Column(Float, nullable=True)
    roi = Column(Float, nullable=True)
    approved_tenure = Column(Integer, nullable=True)
    processing_fee = Column(Float, nullable=True)
    insurance_amount = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    history = relationship("CaseHistory", back_populates="loan_case", cascade="all, delete-orphan")
    documents = relationship("CaseDocument", back_populates="loan_case", cascade="all, delete-orphan")


class CaseHistory(Base):
    __tablename__ = "case_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(String(64), ForeignKey("loan_cases.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(32), nullable=False)
    remarks = Column(Text, nullable=False)

    loan_case = relationship("LoanCase", back_populates="history")


class CaseDocument(Base):
    __tablename__ = "case_documents"
    __table_args__ = (UniqueConstraint("case_id", "document_type", name="uq_case_documents_case_type"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(String(64), ForeignKey("loan_cases.id", ondelete="CASCADE"), nullable=False, index=True)
    document_type = Column(String(128), nullable=False)
    uploaded = Column(Boolean, nullable=False, default=False)
    file_url = Column(String(1024), nullable=True)
    file_size = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    loan_case = relationship("LoanCase", back_populates="documents")
