"""Record schemas for the school collections shown in table views.

Each model validates one record of a collection. Records are stored and
served as plain dicts (``model_dump()``), so table views read them with
mapping access.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Student(BaseModel):
    id: str
    name: str
    email: str
    grade: str
    section: str
    parent_name: Optional[str] = None
    parent_email: Optional[str] = None
    parent_phone: Optional[str] = None
    enrollment_date: Optional[str] = None
    status: str = Field(default="active", description="'active', 'inactive', 'trial'")
    school_name: Optional[str] = None


class Teacher(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    subjects: list[str] = Field(default_factory=list)
    classes: list[str] = Field(default_factory=list)
    available_days: Optional[list[str]] = None
    join_date: Optional[str] = None
    status: str = Field(default="active")


class ClassSection(BaseModel):
    id: str
    name: str
    grade: str
    section: str
    class_teacher: str
    student_count: int = 0
    room: Optional[str] = None
    days: Optional[list[str]] = None
    batch_name: Optional[str] = None
    subjects: Optional[list[str]] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class Subject(BaseModel):
    id: str
    name: str
    grade: str
    teacher: str


class AttendanceRecord(BaseModel):
    id: str
    student_id: str
    student_name: str
    date: str
    status: str = Field(description="'present', 'absent', 'late'")
    class_name: str


class Grade(BaseModel):
    id: str
    student_id: str
    student_name: str
    subject: str
    term: str
    score: int
    max_score: int
    grade: str
    remarks: Optional[str] = None


class Fee(BaseModel):
    id: str
    student_id: str
    student_name: str
    type: str
    amount: float
    due_date: str
    status: str = Field(default="pending", description="'paid', 'pending', 'overdue'")
    paid_date: Optional[str] = None


class AuditLog(BaseModel):
    id: str
    action: str
    user: str
    user_role: str
    details: str
    timestamp: str
    ip: Optional[str] = None


COLLECTION_MODELS: dict[str, type[BaseModel]] = {
    "students": Student,
    "teachers": Teacher,
    "classes": ClassSection,
    "subjects": Subject,
    "attendance": AttendanceRecord,
    "grades": Grade,
    "fees": Fee,
    "audit_logs": AuditLog,
}
