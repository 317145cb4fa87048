from enum import Enum


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    PROBATION = "Probation"
    NOTICE = "Notice"
    INACTIVE = "Inactive"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    WFH = "WFH"


class EnquiryPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EnquiryChannel(str, Enum):
    EMAIL = "Email"
    CALL = "Call"
    WHATSAPP = "WhatsApp"
    WEBSITE = "Website"
    OTHER = "Other"


class EnquiryStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


# Statuses that mark an enquiry as finished; entering one stamps resolved_at.
ENQUIRY_FINAL_STATUSES = (EnquiryStatus.RESOLVED, EnquiryStatus.CLOSED)
