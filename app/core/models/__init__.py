from app.auth.models import Admin
from app.core.models.employee import Employee
from app.core.models.attendance import Attendance
from app.core.models.enquiry import Enquiry
