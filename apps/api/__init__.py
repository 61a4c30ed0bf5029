from .client import ApiClient, ApiError, record, records
from .resources import CourseAPI, EduManagerAPI, EnrollmentAPI, StudentAPI, get_api

__all__ = [
    "ApiClient",
    "ApiError",
    "CourseAPI",
    "EduManagerAPI",
    "EnrollmentAPI",
    "StudentAPI",
    "get_api",
    "record",
    "records",
]
