class AssignmentNotFoundError(Exception):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Assignment not found with {field}={value}")

class SubmissionNotFoundError(Exception):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Submission not found with {field}={value}")

class UnsupportedFileTypeError(Exception):
    def __init__(self, extension: str, allowed: list[str]):
        self.extension = extension
        self.allowed = allowed
        super().__init__(f"Invalid file type {extension or '(none)'}. Allowed types: {', '.join(allowed)}")

class FileTooLargeError(Exception):
    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"File size {size} bytes exceeds maximum allowed size of {max_size} bytes")

class MissingFileError(Exception):
    def __init__(self):
        super().__init__("No file uploaded")

class InvalidGradeError(Exception):
    def __init__(self, grade: float):
        self.grade = grade
        super().__init__(f"Grade {grade} is outside the allowed range 0-100")

class NotCourseSupervisorError(Exception):
    def __init__(self, supervisor_id: str, course_id: str):
        self.supervisor_id = supervisor_id
        self.course_id = course_id
        super().__init__(f"User {supervisor_id} does not supervise course {course_id}")
