class CourseNotFoundError(Exception):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Course not found with {field}={value}")

class DuplicateCourseError(Exception):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate course with {field}={value}")

class AlreadyEnrolledError(Exception):
    def __init__(self, student_id: str, course_id: str):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__(f"Student {student_id} is already enrolled in course {course_id}")

class NotEnrolledError(Exception):
    def __init__(self, student_id: str, course_id: str):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__(f"Student {student_id} is not enrolled in course {course_id}")

class AlreadyAssignedError(Exception):
    def __init__(self, supervisor_id: str, course_id: str):
        self.supervisor_id = supervisor_id
        self.course_id = course_id
        super().__init__(f"Supervisor {supervisor_id} is already assigned to course {course_id}")

class NotAssignedError(Exception):
    def __init__(self, supervisor_id: str, course_id: str):
        self.supervisor_id = supervisor_id
        self.course_id = course_id
        super().__init__(f"Supervisor {supervisor_id} is not assigned to course {course_id}")
