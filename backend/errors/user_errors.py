class UserNotFoundError(Exception):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"User not found with {field}={value}")

class DuplicateUserError(Exception):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate user with {field}={value}")

class InvalidCredentialsError(Exception):
    def __init__(self):
        super().__init__("Invalid email or password")

class WeakPasswordError(Exception):
    def __init__(self):
        super().__init__("Password must be at least 8 characters long and contain uppercase, lowercase, and numbers")

class SearchQueryTooShortError(Exception):
    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(f"Search query must be at least {min_length} characters")
