class AuthenticationRequiredError(Exception):
    def __init__(self):
        super().__init__("Authentication required")

class InvalidTokenError(Exception):
    def __init__(self):
        super().__init__("Invalid or expired token")

class InsufficientPermissionsError(Exception):
    def __init__(self, user_role: str, required_roles: list[str]):
        self.user_role = user_role
        self.required_roles = required_roles
        super().__init__("Insufficient permissions")
