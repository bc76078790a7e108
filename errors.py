from fastapi import status


# Base class for every error the API reports with a status code and a message
class TaskApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# Missing or malformed request fields
class ValidationError(TaskApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


# Unknown username or wrong password; both use the same message
class AuthError(TaskApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid username or password"


class NotFoundError(TaskApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Task not found"


class ConflictError(TaskApiError):
    status_code = status.HTTP_409_CONFLICT
    message = "Username already exists"


class InternalError(TaskApiError):
    pass


# The user store file could not be read, decoded or written
class StoreError(InternalError):
    pass
