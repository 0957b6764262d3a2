from __future__ import annotations


class RecipeAppError(Exception):
    pass


class RecipeValidationError(RecipeAppError):
    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)
        self.message = message


class AuthenticationError(RecipeAppError):
    code = "authentication_invalid"

    def __init__(self, message: str = "Authentication invalid"):
        super().__init__(message)
        self.message = message


class SessionExpiredError(AuthenticationError):
    code = "session_expired"

    def __init__(self, message: str = "Session expired, please login again."):
        super().__init__(message)
        self.user_message = message


class ResourceNotFoundError(RecipeAppError):
    resource = "Resource"

    def __init__(self, resource_id: str):
        super().__init__(f"{self.resource} not found: {resource_id}")
        self.resource_id = resource_id

    @property
    def public_message(self) -> str:
        return f"{self.resource} not found"


class RecipeNotFoundError(ResourceNotFoundError):
    resource = "Recipe"


class MealPlanNotFoundError(ResourceNotFoundError):
    resource = "Meal plan"


class RecipeGenerationError(RecipeAppError):
    public_message = "Failed to generate the recipe."

    def __init__(self, reason: str):
        super().__init__(f"Recipe generation failed: {reason}")
        self.reason = reason


class PersistenceError(RecipeAppError):
    def __init__(self, public_message: str, reason: str = ""):
        super().__init__(f"{public_message}: {reason}" if reason else public_message)
        self.public_message = public_message
        self.reason = reason


class RecipeRepositoryError(RecipeAppError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class StorageError(RecipeAppError):
    pass


class StorageUploadError(StorageError):
    def __init__(self, file_path: str, reason: str = "Upload failed"):
        super().__init__(f"Failed to upload {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason


class InvalidUploadError(RecipeValidationError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid image upload: {reason}")
        self.reason = reason

