from __future__ import annotations


class RecipeServiceError(Exception):
    pass


class UpstreamError(RecipeServiceError):
    pass


class QuotaExceededError(UpstreamError):
    def __init__(self, message: str = "Recipe API daily quota exceeded", credential_label: str | None = None):
        super().__init__(message)
        self.credential_label = credential_label


class NoCredentialsAvailableError(QuotaExceededError):
    def __init__(self, total_credentials: int = 0):
        if total_credentials:
            message = f"All {total_credentials} recipe API keys are exhausted"
        else:
            message = "No recipe API keys configured"
        super().__init__(message)
        self.total_credentials = total_credentials


class TransientUpstreamError(UpstreamError):
    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"Transient error calling {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class FatalUpstreamError(UpstreamError):
    def __init__(self, endpoint: str, status_code: int | None, body: str = ""):
        if status_code is None:
            super().__init__(f"Recipe API sent an undecodable response for {endpoint}")
        else:
            super().__init__(f"Recipe API returned {status_code} for {endpoint}")
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body


class FavouritesError(RecipeServiceError):
    pass


class FavouriteAlreadyExistsError(FavouritesError):
    def __init__(self, recipe_id: int):
        super().__init__("Recipe is already in favorites")
        self.recipe_id = recipe_id


class FavouriteNotFoundError(FavouritesError):
    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe {recipe_id} is not in favorites")
        self.recipe_id = recipe_id


class FavouritesRepositoryError(FavouritesError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Favourites repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
