"""
Custom exceptions for recipes and bill-of-materials expansion.
"""


class RecipeError(Exception):
    """Base exception for recipe-related errors."""
    pass


class RecipeDepthExceededError(RecipeError):
    """Raised when recipe expansion nests deeper than the configured limit."""

    def __init__(self, product_id, max_depth=None, message=None):
        self.product_id = product_id
        self.max_depth = max_depth
        if message is None:
            limit_info = f" (limit {max_depth})" if max_depth is not None else ""
            message = (
                f"Recipe for product {product_id} is nested too deeply{limit_info}. "
                f"Check for a product that contains itself."
            )
        super().__init__(message)


class InvalidRecipeError(RecipeError):
    """Raised when a recipe being saved is malformed."""
    pass
