"""Custom exceptions for dddcontext."""


class DddContextError(Exception):
    """Base exception for all dddcontext errors."""


class ConfigError(DddContextError):
    """Configuration-related errors."""


class CatalogError(DddContextError):
    """Artifact catalog construction and storage errors."""


class NotFoundError(DddContextError):
    """A bounded context or artifact id is absent from the catalog."""

    def __init__(self, what: str, name: str):
        self.what = what
        self.name = name
        super().__init__(f"Unknown {what}: '{name}'")


class BudgetExceededError(DddContextError):
    """Raised when the mandatory user story alone does not fit the budget."""

    def __init__(self, story_id: str, cost: int, budget: int):
        self.story_id = story_id
        self.cost = cost
        self.budget = budget
        super().__init__(
            f"User story '{story_id}' costs {cost} units but the budget is {budget}"
        )
