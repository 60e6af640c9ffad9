"""Condition failures. The evaluator catches these and fails closed."""


class ConditionError(ValueError):
    """Base for any condition that cannot be evaluated."""

    def __init__(self, message: str, expression: str = ""):
        super().__init__(message)
        self.expression = expression


class ConditionSyntaxError(ConditionError):
    """Expression is outside the supported grammar."""

    def __init__(self, message: str, expression: str = "", position: int = -1):
        super().__init__(message, expression)
        self.position = position


class UnknownFieldError(ConditionError):
    """Expression references a field the opportunity does not declare."""

    def __init__(self, path: str, expression: str = ""):
        super().__init__(f"Unknown field: {path}", expression)
        self.path = path
