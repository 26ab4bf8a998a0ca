class TodoError(Exception):
    """Base for errors reported back to the caller through an envelope."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(TodoError):
    status_code = 400


class NotFound(TodoError):
    status_code = 404

    def __init__(self, message: str = "Todo not found"):
        super().__init__(message)
