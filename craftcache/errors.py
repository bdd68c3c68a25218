class CraftError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidIdentifier(CraftError):
    def __init__(self, message: str):
        super().__init__("E_INVALID_IDENTIFIER", message)


class ComputeFailure(CraftError):
    """The pair generator errored or timed out. Nothing was recorded."""

    def __init__(self, message: str):
        super().__init__("E_COMPUTE_FAILED", message)


class StorageError(CraftError):
    def __init__(self, message: str):
        super().__init__("E_STORAGE", message)


class ElementMismatch(CraftError):
    def __init__(self, message: str):
        super().__init__("E_ELEMENT_MISMATCH", message)
