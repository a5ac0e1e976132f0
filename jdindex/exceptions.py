class JDError(Exception):
    pass


class JDPathError(JDError):
    def __init__(self, path, message):
        self.path = path
        super().__init__(message)


class IndexMissingError(JDPathError):
    def __init__(self, path):
        super().__init__(path, f"No Johnny Decimal index found at {path}. Run 'jd index' first.")


class CorruptIndexError(JDPathError):
    def __init__(self, path, reason):
        self.reason = reason
        super().__init__(path, f"The index {path} cannot be read: {reason}")


class IoFailureError(JDPathError):
    def __init__(self, path, error):
        self.error = error
        super().__init__(path, f"Filesystem operation failed on {path}: {error}")


class ConfigError(JDPathError):
    def __init__(self, path, reason):
        super().__init__(path, f"Invalid config file {path}: {reason}")


class NotFoundError(JDError):
    def __init__(self, query, reason=None):
        self.query = query
        message = f"{query} not found."
        if reason:
            message = f"{query} not found: {reason}."
        super().__init__(message)


class NoSuchCategoryError(JDError):
    def __init__(self, number):
        self.number = number
        super().__init__(f"Category {number} not found.")


class NoSuchAreaError(JDError):
    def __init__(self, number):
        self.number = number
        super().__init__(f"No area contains number {number}.")


class CategoryFullError(JDError):
    def __init__(self, number):
        self.number = number
        super().__init__(f"Category {number} is full.")


class IndexValidationError(JDError):
    def __init__(self, diagnostics):
        self.diagnostics = list(diagnostics)
        super().__init__(
            f"The index has {len(self.diagnostics)} problem(s). Run 'jd validate' for details."
        )


class AreaFullError(JDError):
    def __init__(self, number):
        self.number = number
        super().__init__(f"Area {number} is full, no available category numbers.")
