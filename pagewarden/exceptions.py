class TabNotFoundException(Exception):
    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class BadPageReloadException(Exception):
    def __init__(self, message: str, url: str, original_error: Exception):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.url = url
