"""Error types for the pagination controller."""


class InitializationError(Exception):
    """Raised when the listing could not be fetched during initialize().

    The original failure is chained as ``__cause__``.
    """

    def __init__(self, cause: BaseException) -> None:
        """Initialize the error.

        Args:
            cause: Underlying failure.
        """
        self.cause_message = str(cause)
        super().__init__(f"Failed to initialize posts: {self.cause_message}")
