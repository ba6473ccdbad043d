"""Domain errors raised by stores when a business rule would be violated."""


class ImageLimitExceeded(Exception):
    """Adding `requested` images to a contact holding `current` would exceed `limit`."""

    def __init__(self, current: int, requested: int, limit: int) -> None:
        self.current = current
        self.requested = requested
        self.limit = limit
        super().__init__(
            f"Contact holds {current} images; adding {requested} would exceed {limit}."
        )

    @property
    def remaining(self) -> int:
        return max(self.limit - self.current, 0)
