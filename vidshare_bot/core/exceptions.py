from typing import Optional


class APIError(Exception):
    """A backend call failed. ``status_code`` is None when the backend was unreachable."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        return self.status_code is None or self.status_code >= 500
