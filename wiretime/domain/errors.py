"""Errors raised by the timestamp codec."""


class WiretimeError(Exception):
    """Base exception for wiretime."""


class MalformedInput(WiretimeError, ValueError):
    """
    Text could not be decoded into a Timestamp.

    Attributes:
        text: Original offending text
        errors: (format name, error message) for every format that was tried
    """

    def __init__(
        self,
        message: str,
        text: str,
        errors: list[tuple[str, str]] | None = None,
    ) -> None:
        self.text = text
        self.errors = list(errors or [])
        self.message = message
        super().__init__(self._render())

    def _render(self) -> str:
        msg = f"{self.message}: {self.text!r}"
        if self.errors:
            tried = "; ".join(f"{name}: {err}" for name, err in self.errors)
            msg = f"{msg} (tried {tried})"
        return msg

    def __str__(self) -> str:
        return self._render()
