"""Opaque tokens that gate who may fire an event."""


class DispatchKey:
    """Unforgeable ownership token.

    Keys compare by identity only: two keys created with the same name are
    still different keys. The name is only used for debugging output.
    """

    __slots__ = ("name",)

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"DispatchKey({self.name!r})"
