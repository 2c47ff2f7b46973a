from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class Result(Generic[T]):
    """Outcome of a use case: either a value or an Error, never both."""

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def __repr__(self) -> str:
        if self.is_err():
            return f"Result(error={self.error!r})"
        return f"Result(value={self.value!r})"


class Return:
    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
