from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Either(Generic[E, T], ABC):
    """Result of an operation that can be refused.

    Right carries the value, Left carries an error dict of the form
    {"error": <kind>, "message": <text>, ...context}.
    """

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Right(f(self._value))

    def get_or_else(self, default):
        return self._value

    def get_error(self):
        raise ValueError("Right holds no error")

    def is_right(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f):
        # an error passes through untouched
        return self

    def get_or_else(self, default):
        return default

    def get_error(self):
        return self._error

    def is_right(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def failure(kind: str, message: str, **context) -> Left:
    return Left({"error": kind, "message": message, **context})
