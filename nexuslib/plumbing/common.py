"""
Shared helper methods, base classes and exceptions.
"""

from enum import Enum
from functools import wraps
import inspect
import logging
from typing import Any, Callable, Generator, Generic, Iterable, List, Optional, TypeVar, Union


LOG = logging.getLogger(__name__)

T = TypeVar("T")

Collect = Generator["Result[Any]", None, T]
"""
Generic type for the return value of functions using `Result.collect`.
"""


class Unset:
    """
    Constructor of generic default values for optional but nullable parameters.
    """

    def __repr__(self):
        return "UNSET"


UNSET = Unset()
"""
Global generic default value.
"""


class NexusError(Exception):
    """
    Base class of errors raised by interactions with a Nexus server.
    """

    def __str__(self):
        # KeyError quotes its argument, which we never want for messages.
        return str(self.args[0]) if self.args else ""


class NotFound(NexusError, KeyError):
    """
    The addressed remote object (script, repository, asset etc.) does not exist.
    """


class AlreadyExists(NexusError, ValueError):
    """
    A create was attempted against an object name that is already taken.
    """


class InvalidArgument(NexusError, ValueError):
    """
    Required fields are missing or malformed.  Raised before any request is made.
    """


class ProtocolError(NexusError, ValueError):
    """
    A response body couldn't be decoded into the expected shape.
    """


class ExecutionError(NexusError, RuntimeError):
    """
    A script raised an exception whilst running on the server.  The message is the exception text
    reported by the scripting engine.
    """

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name


class HTTPError(NexusError):
    """
    A request returned an unsuccessful status that the caller didn't map to a specific error.
    """

    def __init__(self, message: str, status: int, body: bytes = b""):
        super().__init__(message)
        self.status = status
        self.body = body


class State(Enum):
    """
    Enumeration used by `Result` to declare whether the action happened.
    """

    unchanged = 0
    """
    No action required, the request and current state are consistent.
    """
    success = 1
    """
    The action was completed without issues.
    """
    created = 2
    """
    The action resulted in the creation of a new object or record.
    """

    def __bool__(self):
        return bool(self.value)


class Result(Generic[T]):
    """
    State and optional accompanying value from a unit of work.

    For a simple plumbing action, just create a new result directly with the resulting `State` and
    a value if relevant:

        def unit():
            # Send a request, run a script etc.
            return Result(State.success, True)

    For a task that combines multiple results, see `Result.collect`.  The state of such a result is
    based on all of its parts -- if any changes were made, the outer result also reports a change.

    A result can be checked for truthiness, which is `False` if no changes were made.

    A result can also be converted to a string, which produces a tree-like summary of changes:

        module:task success True
            module:unit1 unchanged
            module:unit2 success
    """

    @classmethod
    def _collect(cls, fn: Callable[..., Collect[T]], keep: bool) -> Callable[..., "Result[T]"]:
        @wraps(fn)
        def inner(*args: Any, **kwargs: Any) -> Result[T]:
            value: Union[T, Unset] = UNSET
            parts: List[Result[Any]] = []
            gen = fn(*args, **kwargs)
            try:
                while True:
                    result = next(gen)
                    parts.append(result)
            except StopIteration as ex:
                if keep:
                    value = ex.value
            return cls(None, value, parts, fn)
        return inner

    @classmethod
    def collect(cls, fn: Callable[..., Collect[Any]]) -> Callable[..., "Result[Unset]"]:
        """
        Decorator: build a `Result` from multiple sub-tasks:

            def plumb_b() -> Result[str]: ...

            @Result.collect
            def task() -> Collect[None]:
                yield plumb_a()
                result = yield from plumb_b()
                if result:
                    yield plumb_c()

        The inner function this decorator wraps should be a generator of `Result` objects.

        The return value of the wrapper function will be a new `Result` object, whose `parts` will
        be those collected sub-task results.  Its value is left unset, see `Result.collect_value`
        to keep the return value of the inner function.
        """
        return cls._collect(fn, False)

    @classmethod
    def collect_value(cls, fn: Callable[..., Collect[T]]) -> Callable[..., "Result[T]"]:
        """
        Decorator: like `Result.collect`, but set the result's `value` to the return value of the
        inner function (i.e. a `Collect[str]` generator produces a `Result[str]`).
        """
        return cls._collect(fn, True)

    def __init__(self, state: Optional[State] = None, value: Union[T, Unset] = UNSET,
                 parts: Iterable["Result[Any]"] = (), caller: Optional[Callable[..., Any]] = None):
        self._state = state
        self._value = value
        self.parts = tuple(parts)
        self.caller = "<unknown>"
        # Inspection magic to log the calling method, e.g. `module.sub:Class.method`.
        name = None
        if not caller:
            frame = inspect.currentframe()
            try:
                name = frame.f_back.f_code.co_name
                caller = frame.f_back.f_globals[name]
            except (AttributeError, KeyError):
                pass
        if caller:
            self.caller = "{}:{}".format(caller.__module__, caller.__qualname__)
        elif name:
            self.caller = name

    @property
    def state(self) -> State:
        """
        Modification state of the unit of work.

        This may be set directly, computed from `parts`, or defaulted to `State.unchanged`.
        """
        if self._state:
            return self._state
        elif any(self.parts):
            if any(part.state is State.created for part in self.parts):
                return State.created
            else:
                return State.success
        else:
            return State.unchanged

    @state.setter
    def state(self, state: State) -> None:
        self._state = state

    @property
    def value(self) -> T:
        """
        Return value produced by the unit of work.

        Accessing this attribute will raise `ValueError` if no value has been set.
        """
        if isinstance(self._value, Unset):
            raise ValueError("No value set")
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._value = value

    def __bool__(self) -> bool:
        return bool(self.state)

    def __iter__(self) -> Generator["Result[T]", None, "Result[T]"]:
        # Syntactic sugar used by `yield from` expressions in `Result.collect()`.
        yield self
        return self

    def __repr__(self) -> str:
        params = [str(self.state)]
        if not isinstance(self._value, Unset):
            params.append(repr(self._value))
        if self.parts:
            params.append("<{} parts>".format(len(self.parts)))
        return "{}({})".format(self.__class__.__name__, ", ".join(params))

    def __str__(self) -> str:
        tree = "{}: {}".format(self.caller, self.state.name)
        if not isinstance(self._value, Unset):
            tree = "{} {!r}".format(tree, self._value)
        if self.parts:
            for result in self.parts:
                tree += "\n    {}".format(str(result).replace("\n", "\n    "))
        return tree
