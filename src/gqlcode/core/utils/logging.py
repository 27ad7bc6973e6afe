from __future__ import annotations

import functools
import inspect
import logging
import os
import reprlib
from typing import (
    Any,
    Callable,
    ClassVar,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
    cast,
    overload,
)

__all__ = ["LoggingDescriptor", "TRACE"]

TRACE = logging.DEBUG - 6
logging.addLevelName(TRACE, "TRACE")

_repr_instance = reprlib.Repr()
_repr_instance.maxother = 100


def _repr(o: Any) -> str:
    return _repr_instance.repr(o)


_F = TypeVar("_F", bound=Callable[..., Any])

_MessageType = Union[str, Callable[[], str]]


class LoggerError(Exception):
    pass


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "0").lower() not in ("", "0", "false", "no")


class LoggingDescriptor:
    """Lazily creates a `logging.Logger` named after the owning class.

    Used as a class attribute:

        class WorkspaceClientRegistry:
            _logger: Final = LoggingDescriptor()

    Messages can be callables, they are only evaluated if the level is enabled.
    """

    _call_tracing_enabled: ClassVar[bool] = _env_flag("GQLCODE_CALL_TRACING_ENABLED")

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        postfix: str = "",
        level: int = logging.NOTSET,
    ) -> None:
        self.__name = name
        self.__postfix = postfix
        self.__level = level
        self.__owner: Optional[Type[Any]] = None
        self.__logger: Optional[logging.Logger] = None

    def __set_name__(self, owner: Type[Any], name: str) -> None:
        self.__owner = owner

    def __get__(self, obj: Any, objtype: Type[Any]) -> LoggingDescriptor:
        return self

    @property
    def logger(self) -> logging.Logger:
        if self.__logger is None:
            if self.__name is not None:
                name = self.__name
            elif self.__owner is not None:
                name = f"{self.__owner.__module__}.{self.__owner.__qualname__}"
            else:
                raise LoggerError("LoggingDescriptor needs a name or an owner class.")

            self.__logger = logging.getLogger(name + self.__postfix)
            if self.__level != logging.NOTSET:
                self.__logger.setLevel(self.__level)

        return self.__logger

    @property
    def name(self) -> str:
        return self.logger.name

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def log(
        self,
        level: int,
        msg: _MessageType,
        *args: Any,
        stacklevel: int = 2,
        extra: Optional[Mapping[str, object]] = None,
        **kwargs: Any,
    ) -> None:
        if self.is_enabled_for(level):
            self.logger.log(level, msg() if callable(msg) else msg, *args, stacklevel=stacklevel, extra=extra, **kwargs)

    def trace(self, msg: _MessageType, *args: Any, **kwargs: Any) -> None:
        self.log(TRACE, msg, *args, stacklevel=3, **kwargs)

    def debug(self, msg: _MessageType, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, stacklevel=3, **kwargs)

    def info(self, msg: _MessageType, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, stacklevel=3, **kwargs)

    def warning(self, msg: _MessageType, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, stacklevel=3, **kwargs)

    def error(self, msg: _MessageType, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, stacklevel=3, **kwargs)

    def exception(
        self,
        msg: Union[BaseException, _MessageType],
        *args: Any,
        exc_info: Any = True,
        level: int = logging.ERROR,
        **kwargs: Any,
    ) -> None:
        if isinstance(msg, BaseException):
            text = type(msg).__qualname__
            if str(msg):
                text += f": {msg}"
            if exc_info is True:
                exc_info = msg
            msg = text

        self.log(level, msg, *args, exc_info=exc_info, stacklevel=3, **kwargs)

    def __repr__(self) -> str:
        level = logging.getLevelName(self.logger.getEffectiveLevel())
        return f"{type(self).__name__}(name={self.logger.name!r}, level={level!r})"

    @classmethod
    def set_call_tracing(cls, value: bool) -> None:
        cls._call_tracing_enabled = value

    @overload
    def call(self, _func: _F) -> _F: ...

    @overload
    def call(self, *, level: int = TRACE) -> Callable[[_F], _F]: ...

    def call(self, _func: Optional[_F] = None, *, level: int = TRACE) -> Any:
        """Logs every call of the decorated function while call tracing is enabled."""

        def decorator(func: _F) -> _F:
            skip_self = "." in func.__qualname__.split(".<locals>.")[-1]

            def enter_message(args: Any, kwargs: Any) -> str:
                call_args = args[1:] if skip_self else args
                params = [_repr(a) for a in call_args] + [f"{k}={_repr(v)}" for k, v in kwargs.items()]
                return f"{func.__qualname__}({', '.join(params)})"

            if inspect.iscoroutinefunction(func):

                @functools.wraps(func)
                async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                    if type(self)._call_tracing_enabled:
                        self.log(level, lambda: enter_message(args, kwargs), stacklevel=3)
                    return await func(*args, **kwargs)

                return cast(_F, async_wrapper)

            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                if type(self)._call_tracing_enabled:
                    self.log(level, lambda: enter_message(args, kwargs), stacklevel=3)
                return func(*args, **kwargs)

            return cast(_F, wrapper)

        if _func is None:
            return decorator

        return decorator(_func)
