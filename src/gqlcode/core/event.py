from __future__ import annotations

import inspect
import weakref
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
    cast,
)

from typing_extensions import ParamSpec

from .types import CallbackDisposable

__all__ = ["Event", "event"]

_TResult = TypeVar("_TResult")
_TParams = ParamSpec("_TParams")


def _make_ref(callback: Callable[..., Any], on_dead: Optional[Callable[[Any], None]] = None) -> weakref.ref[Any]:
    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback, on_dead)
    return weakref.ref(callback, on_dead)


class Event(Generic[_TParams, _TResult]):
    """A list of weakly referenced listeners, notified in registration order.

    `add` returns a disposable that holds a strong reference to the callback,
    so keeping the disposable keeps a lambda listener alive.
    """

    def __init__(self) -> None:
        self._listeners: Dict[weakref.ref[Any], None] = {}

    def __remove_listener(self, ref: Any) -> None:
        self._listeners.pop(ref, None)

    def add(self, callback: Callable[_TParams, _TResult]) -> CallbackDisposable:
        self._listeners[_make_ref(callback, self.__remove_listener)] = None

        def remove() -> None:
            self.remove(callback)

        return CallbackDisposable(remove)

    def remove(self, callback: Callable[_TParams, _TResult]) -> None:
        self._listeners.pop(_make_ref(callback), None)

    def clear(self) -> None:
        self._listeners.clear()

    def __contains__(self, obj: Any) -> bool:
        return _make_ref(obj) in self._listeners

    def __len__(self) -> int:
        return len(self._listeners)

    def __bool__(self) -> bool:
        return len(self._listeners) > 0

    def __iter__(self) -> Iterator[Callable[_TParams, _TResult]]:
        for r in list(self._listeners):
            c = r()
            if c is not None:
                yield c

    def __call__(
        self,
        *__args: _TParams.args,
        **__kwargs: _TParams.kwargs,
    ) -> List[Union[_TResult, BaseException]]:
        result: List[Union[_TResult, BaseException]] = []
        for method in list(self):
            try:
                result.append(method(*__args, **__kwargs))
            except Exception as e:
                result.append(e)
        return result


class event(Generic[_TParams, _TResult]):  # noqa: N801
    """Declares a per instance `Event` from a signature stub.

    Example:

        class Window:
            @event
            def did_change_active_text_editor(sender, editor: Optional[TextEditor]) -> None: ...
    """

    def __init__(self, _func: Callable[_TParams, _TResult]) -> None:
        self._func = _func
        self._owner: Optional[Any] = None
        self._owner_name: Optional[str] = None

    def __set_name__(self, owner: Any, name: str) -> None:
        self._owner = owner
        self._owner_name = name

    def __get__(self, obj: Any, objtype: Type[Any]) -> Event[_TParams, _TResult]:
        if obj is None:
            return self  # type: ignore

        name = f"__event_{self._func.__name__}__"
        if name not in obj.__dict__:
            obj.__dict__[name] = Event[_TParams, _TResult]()

        return cast("Event[_TParams, _TResult]", obj.__dict__[name])
