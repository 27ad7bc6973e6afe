import inspect
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class Disposable(Protocol):
    def dispose(self) -> Any: ...


class CallbackDisposable:
    def __init__(self, callback: Callable[[], Any]) -> None:
        self._callback: Optional[Callable[[], Any]] = callback

    @property
    def disposed(self) -> bool:
        return self._callback is None

    def dispose(self) -> Any:
        callback, self._callback = self._callback, None
        if callback is not None:
            return callback()
        return None

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(disposed={self.disposed!r})"


def dispose_all(disposables: List[Disposable]) -> List[Union[Awaitable[Any], BaseException]]:
    """Calls `dispose` on every item, even if some of them fail.

    Returns the awaitables returned by asynchronous disposers and the exceptions
    raised by synchronous ones, in order.
    """
    results: List[Union[Awaitable[Any], BaseException]] = []
    for d in disposables:
        try:
            r = d.dispose()
        except Exception as e:
            results.append(e)
        else:
            if inspect.isawaitable(r):
                results.append(r)
    return results
