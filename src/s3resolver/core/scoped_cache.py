"""Per-scope deduplication of resolve calls.

Within one logical operation (loading a scene, composing a stage) the same
path is typically resolved many times. A scope bounds that to one real
resolution per path::

    with engine.scope():
        for path in layer_paths:
            engine.resolve(path)

Scopes belong to the context that opened them (thread or asyncio task). Worker
threads cooperating on the same operation can share a scope by passing its
handle explicitly.
"""

import contextvars
import itertools
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from .errors import ScopeError

_scope_ids = itertools.count(1)


@dataclass
class _Slot:
    done: threading.Event = field(default_factory=threading.Event)
    value: str | None = None
    failed: bool = False


@dataclass(eq=False)
class ScopeHandle:
    """Explicit handle for one open resolve scope."""

    id: int = field(default_factory=lambda: next(_scope_ids))
    closed: bool = False
    _slots: dict[str, _Slot] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for slot in self._slots.values() if slot.done.is_set())

    def get(self, path: str) -> str | None:
        with self._lock:
            slot = self._slots.get(path)
        if slot is None or not slot.done.is_set() or slot.failed:
            return None
        return slot.value

    def resolve(self, path: str, compute: Callable[[str], str]) -> str:
        """Single-flight lookup: compute once per path, share the result."""
        with self._lock:
            slot = self._slots.get(path)
            owner = slot is None
            if owner:
                slot = self._slots[path] = _Slot()

        if not owner:
            slot.done.wait()
            if not slot.failed:
                return slot.value  # type: ignore[return-value]
            # The owner's computation raised; resolve without the scope.
            return compute(path)

        try:
            slot.value = compute(path)
        except BaseException:
            slot.failed = True
            with self._lock:
                if self._slots.get(path) is slot:
                    del self._slots[path]
            raise
        finally:
            slot.done.set()
        return slot.value


class ScopedResolveCache:
    """Stack of resolve scopes per execution context."""

    def __init__(self) -> None:
        self._stack: contextvars.ContextVar[tuple[ScopeHandle, ...]] = contextvars.ContextVar(
            f"s3resolver_scopes_{id(self)}", default=()
        )

    def begin_scope(self) -> ScopeHandle:
        handle = ScopeHandle()
        self._stack.set(self._stack.get() + (handle,))
        return handle

    def end_scope(self, handle: ScopeHandle) -> None:
        """Close ``handle``, which must be the innermost open scope of this context."""
        stack = self._stack.get()
        if handle.closed:
            raise ScopeError(f"Scope {handle.id} was already ended")
        if not stack or stack[-1] is not handle:
            raise ScopeError(f"Scope {handle.id} is not the innermost open scope")
        handle.closed = True
        with handle._lock:
            handle._slots.clear()
        self._stack.set(stack[:-1])

    @contextmanager
    def scope(self) -> Iterator[ScopeHandle]:
        handle = self.begin_scope()
        try:
            yield handle
        finally:
            if not handle.closed:
                self.end_scope(handle)

    def current(self) -> ScopeHandle | None:
        stack = self._stack.get()
        return stack[-1] if stack else None

    def resolve_within_scope(
        self,
        path: str,
        compute: Callable[[str], str],
        handle: ScopeHandle | None = None,
    ) -> str:
        """Resolve ``path`` through the active scope, or directly if there is none."""
        if handle is None:
            handle = self.current()
        if handle is None or handle.closed:
            return compute(path)
        return handle.resolve(path, compute)
