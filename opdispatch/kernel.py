# Copyright 2025 Ant Group Co., Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""KernelFunction: a registered kernel with boxed and unboxed entry points.

Two calling conventions are supported:

* **boxed**: ``fn(stack)`` where ``stack`` is a list. The kernel pops its
  arguments from the stack and pushes its results back. Every valid kernel
  can be called this way, independent of its native signature.
* **unboxed**: a plain Python callable ``fn(*args)``. Optional; used by
  :meth:`KernelFunction.call` when present because it skips the stack.

Example:
    >>> def add(a, b):
    ...     return a + b
    >>> k = KernelFunction.from_unboxed(add)
    >>> k.call(1, 2)
    3
    >>> stack = [1, 2]
    >>> k.call_boxed(stack)
    >>> stack
    [3]
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from opdispatch.errors import InvalidKernelError

__all__ = [
    "BoxedKernelFn",
    "KernelFunction",
    "Stack",
]

Stack = list[Any]

# Boxed signature: (stack) -> None, results are pushed onto the stack
BoxedKernelFn = Callable[[Stack], None]


def _make_boxed_wrapper(fn: Callable[..., Any]) -> BoxedKernelFn:
    def _boxed(stack: Stack) -> None:
        args = tuple(stack)
        stack.clear()
        raw = fn(*args)
        if raw is None:
            return
        if isinstance(raw, tuple):
            stack.extend(raw)
        else:
            stack.append(raw)

    _boxed.__name__ = f"boxed_{getattr(fn, '__name__', 'kernel')}"
    return _boxed


class KernelFunction:
    """A kernel that may be empty, or hold a boxed and/or unboxed callable.

    A default-constructed KernelFunction is empty; dispatch tables use it to
    represent a free slot.
    """

    __slots__ = ("_boxed_fn", "_unboxed_fn")

    def __init__(
        self,
        boxed_fn: BoxedKernelFn | None = None,
        unboxed_fn: Callable[..., Any] | None = None,
    ) -> None:
        self._boxed_fn = boxed_fn
        self._unboxed_fn = unboxed_fn

    @classmethod
    def from_boxed(cls, fn: BoxedKernelFn) -> KernelFunction:
        return cls(boxed_fn=fn)

    @classmethod
    def from_unboxed(cls, fn: Callable[..., Any]) -> KernelFunction:
        """Wrap a plain callable; a boxed wrapper is synthesised for it."""
        return cls(boxed_fn=_make_boxed_wrapper(fn), unboxed_fn=fn)

    @property
    def boxed_kernel_fn(self) -> BoxedKernelFn | None:
        return self._boxed_fn

    @property
    def unboxed_kernel_fn(self) -> Callable[..., Any] | None:
        return self._unboxed_fn

    def is_valid(self) -> bool:
        return self._boxed_fn is not None or self._unboxed_fn is not None

    def __bool__(self) -> bool:
        return self.is_valid()

    def set_manually_boxed_kernel(self, fn: BoxedKernelFn) -> None:
        """Replace the boxed entry point (legacy override hook)."""
        self._boxed_fn = fn

    def call_boxed(self, stack: Stack) -> None:
        if self._boxed_fn is None:
            if self._unboxed_fn is None:
                raise InvalidKernelError("tried to call an empty KernelFunction")
            self._boxed_fn = _make_boxed_wrapper(self._unboxed_fn)
        self._boxed_fn(stack)

    def call(self, *args: Any) -> Any:
        """Call with plain arguments.

        Return value forms when going through the boxed convention:
          - no results pushed: None
          - one result: the value itself
          - several results: a tuple
        """
        if self._unboxed_fn is not None:
            return self._unboxed_fn(*args)
        if self._boxed_fn is None:
            raise InvalidKernelError("tried to call an empty KernelFunction")
        stack: Stack = list(args)
        self._boxed_fn(stack)
        if not stack:
            return None
        if len(stack) == 1:
            return stack[0]
        return tuple(stack)

    def __copy__(self) -> KernelFunction:
        return KernelFunction(self._boxed_fn, self._unboxed_fn)

    def __repr__(self) -> str:
        if not self.is_valid():
            return "KernelFunction(<empty>)"
        target = self._unboxed_fn or self._boxed_fn
        name = getattr(target, "__qualname__", repr(target))
        return f"KernelFunction({name})"
