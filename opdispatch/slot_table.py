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

"""KernelSlotTable: one kernel slot per DispatchKey.

Slots live in a list of length NUM_DISPATCH_KEYS indexed by the key ordinal.
The number of occupied slots is tracked incrementally so ``size()`` never
scans. No locking: the owner serialises mutation.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator

from opdispatch.dispatch_key import NUM_DISPATCH_KEYS, DispatchKey
from opdispatch.errors import internal_assert
from opdispatch.kernel import KernelFunction

__all__ = [
    "KernelSlotTable",
    "RemoveKernelIfExistsResult",
    "SetKernelResult",
]


class SetKernelResult(enum.Enum):
    ADDED_NEW_KERNEL = "added_new_kernel"
    OVERWROTE_EXISTING_KERNEL = "overwrote_existing_kernel"


class RemoveKernelIfExistsResult(enum.Enum):
    REMOVED_KERNEL = "removed_kernel"
    KERNEL_DIDNT_EXIST = "kernel_didnt_exist"


class KernelSlotTable:
    """Map from DispatchKey to at most one KernelFunction."""

    __slots__ = ("_kernel_count", "_kernels")

    def __init__(self) -> None:
        self._kernels: list[KernelFunction] = [
            KernelFunction() for _ in range(NUM_DISPATCH_KEYS)
        ]
        self._kernel_count = 0

    def set_kernel(self, key: DispatchKey, kernel: KernelFunction) -> SetKernelResult:
        internal_assert(
            key != DispatchKey.UNDEFINED,
            "cannot register a kernel for DispatchKey.UNDEFINED",
        )
        # an empty kernel would break the occupied-slot count
        internal_assert(
            kernel.is_valid(), f"cannot register an empty kernel for {key}"
        )
        idx = int(key)
        if self._kernels[idx].is_valid():
            result = SetKernelResult.OVERWROTE_EXISTING_KERNEL
        else:
            result = SetKernelResult.ADDED_NEW_KERNEL
            self._kernel_count += 1
        self._kernels[idx] = kernel
        return result

    def remove_kernel_if_exists(self, key: DispatchKey) -> RemoveKernelIfExistsResult:
        idx = int(key)
        if self._kernels[idx].is_valid():
            self._kernel_count -= 1
            self._kernels[idx] = KernelFunction()
            return RemoveKernelIfExistsResult.REMOVED_KERNEL
        return RemoveKernelIfExistsResult.KERNEL_DIDNT_EXIST

    def lookup(self, key: DispatchKey) -> KernelFunction:
        """Return the slot for ``key``; the kernel may be empty."""
        return self._kernels[int(key)]

    __getitem__ = lookup

    def size(self) -> int:
        return self._kernel_count

    __len__ = size

    def registered_keys(self) -> Iterator[DispatchKey]:
        for idx, kernel in enumerate(self._kernels):
            if kernel.is_valid():
                yield DispatchKey(idx)

    def __repr__(self) -> str:
        keys = ", ".join(str(k) for k in self.registered_keys())
        return f"KernelSlotTable([{keys}])"
