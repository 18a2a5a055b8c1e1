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

"""Per-operator dispatch table.

Given an operator described by a FunctionSchema, a DispatchTable records the
kernels registered for it. For ``add(Tensor, Tensor)`` the table may hold one
kernel for CPU, another for CUDA, and so on, plus an optional catch-all
kernel used when no key-specific kernel matches.

Lookups never raise for a missing kernel; callers get ``None`` and fall back
(typically to :meth:`DispatchTable.lookup_catchall_kernel`).

Example:
    >>> table = DispatchTable(FunctionSchema("add"))
    >>> _ = table.set_kernel(DispatchKey.CPU, KernelFunction.from_unboxed(operator.add))
    >>> table.set_catchall_kernel(KernelFunction.from_unboxed(operator.add))
    >>> table.list_all_dispatch_keys()
    '[CPU, CATCH-ALL]'
    >>> kernel = table.lookup(DispatchKey.CUDA) or table.lookup_catchall_kernel()
    >>> kernel.call(1, 2)
    3
"""

from __future__ import annotations

import copy
from typing import Any

from opdispatch.diagnostics import DiagnosticSink, LoggingSink, emit
from opdispatch.dispatch_key import DispatchKey, dispatch_key_to_string
from opdispatch.errors import internal_assert
from opdispatch.kernel import BoxedKernelFn, KernelFunction
from opdispatch.key_extractor import DispatchKeyExtractor, KeyExtractorFactory
from opdispatch.logging_config import get_logger
from opdispatch.schema import FunctionSchema
from opdispatch.slot_table import (
    KernelSlotTable,
    RemoveKernelIfExistsResult,
    SetKernelResult,
)

__all__ = ["CATCHALL_LABEL", "DispatchTable"]

logger = get_logger(__name__)

CATCHALL_LABEL = "CATCH-ALL"


class DispatchTable:
    """Kernels registered for one operator, keyed by DispatchKey.

    Mutating calls must be serialised by the owner (usually the operator
    registry); concurrent lookups are safe once mutation has stopped.

    Parameters
    ----------
    schema : FunctionSchema
        Schema of the operator. Its name is used in diagnostics and the key
        extractor is built from it.
    sink : DiagnosticSink, optional
        Receives non-fatal diagnostics such as overwritten registrations.
        Defaults to a LoggingSink on the ``opdispatch`` logger.
    key_extractor_factory : callable, optional
        Builds the dispatch key extractor from the schema. Defaults to
        ``DispatchKeyExtractor.make``.
    """

    __slots__ = (
        "_catchall_kernel",
        "_dispatch_key_extractor",
        "_kernels",
        "_manually_boxed_kernel",
        "_operator_name",
        "_sink",
    )

    def __init__(
        self,
        schema: FunctionSchema,
        *,
        sink: DiagnosticSink | None = None,
        key_extractor_factory: KeyExtractorFactory | None = None,
    ) -> None:
        factory = key_extractor_factory or DispatchKeyExtractor.make
        self._kernels = KernelSlotTable()
        self._catchall_kernel = KernelFunction()
        self._dispatch_key_extractor: Any = factory(schema)
        self._operator_name = str(schema.operator_name)
        self._sink: DiagnosticSink = sink if sink is not None else LoggingSink()
        # Legacy boxed entry point forced onto every kernel once attached
        self._manually_boxed_kernel: BoxedKernelFn | None = None

    @property
    def operator_name(self) -> str:
        return self._operator_name

    @property
    def dispatch_key_extractor(self) -> Any:
        return self._dispatch_key_extractor

    def _stamp(self, kernel: KernelFunction) -> KernelFunction:
        if self._manually_boxed_kernel is None or not kernel.is_valid():
            return kernel
        kernel = copy.copy(kernel)
        kernel.set_manually_boxed_kernel(self._manually_boxed_kernel)
        return kernel

    # ---- per-key kernels ----
    def set_kernel(self, key: DispatchKey, kernel: KernelFunction) -> SetKernelResult:
        """Register ``kernel`` for ``key``, replacing any existing one.

        Overwriting is legal but emits a diagnostic naming the operator and
        key. Registering for DispatchKey.UNDEFINED raises InternalAssertError.
        """
        result = self._kernels.set_kernel(key, self._stamp(kernel))
        if result is SetKernelResult.OVERWROTE_EXISTING_KERNEL:
            emit(
                self._sink,
                f"Registered a kernel for operator {self._operator_name} with "
                f"dispatch key {dispatch_key_to_string(key)} that overwrote a previously registered kernel "
                "with the same dispatch key for the same operator.",
            )
        logger.debug(
            "set kernel %s for %s: %s", key, self._operator_name, result.name
        )
        return result

    def remove_kernel_if_exists(self, key: DispatchKey) -> RemoveKernelIfExistsResult:
        result = self._kernels.remove_kernel_if_exists(key)
        logger.debug(
            "remove kernel %s for %s: %s", key, self._operator_name, result.name
        )
        return result

    def lookup(self, key: DispatchKey) -> KernelFunction | None:
        slot = self._kernels.lookup(key)
        if slot.is_valid():
            return slot
        return None

    def size(self) -> int:
        """Number of per-key kernels; the catch-all is not counted."""
        return self._kernels.size()

    # ---- catch-all kernel ----
    def set_catchall_kernel(self, kernel: KernelFunction) -> None:
        """Register the kernel used when no key-specific kernel matches."""
        if self._catchall_kernel.is_valid():
            emit(
                self._sink,
                f"Registered a catch-all kernel for operator {self._operator_name} "
                "that overwrote a previously registered catch-all kernel for the "
                "same operator.",
            )
        self._catchall_kernel = self._stamp(kernel)
        logger.debug("set catch-all kernel for %s", self._operator_name)

    def remove_catchall_kernel(self) -> None:
        internal_assert(
            self._catchall_kernel.is_valid(),
            f"Tried to remove the catch-all kernel for operator "
            f"{self._operator_name} but there is no catch-all kernel registered.",
        )
        self._catchall_kernel = KernelFunction()
        logger.debug("removed catch-all kernel for %s", self._operator_name)

    def lookup_catchall_kernel(self) -> KernelFunction | None:
        if not self._catchall_kernel.is_valid():
            return None
        return self._catchall_kernel

    def is_empty(self) -> bool:
        return not self._catchall_kernel.is_valid() and self._kernels.size() == 0

    # ---- legacy boxing ----
    def set_manually_boxed_kernel(self, fn: BoxedKernelFn) -> None:
        """Force ``fn`` as the boxed entry point of every kernel in this table.

        Kernels already registered for a dispatch key are patched now and any
        kernel registered later is patched on insertion. A catch-all kernel
        registered before this call keeps its own boxed entry point.

        Can only be called once per table.
        """
        internal_assert(
            self._manually_boxed_kernel is None,
            "Cannot set multiple manually boxed kernels for the same operator "
            f"{self._operator_name}",
        )
        self._manually_boxed_kernel = fn
        # list() since slots are replaced while iterating
        for key in list(self._kernels.registered_keys()):
            self._kernels.set_kernel(key, self._stamp(self._kernels.lookup(key)))

    # ---- introspection ----
    def list_all_dispatch_keys(self) -> str:
        """Human readable list of registered keys, e.g. ``[CPU, CATCH-ALL]``."""
        names = [str(key) for key in self._kernels.registered_keys()]
        if self._catchall_kernel.is_valid():
            names.append(CATCHALL_LABEL)
        return "[" + ", ".join(names) + "]"

    def __repr__(self) -> str:  # pragma: no cover - debug aid
        return (
            f"DispatchTable(operator={self._operator_name!r}, "
            f"kernels={self.list_all_dispatch_keys()})"
        )
