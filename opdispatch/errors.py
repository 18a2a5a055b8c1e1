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

"""Exceptions raised by opdispatch.

Only programming errors are raised. Expected outcomes such as a lookup miss
or overwriting a registration are reported through return values.
"""

from __future__ import annotations

__all__ = [
    "DispatchError",
    "InternalAssertError",
    "InvalidKernelError",
    "UnknownDispatchKeyError",
    "internal_assert",
]


class DispatchError(Exception):
    """Base exception for dispatch-related errors."""


class InternalAssertError(DispatchError, AssertionError):
    """Raised when a registration call violates the dispatch table contract.

    These indicate a bug in the registering backend, e.g. registering a kernel
    for DispatchKey.UNDEFINED, and are not meant to be caught.
    """


class InvalidKernelError(DispatchError, RuntimeError):
    """Raised when an empty KernelFunction is invoked."""


class UnknownDispatchKeyError(DispatchError, ValueError):
    """Raised when a string does not name a DispatchKey."""


def internal_assert(cond: bool, msg: str = "") -> None:
    if not cond:
        raise InternalAssertError(msg or "internal assertion failed")
