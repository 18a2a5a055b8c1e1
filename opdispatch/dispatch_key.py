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

"""Dispatch keys: the closed set of backends a kernel can be registered for."""

from __future__ import annotations

import enum

from opdispatch.errors import UnknownDispatchKeyError

__all__ = [
    "NUM_DISPATCH_KEYS",
    "DispatchKey",
    "dispatch_key_to_string",
    "parse_dispatch_key",
]


class DispatchKey(enum.IntEnum):
    """Backend selector for a single operator call.

    Ordinals are contiguous starting at 0 so a key can index a dense table
    directly. UNDEFINED is a sentinel and never a registration target.
    """

    UNDEFINED = 0
    CPU = 1
    CUDA = 2
    HIP = 3
    MSNPU = 4
    XLA = 5
    MKLDNN_CPU = 6
    QUANTIZED_CPU = 7
    COMPLEX_CPU = 8
    COMPLEX_CUDA = 9
    SPARSE_CPU = 10
    SPARSE_CUDA = 11
    VARIABLE = 12
    TESTING_ONLY_GENERIC_WRAPPER = 13
    TESTING_ONLY_GENERIC_MODE = 14

    def __str__(self) -> str:
        return self.name

    def __format__(self, format_spec: str) -> str:
        return format(self.name, format_spec)


NUM_DISPATCH_KEYS = len(DispatchKey)


def dispatch_key_to_string(key: DispatchKey) -> str:
    return DispatchKey(key).name


def parse_dispatch_key(text: str) -> DispatchKey:
    """Return the DispatchKey named by ``text`` (case-insensitive).

    Raises:
        UnknownDispatchKeyError: If no key has that name.
    """
    try:
        return DispatchKey[text.strip().upper()]
    except KeyError:
        known = ", ".join(k.name for k in DispatchKey)
        raise UnknownDispatchKeyError(
            f"unknown dispatch key {text!r}; expected one of: {known}"
        ) from None
