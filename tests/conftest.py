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

from __future__ import annotations

from collections.abc import Callable

import pytest

from opdispatch.dispatch_table import DispatchTable
from opdispatch.kernel import KernelFunction, Stack
from opdispatch.schema import FunctionSchema


class CapturingSink:
    """Diagnostic sink that records every message instead of logging it."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def sink() -> CapturingSink:
    return CapturingSink()


@pytest.fixture
def add_schema() -> FunctionSchema:
    return FunctionSchema("add", arguments=("self", "other"), returns=("out",))


@pytest.fixture
def table(add_schema: FunctionSchema, sink: CapturingSink) -> DispatchTable:
    return DispatchTable(add_schema, sink=sink)


def make_kernel(tag: str) -> KernelFunction:
    """A kernel whose result identifies which registration produced it."""

    def _kernel(*args):
        return tag

    _kernel.__name__ = f"kernel_{tag}"
    return KernelFunction.from_unboxed(_kernel)


@pytest.fixture
def kernel_factory() -> Callable[[str], KernelFunction]:
    return make_kernel


@pytest.fixture
def legacy_fn() -> Callable[[Stack], None]:
    """Boxed entry point that replaces the stack with the string "legacy"."""

    def _legacy_boxed(stack: Stack) -> None:
        stack.clear()
        stack.append("legacy")

    return _legacy_boxed
