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

from dataclasses import dataclass, field
from typing import final

__all__ = [
    "FunctionSchema",
    "OperatorName",
]


@final
@dataclass(frozen=True)
class OperatorName:
    """Qualified operator name, e.g. ``aten::add`` with overload ``Tensor``."""

    name: str
    overload_name: str = ""

    def __str__(self) -> str:
        if self.overload_name:
            return f"{self.name}.{self.overload_name}"
        return self.name


@final
@dataclass(frozen=True)
class FunctionSchema:
    """Signature of an operator as seen by the dispatcher.

    Only the parts the dispatcher needs are kept: the operator name and the
    argument/return names. Parsing schema strings is not supported.
    """

    name: str
    overload_name: str = ""
    arguments: tuple[str, ...] = field(default=())
    returns: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("FunctionSchema requires a non-empty name")
        object.__setattr__(self, "arguments", tuple(self.arguments))
        object.__setattr__(self, "returns", tuple(self.returns))

    @property
    def operator_name(self) -> OperatorName:
        return OperatorName(self.name, self.overload_name)

    @classmethod
    def from_name(
        cls,
        qualified_name: str,
        arguments: tuple[str, ...] = (),
        returns: tuple[str, ...] = (),
    ) -> FunctionSchema:
        """Build a schema from ``name`` or ``name.overload``.

        Only the last ``.`` separates the overload, so ``aten::add.Tensor``
        yields name ``aten::add`` and overload ``Tensor``.
        """
        name, sep, overload = qualified_name.rpartition(".")
        if not sep:
            name, overload = qualified_name, ""
        return cls(name, overload, arguments, returns)

    def __str__(self) -> str:
        args = ", ".join(self.arguments)
        rets = ", ".join(self.returns)
        return f"{self.operator_name}({args}) -> ({rets})"
