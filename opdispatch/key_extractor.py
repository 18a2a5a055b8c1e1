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
from dataclasses import dataclass

from opdispatch.schema import FunctionSchema

__all__ = [
    "DispatchKeyExtractor",
    "KeyExtractorFactory",
]


@dataclass(frozen=True)
class DispatchKeyExtractor:
    """Per-operator strategy for finding the dispatch key of a call.

    Built once from the operator schema and handed out by the dispatch table
    to whoever performs the actual dispatch. The table itself never calls it.
    """

    operator_name: str
    num_args: int

    @classmethod
    def make(cls, schema: FunctionSchema) -> DispatchKeyExtractor:
        return cls(
            operator_name=str(schema.operator_name), num_args=len(schema.arguments)
        )


KeyExtractorFactory = Callable[[FunctionSchema], object]
