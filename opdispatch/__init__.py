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

"""Per-operator kernel dispatch tables.

A DispatchTable maps a DispatchKey (the backend that should handle a call)
to the KernelFunction registered for one operator, with an optional
catch-all kernel as fallback.
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("opdispatch")
except PackageNotFoundError:
    # Source checkout without an installed distribution
    __version__ = "0.0.0-dev"

from opdispatch.diagnostics import DiagnosticSink, LoggingSink, WarningsSink
from opdispatch.dispatch_key import (
    NUM_DISPATCH_KEYS,
    DispatchKey,
    dispatch_key_to_string,
    parse_dispatch_key,
)
from opdispatch.dispatch_table import CATCHALL_LABEL, DispatchTable
from opdispatch.errors import (
    DispatchError,
    InternalAssertError,
    InvalidKernelError,
    UnknownDispatchKeyError,
)
from opdispatch.kernel import BoxedKernelFn, KernelFunction, Stack
from opdispatch.key_extractor import DispatchKeyExtractor
from opdispatch.logging_config import disable_logging, get_logger, setup_logging
from opdispatch.schema import FunctionSchema, OperatorName
from opdispatch.slot_table import (
    KernelSlotTable,
    RemoveKernelIfExistsResult,
    SetKernelResult,
)

__all__ = [
    "CATCHALL_LABEL",
    "NUM_DISPATCH_KEYS",
    "BoxedKernelFn",
    "DiagnosticSink",
    "DispatchError",
    "DispatchKey",
    "DispatchKeyExtractor",
    "DispatchTable",
    "FunctionSchema",
    "InternalAssertError",
    "InvalidKernelError",
    "KernelFunction",
    "KernelSlotTable",
    "LoggingSink",
    "OperatorName",
    "RemoveKernelIfExistsResult",
    "SetKernelResult",
    "Stack",
    "UnknownDispatchKeyError",
    "WarningsSink",
    "disable_logging",
    "dispatch_key_to_string",
    "get_logger",
    "parse_dispatch_key",
    "setup_logging",
]
