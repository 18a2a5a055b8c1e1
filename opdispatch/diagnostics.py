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

"""Diagnostic sinks for non-fatal dispatch table warnings.

A sink is any callable taking the message string. Dispatch tables call
:func:`emit` rather than the sink directly so a failing sink never breaks
the registration that produced the message.
"""

from __future__ import annotations

import logging
import warnings
from typing import Protocol

from opdispatch.logging_config import get_logger

__all__ = [
    "DiagnosticSink",
    "LoggingSink",
    "WarningsSink",
    "emit",
]

logger = get_logger(__name__)


class DiagnosticSink(Protocol):
    def __call__(self, message: str) -> None: ...


class LoggingSink:
    """Write diagnostics to a logger at WARNING level (the default sink)."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self.logger = target if target is not None else logger

    def __call__(self, message: str) -> None:
        self.logger.warning(message)

    def __repr__(self) -> str:
        return f"LoggingSink({self.logger.name!r})"


class WarningsSink:
    """Raise diagnostics as Python warnings so warning filters apply."""

    def __init__(self, category: type[Warning] = UserWarning) -> None:
        self.category = category

    def __call__(self, message: str) -> None:
        warnings.warn(message, self.category, stacklevel=4)


def emit(sink: DiagnosticSink, message: str) -> None:
    try:
        sink(message)
    except Exception:  # never fail a registration because of a diagnostic
        logger.debug("diagnostic sink %r failed", sink, exc_info=True)
