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

"""Tests for dispatch keys, schemas and key extractors."""

import pytest

from opdispatch.dispatch_key import (
    NUM_DISPATCH_KEYS,
    DispatchKey,
    dispatch_key_to_string,
    parse_dispatch_key,
)
from opdispatch.errors import DispatchError, UnknownDispatchKeyError
from opdispatch.key_extractor import DispatchKeyExtractor
from opdispatch.schema import FunctionSchema, OperatorName


class TestDispatchKey:
    def test_ordinals_are_dense(self):
        assert [int(k) for k in DispatchKey] == list(range(NUM_DISPATCH_KEYS))
        assert DispatchKey.UNDEFINED == 0

    def test_to_string(self):
        assert str(DispatchKey.CPU) == "CPU"
        assert dispatch_key_to_string(DispatchKey.SPARSE_CUDA) == "SPARSE_CUDA"
        assert f"{DispatchKey.XLA}" == "XLA"

    @pytest.mark.parametrize("text", ["cpu", "CPU", " Cpu "])
    def test_parse(self, text):
        assert parse_dispatch_key(text) is DispatchKey.CPU

    def test_parse_unknown(self):
        with pytest.raises(UnknownDispatchKeyError, match="unknown dispatch key"):
            parse_dispatch_key("tpu")
        assert issubclass(UnknownDispatchKeyError, DispatchError)
        assert issubclass(UnknownDispatchKeyError, ValueError)


class TestSchema:
    def test_operator_name(self):
        assert str(OperatorName("aten::add")) == "aten::add"
        assert str(OperatorName("aten::add", "out")) == "aten::add.out"

    def test_from_name(self):
        schema = FunctionSchema.from_name("aten::add.Tensor", ("self", "other"))
        assert schema.name == "aten::add"
        assert schema.overload_name == "Tensor"
        assert schema.operator_name == OperatorName("aten::add", "Tensor")

    def test_from_name_without_overload(self):
        schema = FunctionSchema.from_name("relu")
        assert schema.name == "relu"
        assert schema.overload_name == ""

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            FunctionSchema("")

    def test_str(self):
        schema = FunctionSchema("mul", arguments=["a", "b"], returns=["c"])
        assert schema.arguments == ("a", "b")
        assert str(schema) == "mul(a, b) -> (c)"


def test_key_extractor_from_schema():
    schema = FunctionSchema("where", "self", ("cond", "self", "other"))
    extractor = DispatchKeyExtractor.make(schema)
    assert extractor.operator_name == "where.self"
    assert extractor.num_args == 3
