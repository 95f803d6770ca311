# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for store query types."""

import pytest

from dscache.store.types import EntityQuery, PropertyFilter, StoredEntity


class TestPropertyFilter:
    def test_unsupported_operator(self):
        with pytest.raises(ValueError):
            PropertyFilter("a", ">", 1)  # type: ignore[arg-type]

    def test_equality(self):
        assert PropertyFilter.eq("a", 1).matches({"a": 1})
        assert not PropertyFilter.eq("a", 1).matches({"a": 2})
        assert not PropertyFilter.eq("a", 1).matches({})

    def test_membership(self):
        assert PropertyFilter.eq("tags", "t").matches({"tags": ["s", "t"]})
        assert not PropertyFilter.eq("tags", "t").matches({"tags": []})

    def test_less_or_equal(self):
        f = PropertyFilter.le("ttl", 10)
        assert f.matches({"ttl": 10})
        assert f.matches({"ttl": 3})
        assert not f.matches({"ttl": 11})
        assert not f.matches({"ttl": None})
        assert not f.matches({})


class TestEntityQuery:
    def test_filters_combine_with_and(self):
        query = EntityQuery(kind="K", filters=(PropertyFilter.eq("a", 1), PropertyFilter.eq("b", 2)))
        assert query.matches({"a": 1, "b": 2})
        assert not query.matches({"a": 1, "b": 3})

    @pytest.mark.parametrize("kwargs", [{"page_size": 0}, {"limit": 0}])
    def test_invalid_bounds(self, kwargs):
        with pytest.raises(ValueError):
            EntityQuery(kind="K", **kwargs)


class TestStoredEntity:
    def test_get(self):
        entity = StoredEntity(key=1, properties={"a": 1})
        assert entity.get("a") == 1
        assert entity.get("b", "x") == "x"
