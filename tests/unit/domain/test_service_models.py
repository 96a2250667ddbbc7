from itertools import permutations

import pytest
from pydantic import ValidationError

from ctmpl.domain.models import KeyPair, Service, TemplateContext, sort_services


def _svc(node: str, id: str, **kwargs) -> Service:
    return Service(node=node, id=id, **kwargs)


class TestSortServices:
    """Services sort by node name, then instance ID, stably."""

    EXPECTED = [
        _svc("frontend01", "1"),
        _svc("frontend01", "2"),
        _svc("frontend02", "1"),
    ]

    @pytest.mark.parametrize("order", list(permutations(range(3))))
    def test_every_permutation_sorts_the_same(self, order):
        services = [self.EXPECTED[i] for i in order]
        assert sort_services(services) == self.EXPECTED

    def test_node_tie_broken_by_id(self):
        result = sort_services([_svc("frontend01", "2"), _svc("frontend01", "1")])
        assert [s.id for s in result] == ["1", "2"]

    def test_stable_for_full_ties(self):
        first = _svc("n1", "a", address="10.0.0.1")
        second = _svc("n1", "a", address="10.0.0.2")
        assert sort_services([first, second]) == [first, second]
        assert sort_services([second, first]) == [second, first]

    def test_returns_new_list(self):
        services = [_svc("b", "1"), _svc("a", "1")]
        result = sort_services(services)
        assert result is not services
        assert [s.node for s in services] == ["b", "a"]

    def test_empty(self):
        assert sort_services([]) == []


class TestRecords:
    def test_service_accepts_backend_field_names(self):
        svc = Service.model_validate(
            {"Node": "n1", "Address": "10.0.0.1", "ID": "web1", "Name": "web", "Port": 8080, "Tags": ["a"]}
        )
        assert svc.node == "n1"
        assert svc.address == "10.0.0.1"
        assert svc.id == "web1"
        assert svc.name == "web"
        assert svc.port == 8080
        assert svc.tags == ("a",)

    def test_keypair_coerces_numeric_value(self):
        pair = KeyPair.model_validate({"Key": "maxconns", "Value": 11})
        assert pair.value == "11"

    def test_keypair_requires_key(self):
        with pytest.raises(ValidationError):
            KeyPair.model_validate({"Value": "x"})


class TestTemplateContext:
    def test_defaults_are_empty(self):
        ctx = TemplateContext()
        assert ctx.services == {}
        assert ctx.keys == {}
        assert ctx.key_prefixes == {}

    def test_service_lists_sorted_on_construction(self):
        ctx = TemplateContext(
            services={"web": [_svc("frontend02", "1"), _svc("frontend01", "2"), _svc("frontend01", "1")]}
        )
        assert [(s.node, s.id) for s in ctx.services["web"]] == [
            ("frontend01", "1"),
            ("frontend01", "2"),
            ("frontend02", "1"),
        ]

    def test_key_prefix_order_kept(self):
        ctx = TemplateContext(
            key_prefixes={"cfg": [KeyPair(key="z", value="1"), KeyPair(key="a", value="2")]}
        )
        assert [p.key for p in ctx.key_prefixes["cfg"]] == ["z", "a"]

    def test_aliases(self):
        ctx = TemplateContext.model_validate(
            {
                "Services": {"web": []},
                "Keys": {"a/b": 3},
                "KeyPrefixes": {"c": [{"Key": "k", "Value": "v"}]},
            }
        )
        assert ctx.services == {"web": []}
        assert ctx.keys == {"a/b": "3"}
        assert ctx.key_prefixes["c"] == [KeyPair(key="k", value="v")]

    def test_unknown_table_rejected(self):
        with pytest.raises(ValidationError):
            TemplateContext.model_validate({"service": {}})

    def test_frozen(self):
        ctx = TemplateContext()
        with pytest.raises(ValidationError):
            ctx.keys = {"a": "b"}

    def test_value_equal_contexts_compare_equal(self):
        a = TemplateContext(keys={"a": "1"}, services={"w": [_svc("n", "1")]})
        b = TemplateContext(keys={"a": "1"}, services={"w": [_svc("n", "1")]})
        assert a == b
