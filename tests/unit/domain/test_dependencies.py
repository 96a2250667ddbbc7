import pytest
from pydantic import ValidationError

from ctmpl.domain.dependencies import (
    DEPENDENCY_TYPES,
    KeyDependency,
    KeyPrefixDependency,
    ServiceDependency,
)


class TestServiceDependency:
    """Parsing of [tag.]name[@datacenter][:port] service identifiers."""

    def test_name_only(self):
        dep = ServiceDependency.parse("webapp")
        assert dep.name == "webapp"
        assert dep.tag is None
        assert dep.datacenter is None
        assert dep.port is None

    def test_tag_and_name(self):
        dep = ServiceDependency.parse("release.webapp")
        assert dep.tag == "release"
        assert dep.name == "webapp"

    def test_all_parts(self):
        dep = ServiceDependency.parse("release.webapp@nyc1:8500")
        assert dep.tag == "release"
        assert dep.name == "webapp"
        assert dep.datacenter == "nyc1"
        assert dep.port == 8500

    def test_key_is_raw_spec(self):
        assert ServiceDependency.parse("release.webapp@nyc1").key == "release.webapp@nyc1"

    @pytest.mark.parametrize("raw", ["totally&not&a&valid&service", "", "web app", "webapp@"])
    def test_invalid_format_raises(self, raw):
        with pytest.raises(ValueError, match="invalid service dependency format"):
            ServiceDependency.parse(raw)


class TestKeyDependencies:
    def test_key_path_without_datacenter(self):
        dep = KeyDependency.parse("service/redis/maxconns")
        assert dep.path == "service/redis/maxconns"
        assert dep.datacenter is None
        assert dep.key == "service/redis/maxconns"

    def test_key_path_with_datacenter(self):
        dep = KeyDependency.parse("service/redis/maxconns@nyc1")
        assert dep.path == "service/redis/maxconns"
        assert dep.datacenter == "nyc1"
        assert dep.key == "service/redis/maxconns@nyc1"

    def test_key_prefix(self):
        dep = KeyPrefixDependency.parse("service/redis/config@sfo2")
        assert dep.prefix == "service/redis/config"
        assert dep.datacenter == "sfo2"


class TestIdentity:
    def test_same_variant_same_key_equal(self):
        assert KeyDependency.parse("a/b") == KeyDependency.parse("a/b")
        assert hash(KeyDependency.parse("a/b")) == hash(KeyDependency.parse("a/b"))

    def test_different_variants_not_equal(self):
        assert KeyDependency.parse("a/b") != KeyPrefixDependency.parse("a/b")

    def test_hash_code_includes_variant(self):
        assert KeyDependency.parse("a/b").hash_code() == "KeyDependency|a/b"
        assert KeyPrefixDependency.parse("a/b").hash_code() == "KeyPrefixDependency|a/b"
        assert ServiceDependency.parse("web").hash_code() == "ServiceDependency|web"

    def test_display_uses_operation_name(self):
        assert KeyPrefixDependency.parse("a/b").display() == "keyPrefix(a/b)"
        assert ServiceDependency.parse("release.webapp").display() == "service(release.webapp)"

    def test_frozen(self):
        dep = KeyDependency.parse("a/b")
        with pytest.raises(ValidationError):
            dep.raw = "c/d"

    def test_operation_table(self):
        assert DEPENDENCY_TYPES == {
            "service": ServiceDependency,
            "key": KeyDependency,
            "keyPrefix": KeyPrefixDependency,
        }
