"""Tests for the resource catalog schemas and special-type rendering."""

from __future__ import annotations

import pytest

from k8sexport.catalog import DEFAULT_RESOURCE_TYPES
from k8sexport.catalog.apps_v1 import DEPLOYMENT
from k8sexport.catalog.core_v1 import CONFIG_MAP, SECRET, SERVICE, VOLUME
from k8sexport.catalog.coordination import LEASE
from k8sexport.catalog.meta import (
    FIELDS_V1,
    INT_OR_STRING,
    MICRO_TIME,
    OBJECT_META,
    QUANTITY,
    TIME,
)
from k8sexport.catalog.networking import INGRESS_V1
from k8sexport.catalog.rbac_v1 import CLUSTER_ROLE_BINDING
from k8sexport.catalog.schema import decode_message
from k8sexport.core.errors import PayloadDecodeError


class TestSpecialTypes:
    def test_time(self, pb):
        assert decode_message(TIME, pb.uint(1, 1_600_000_000)) == "2020-09-13T12:26:40Z"

    def test_time_drops_nanos(self, pb):
        buf = pb.uint(1, 0) + pb.uint(2, 999_999_999)
        assert decode_message(TIME, buf) == "1970-01-01T00:00:00Z"

    def test_empty_time_is_null(self):
        assert decode_message(TIME, b"") is None

    def test_micro_time(self, pb):
        buf = pb.uint(1, 1_600_000_000) + pb.uint(2, 123_456_789)
        assert decode_message(MICRO_TIME, buf) == "2020-09-13T12:26:40.123456Z"

    def test_time_out_of_range(self, pb):
        with pytest.raises(PayloadDecodeError, match="Time"):
            decode_message(TIME, pb.uint(1, 1 << 62))

    def test_quantity(self, pb):
        assert decode_message(QUANTITY, pb.string(1, "500m")) == "500m"
        assert decode_message(QUANTITY, b"") == "0"

    def test_int_or_string(self, pb):
        assert decode_message(INT_OR_STRING, pb.uint(2, 8080)) == 8080
        assert decode_message(INT_OR_STRING, pb.uint(1, 1) + pb.string(3, "http")) == "http"
        assert decode_message(INT_OR_STRING, b"") == 0

    def test_fields_v1(self, pb):
        assert decode_message(FIELDS_V1, pb.raw(1, b'{"f:data":{}}')) == {"f:data": {}}


class TestObjectMeta:
    def test_metadata(self, pb):
        buf = (
            pb.string(1, "web")
            + pb.string(3, "prod")
            + pb.string(5, "uid-1")
            + pb.string(6, "42")
            + pb.message(8, pb.uint(1, 0))
            + pb.map_entry(11, "app", "web")
            + pb.message(13, pb.string(1, "ReplicaSet"), pb.string(3, "web-1"), pb.uint(6, 1))
            + pb.string(14, "kubernetes")
        )
        assert decode_message(OBJECT_META, buf) == {
            "name": "web",
            "namespace": "prod",
            "uid": "uid-1",
            "resourceVersion": "42",
            "creationTimestamp": "1970-01-01T00:00:00Z",
            "labels": {"app": "web"},
            "ownerReferences": [
                {"kind": "ReplicaSet", "name": "web-1", "controller": True}
            ],
            "finalizers": ["kubernetes"],
        }

    def test_empty_creation_timestamp_is_null(self, pb):
        assert decode_message(OBJECT_META, pb.message(8)) == {}


class TestResources:
    def test_config_map(self, pb, make_config_map):
        raw = make_config_map("foo", "default", {"b": "2", "a": "1"})
        assert decode_message(CONFIG_MAP, raw) == {
            "metadata": {"name": "foo", "namespace": "default"},
            "data": {"a": "1", "b": "2"},
        }

    def test_secret_data_is_base64(self, pb):
        raw = pb.object_meta("s", "default") + pb.map_entry(2, "token", b"abc") + pb.string(3, "Opaque")
        assert decode_message(SECRET, raw) == {
            "metadata": {"name": "s", "namespace": "default"},
            "data": {"token": "YWJj"},
            "type": "Opaque",
        }

    def test_service_ports(self, pb):
        port = pb.message(
            1,
            pb.string(1, "http"),
            pb.string(2, "TCP"),
            pb.uint(3, 80),
            pb.message(4, pb.uint(1, 1), pb.string(3, "web")),
        )
        raw = pb.object_meta("svc", "default") + pb.message(2, port, pb.string(4, "ClusterIP"))
        spec = decode_message(SERVICE, raw)["spec"]
        assert spec == {
            "ports": [
                {"name": "http", "protocol": "TCP", "port": 80, "targetPort": "web"}
            ],
            "type": "ClusterIP",
        }

    def test_deployment_keeps_zero_replicas(self, pb):
        container = pb.message(2, pb.string(1, "app"), pb.string(2, "nginx:1.25"))
        template = pb.message(3, pb.message(2, container))
        raw = pb.object_meta("web", "default") + pb.message(2, pb.uint(1, 0), template)
        assert decode_message(DEPLOYMENT, raw)["spec"] == {
            "replicas": 0,
            "template": {"spec": {"containers": [{"name": "app", "image": "nginx:1.25"}]}},
        }

    def test_volume_source_inlined(self, pb):
        raw = pb.string(1, "cfg") + pb.message(2, pb.message(19, pb.message(1, pb.string(1, "app-config"))))
        assert decode_message(VOLUME, raw) == {"name": "cfg", "configMap": {"name": "app-config"}}

    def test_ingress_v1(self, pb):
        backend = pb.message(4, pb.string(1, "web"), pb.message(2, pb.uint(2, 80)))
        path = pb.message(1, pb.string(1, "/"), pb.message(2, backend), pb.string(3, "Prefix"))
        rule = pb.message(3, pb.string(1, "example.com"), pb.message(2, pb.message(1, path)))
        raw = pb.object_meta("ing", "default") + pb.message(2, rule)
        assert decode_message(INGRESS_V1, raw)["spec"] == {
            "rules": [
                {
                    "host": "example.com",
                    "http": {
                        "paths": [
                            {
                                "path": "/",
                                "pathType": "Prefix",
                                "backend": {"service": {"name": "web", "port": {"number": 80}}},
                            }
                        ]
                    },
                }
            ]
        }

    def test_cluster_role_binding(self, pb):
        raw = (
            pb.object_meta("admins")
            + pb.message(2, pb.string(1, "Group"), pb.string(2, "rbac.authorization.k8s.io"), pb.string(3, "ops"))
            + pb.message(3, pb.string(1, "rbac.authorization.k8s.io"), pb.string(2, "ClusterRole"), pb.string(3, "admin"))
        )
        assert decode_message(CLUSTER_ROLE_BINDING, raw) == {
            "metadata": {"name": "admins"},
            "subjects": [{"kind": "Group", "apiGroup": "rbac.authorization.k8s.io", "name": "ops"}],
            "roleRef": {"apiGroup": "rbac.authorization.k8s.io", "kind": "ClusterRole", "name": "admin"},
        }

    def test_lease(self, pb):
        raw = pb.object_meta("node-1", "kube-node-lease") + pb.message(
            2, pb.string(1, "node-1"), pb.uint(2, 40), pb.message(4, pb.uint(1, 0), pb.uint(2, 5000))
        )
        assert decode_message(LEASE, raw)["spec"] == {
            "holderIdentity": "node-1",
            "leaseDurationSeconds": 40,
            "renewTime": "1970-01-01T00:00:00.000005Z",
        }


class TestCatalogCoverage:
    def test_every_schema_decodes_empty_payload(self):
        for entry in DEFAULT_RESOURCE_TYPES:
            assert entry.decode(b"") == {}, entry.key

    def test_every_schema_decodes_metadata(self, pb):
        raw = pb.object_meta("n", "ns")
        for entry in DEFAULT_RESOURCE_TYPES:
            assert entry.decode(raw) == {"metadata": {"name": "n", "namespace": "ns"}}, entry.key
