"""Ingress shapes for ``extensions/v1beta1``, ``networking.k8s.io/v1beta1``
and ``networking.k8s.io/v1``.

The two beta versions are wire-identical.  ``networking.k8s.io/v1``
replaced ``serviceName``/``servicePort`` with a nested ``service`` backend
and renamed ``backend`` to ``defaultBackend``.
"""

from __future__ import annotations

from k8sexport.catalog.core_v1 import LOAD_BALANCER_STATUS, TYPED_LOCAL_OBJECT_REFERENCE
from k8sexport.catalog.meta import INT_OR_STRING, OBJECT_META
from k8sexport.catalog.schema import (
    FieldSpec,
    MessageSpec,
    inline,
    int32,
    message,
    messages,
    string,
    strings,
)

INGRESS_TLS = MessageSpec.of(
    "IngressTLS",
    strings(1, "hosts"),
    string(2, "secretName"),
)

INGRESS_STATUS = MessageSpec.of(
    "IngressStatus",
    message(1, "loadBalancer", LOAD_BALANCER_STATUS),
)


def _ingress(version: str, backend: MessageSpec, default_backend: FieldSpec) -> MessageSpec:
    path = MessageSpec.of(
        f"HTTPIngressPath.{version}",
        string(1, "path"),
        message(2, "backend", backend),
        string(3, "pathType", keep_zero=True),
    )
    rule_value = MessageSpec.of(
        f"IngressRuleValue.{version}",
        message(
            1,
            "http",
            MessageSpec.of(f"HTTPIngressRuleValue.{version}", messages(1, "paths", path)),
        ),
    )
    rule = MessageSpec.of(
        f"IngressRule.{version}",
        string(1, "host"),
        inline(2, rule_value),
    )
    spec = MessageSpec.of(
        f"IngressSpec.{version}",
        default_backend,
        messages(2, "tls", INGRESS_TLS),
        messages(3, "rules", rule),
        string(4, "ingressClassName", keep_zero=True),
    )
    return MessageSpec.of(
        f"Ingress.{version}",
        message(1, "metadata", OBJECT_META),
        message(2, "spec", spec),
        message(3, "status", INGRESS_STATUS),
    )


INGRESS_BACKEND_V1BETA1 = MessageSpec.of(
    "IngressBackend.v1beta1",
    string(1, "serviceName"),
    message(2, "servicePort", INT_OR_STRING),
    message(3, "resource", TYPED_LOCAL_OBJECT_REFERENCE),
)

INGRESS_V1BETA1 = _ingress(
    "v1beta1",
    INGRESS_BACKEND_V1BETA1,
    message(1, "backend", INGRESS_BACKEND_V1BETA1),
)

SERVICE_BACKEND_PORT = MessageSpec.of(
    "ServiceBackendPort",
    string(1, "name"),
    int32(2, "number"),
)

INGRESS_BACKEND_V1 = MessageSpec.of(
    "IngressBackend.v1",
    message(3, "resource", TYPED_LOCAL_OBJECT_REFERENCE),
    message(
        4,
        "service",
        MessageSpec.of(
            "IngressServiceBackend",
            string(1, "name"),
            message(2, "port", SERVICE_BACKEND_PORT),
        ),
    ),
)

INGRESS_V1 = _ingress(
    "v1",
    INGRESS_BACKEND_V1,
    message(5, "defaultBackend", INGRESS_BACKEND_V1),
)
