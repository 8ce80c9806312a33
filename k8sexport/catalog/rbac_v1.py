"""``rbac.authorization.k8s.io/v1`` shapes."""

from __future__ import annotations

from k8sexport.catalog.meta import LABEL_SELECTOR, OBJECT_META
from k8sexport.catalog.schema import MessageSpec, message, messages, string, strings

POLICY_RULE = MessageSpec.of(
    "PolicyRule",
    strings(1, "verbs"),
    strings(2, "apiGroups"),
    strings(3, "resources"),
    strings(4, "resourceNames"),
    strings(5, "nonResourceURLs"),
)

SUBJECT = MessageSpec.of(
    "Subject",
    string(1, "kind"),
    string(2, "apiGroup"),
    string(3, "name"),
    string(4, "namespace"),
)

ROLE_REF = MessageSpec.of(
    "RoleRef",
    string(1, "apiGroup"),
    string(2, "kind"),
    string(3, "name"),
)

ROLE = MessageSpec.of(
    "Role",
    message(1, "metadata", OBJECT_META),
    messages(2, "rules", POLICY_RULE),
)

CLUSTER_ROLE = MessageSpec.of(
    "ClusterRole",
    message(1, "metadata", OBJECT_META),
    messages(2, "rules", POLICY_RULE),
    message(
        3,
        "aggregationRule",
        MessageSpec.of("AggregationRule", messages(1, "clusterRoleSelectors", LABEL_SELECTOR)),
    ),
)

ROLE_BINDING = MessageSpec.of(
    "RoleBinding",
    message(1, "metadata", OBJECT_META),
    messages(2, "subjects", SUBJECT),
    message(3, "roleRef", ROLE_REF),
)

# Same wire shape; kept distinct so catalog listings name the right kind.
CLUSTER_ROLE_BINDING = MessageSpec.of(
    "ClusterRoleBinding",
    message(1, "metadata", OBJECT_META),
    messages(2, "subjects", SUBJECT),
    message(3, "roleRef", ROLE_REF),
)
