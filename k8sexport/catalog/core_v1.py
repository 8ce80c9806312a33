"""Core group (``v1``) resource shapes.

Field numbers follow ``k8s.io/api/core/v1/generated.proto``.  Only the
fields an export reader cares about are listed; anything else on the wire
is skipped by the decoder.
"""

from __future__ import annotations

from k8sexport.catalog.meta import (
    INT_OR_STRING,
    LABEL_SELECTOR,
    OBJECT_META,
    QUANTITY,
    TIME,
)
from k8sexport.catalog.schema import (
    MessageSpec,
    boolean,
    bytes_map,
    inline,
    int32,
    int64,
    int64s,
    message,
    message_map,
    messages,
    string,
    string_map,
    strings,
)

# ---------------------------------------------------------------------------
# References and selectors
# ---------------------------------------------------------------------------

OBJECT_REFERENCE = MessageSpec.of(
    "ObjectReference",
    string(1, "kind"),
    string(2, "namespace"),
    string(3, "name"),
    string(4, "uid"),
    string(5, "apiVersion"),
    string(6, "resourceVersion"),
    string(7, "fieldPath"),
)

LOCAL_OBJECT_REFERENCE = MessageSpec.of(
    "LocalObjectReference",
    string(1, "name"),
)

TYPED_LOCAL_OBJECT_REFERENCE = MessageSpec.of(
    "TypedLocalObjectReference",
    string(1, "apiGroup", keep_zero=True),
    string(2, "kind"),
    string(3, "name"),
)

NODE_SELECTOR_REQUIREMENT = MessageSpec.of(
    "NodeSelectorRequirement",
    string(1, "key"),
    string(2, "operator"),
    strings(3, "values"),
)

NODE_SELECTOR_TERM = MessageSpec.of(
    "NodeSelectorTerm",
    messages(1, "matchExpressions", NODE_SELECTOR_REQUIREMENT),
    messages(2, "matchFields", NODE_SELECTOR_REQUIREMENT),
)

NODE_SELECTOR = MessageSpec.of(
    "NodeSelector",
    messages(1, "nodeSelectorTerms", NODE_SELECTOR_TERM),
)

RESOURCE_REQUIREMENTS = MessageSpec.of(
    "ResourceRequirements",
    message_map(1, "limits", QUANTITY),
    message_map(2, "requests", QUANTITY),
)

LOAD_BALANCER_INGRESS = MessageSpec.of(
    "LoadBalancerIngress",
    string(1, "ip"),
    string(2, "hostname"),
)

LOAD_BALANCER_STATUS = MessageSpec.of(
    "LoadBalancerStatus",
    messages(1, "ingress", LOAD_BALANCER_INGRESS),
)

# ---------------------------------------------------------------------------
# Volumes
# ---------------------------------------------------------------------------

HOST_PATH_VOLUME_SOURCE = MessageSpec.of(
    "HostPathVolumeSource",
    string(1, "path"),
    string(2, "type", keep_zero=True),
)

EMPTY_DIR_VOLUME_SOURCE = MessageSpec.of(
    "EmptyDirVolumeSource",
    string(1, "medium"),
    message(2, "sizeLimit", QUANTITY),
)

KEY_TO_PATH = MessageSpec.of(
    "KeyToPath",
    string(1, "key"),
    string(2, "path"),
    int32(3, "mode", keep_zero=True),
)

SECRET_VOLUME_SOURCE = MessageSpec.of(
    "SecretVolumeSource",
    string(1, "secretName"),
    messages(2, "items", KEY_TO_PATH),
    int32(3, "defaultMode", keep_zero=True),
    boolean(4, "optional", keep_zero=True),
)

NFS_VOLUME_SOURCE = MessageSpec.of(
    "NFSVolumeSource",
    string(1, "server"),
    string(2, "path"),
    boolean(3, "readOnly"),
)

PVC_VOLUME_SOURCE = MessageSpec.of(
    "PersistentVolumeClaimVolumeSource",
    string(1, "claimName"),
    boolean(2, "readOnly"),
)

CONFIG_MAP_VOLUME_SOURCE = MessageSpec.of(
    "ConfigMapVolumeSource",
    inline(1, LOCAL_OBJECT_REFERENCE),
    messages(2, "items", KEY_TO_PATH),
    int32(3, "defaultMode", keep_zero=True),
    boolean(4, "optional", keep_zero=True),
)

VOLUME_SOURCE = MessageSpec.of(
    "VolumeSource",
    message(1, "hostPath", HOST_PATH_VOLUME_SOURCE),
    message(2, "emptyDir", EMPTY_DIR_VOLUME_SOURCE),
    message(6, "secret", SECRET_VOLUME_SOURCE),
    message(7, "nfs", NFS_VOLUME_SOURCE),
    message(10, "persistentVolumeClaim", PVC_VOLUME_SOURCE),
    message(19, "configMap", CONFIG_MAP_VOLUME_SOURCE),
)

VOLUME = MessageSpec.of(
    "Volume",
    string(1, "name"),
    inline(2, VOLUME_SOURCE),
)

LOCAL_VOLUME_SOURCE = MessageSpec.of(
    "LocalVolumeSource",
    string(1, "path"),
    string(2, "fsType", keep_zero=True),
)

CSI_PERSISTENT_VOLUME_SOURCE = MessageSpec.of(
    "CSIPersistentVolumeSource",
    string(1, "driver"),
    string(2, "volumeHandle"),
    boolean(3, "readOnly"),
    string(4, "fsType"),
    string_map(5, "volumeAttributes"),
)

PERSISTENT_VOLUME_SOURCE = MessageSpec.of(
    "PersistentVolumeSource",
    message(3, "hostPath", HOST_PATH_VOLUME_SOURCE),
    message(5, "nfs", NFS_VOLUME_SOURCE),
    message(20, "local", LOCAL_VOLUME_SOURCE),
    message(22, "csi", CSI_PERSISTENT_VOLUME_SOURCE),
)

# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

CONTAINER_PORT = MessageSpec.of(
    "ContainerPort",
    string(1, "name"),
    int32(2, "hostPort"),
    int32(3, "containerPort"),
    string(4, "protocol"),
    string(5, "hostIP"),
)

OBJECT_FIELD_SELECTOR = MessageSpec.of(
    "ObjectFieldSelector",
    string(1, "apiVersion"),
    string(2, "fieldPath"),
)

RESOURCE_FIELD_SELECTOR = MessageSpec.of(
    "ResourceFieldSelector",
    string(1, "containerName"),
    string(2, "resource"),
    message(3, "divisor", QUANTITY),
)

KEY_SELECTOR = MessageSpec.of(
    "KeySelector",
    inline(1, LOCAL_OBJECT_REFERENCE),
    string(2, "key"),
    boolean(3, "optional", keep_zero=True),
)

ENV_VAR_SOURCE = MessageSpec.of(
    "EnvVarSource",
    message(1, "fieldRef", OBJECT_FIELD_SELECTOR),
    message(2, "resourceFieldRef", RESOURCE_FIELD_SELECTOR),
    message(3, "configMapKeyRef", KEY_SELECTOR),
    message(4, "secretKeyRef", KEY_SELECTOR),
)

ENV_VAR = MessageSpec.of(
    "EnvVar",
    string(1, "name"),
    string(2, "value"),
    message(3, "valueFrom", ENV_VAR_SOURCE),
)

ENV_SOURCE_REF = MessageSpec.of(
    "EnvSourceRef",
    inline(1, LOCAL_OBJECT_REFERENCE),
    boolean(2, "optional", keep_zero=True),
)

ENV_FROM_SOURCE = MessageSpec.of(
    "EnvFromSource",
    string(1, "prefix"),
    message(2, "configMapRef", ENV_SOURCE_REF),
    message(3, "secretRef", ENV_SOURCE_REF),
)

VOLUME_MOUNT = MessageSpec.of(
    "VolumeMount",
    string(1, "name"),
    boolean(2, "readOnly"),
    string(3, "mountPath"),
    string(4, "subPath"),
    string(5, "mountPropagation", keep_zero=True),
    string(6, "subPathExpr"),
)

EXEC_ACTION = MessageSpec.of(
    "ExecAction",
    strings(1, "command"),
)

HTTP_HEADER = MessageSpec.of(
    "HTTPHeader",
    string(1, "name"),
    string(2, "value", keep_zero=True),
)

HTTP_GET_ACTION = MessageSpec.of(
    "HTTPGetAction",
    string(1, "path"),
    message(2, "port", INT_OR_STRING),
    string(3, "host"),
    string(4, "scheme"),
    messages(5, "httpHeaders", HTTP_HEADER),
)

TCP_SOCKET_ACTION = MessageSpec.of(
    "TCPSocketAction",
    message(1, "port", INT_OR_STRING),
    string(2, "host"),
)

PROBE_HANDLER = MessageSpec.of(
    "ProbeHandler",
    message(1, "exec", EXEC_ACTION),
    message(2, "httpGet", HTTP_GET_ACTION),
    message(3, "tcpSocket", TCP_SOCKET_ACTION),
)

PROBE = MessageSpec.of(
    "Probe",
    inline(1, PROBE_HANDLER),
    int32(2, "initialDelaySeconds"),
    int32(3, "timeoutSeconds"),
    int32(4, "periodSeconds"),
    int32(5, "successThreshold"),
    int32(6, "failureThreshold"),
    int64(7, "terminationGracePeriodSeconds", keep_zero=True),
)

LIFECYCLE = MessageSpec.of(
    "Lifecycle",
    message(1, "postStart", PROBE_HANDLER),
    message(2, "preStop", PROBE_HANDLER),
)

CAPABILITIES = MessageSpec.of(
    "Capabilities",
    strings(1, "add"),
    strings(2, "drop"),
)

SE_LINUX_OPTIONS = MessageSpec.of(
    "SELinuxOptions",
    string(1, "user"),
    string(2, "role"),
    string(3, "type"),
    string(4, "level"),
)

SECURITY_CONTEXT = MessageSpec.of(
    "SecurityContext",
    message(1, "capabilities", CAPABILITIES),
    boolean(2, "privileged", keep_zero=True),
    message(3, "seLinuxOptions", SE_LINUX_OPTIONS),
    int64(4, "runAsUser", keep_zero=True),
    boolean(5, "runAsNonRoot", keep_zero=True),
    boolean(6, "readOnlyRootFilesystem", keep_zero=True),
    boolean(7, "allowPrivilegeEscalation", keep_zero=True),
    int64(8, "runAsGroup", keep_zero=True),
    string(9, "procMount", keep_zero=True),
)

CONTAINER = MessageSpec.of(
    "Container",
    string(1, "name"),
    string(2, "image"),
    strings(3, "command"),
    strings(4, "args"),
    string(5, "workingDir"),
    messages(6, "ports", CONTAINER_PORT),
    messages(7, "env", ENV_VAR),
    message(8, "resources", RESOURCE_REQUIREMENTS),
    messages(9, "volumeMounts", VOLUME_MOUNT),
    message(10, "livenessProbe", PROBE),
    message(11, "readinessProbe", PROBE),
    message(12, "lifecycle", LIFECYCLE),
    string(13, "terminationMessagePath"),
    string(14, "imagePullPolicy"),
    message(15, "securityContext", SECURITY_CONTEXT),
    boolean(16, "stdin"),
    boolean(17, "stdinOnce"),
    boolean(18, "tty"),
    messages(19, "envFrom", ENV_FROM_SOURCE),
    string(20, "terminationMessagePolicy"),
    message(22, "startupProbe", PROBE),
)

# ---------------------------------------------------------------------------
# Pod scheduling
# ---------------------------------------------------------------------------

PREFERRED_SCHEDULING_TERM = MessageSpec.of(
    "PreferredSchedulingTerm",
    int32(1, "weight", keep_zero=True),
    message(2, "preference", NODE_SELECTOR_TERM),
)

NODE_AFFINITY = MessageSpec.of(
    "NodeAffinity",
    message(1, "requiredDuringSchedulingIgnoredDuringExecution", NODE_SELECTOR),
    messages(2, "preferredDuringSchedulingIgnoredDuringExecution", PREFERRED_SCHEDULING_TERM),
)

POD_AFFINITY_TERM = MessageSpec.of(
    "PodAffinityTerm",
    message(1, "labelSelector", LABEL_SELECTOR),
    strings(2, "namespaces"),
    string(3, "topologyKey"),
    message(4, "namespaceSelector", LABEL_SELECTOR),
)

WEIGHTED_POD_AFFINITY_TERM = MessageSpec.of(
    "WeightedPodAffinityTerm",
    int32(1, "weight", keep_zero=True),
    message(2, "podAffinityTerm", POD_AFFINITY_TERM),
)

POD_AFFINITY = MessageSpec.of(
    "PodAffinity",
    messages(1, "requiredDuringSchedulingIgnoredDuringExecution", POD_AFFINITY_TERM),
    messages(2, "preferredDuringSchedulingIgnoredDuringExecution", WEIGHTED_POD_AFFINITY_TERM),
)

AFFINITY = MessageSpec.of(
    "Affinity",
    message(1, "nodeAffinity", NODE_AFFINITY),
    message(2, "podAffinity", POD_AFFINITY),
    message(3, "podAntiAffinity", POD_AFFINITY),
)

TOLERATION = MessageSpec.of(
    "Toleration",
    string(1, "key"),
    string(2, "operator"),
    string(3, "value"),
    string(4, "effect"),
    int64(5, "tolerationSeconds", keep_zero=True),
)

POD_SECURITY_CONTEXT = MessageSpec.of(
    "PodSecurityContext",
    message(1, "seLinuxOptions", SE_LINUX_OPTIONS),
    int64(2, "runAsUser", keep_zero=True),
    boolean(3, "runAsNonRoot", keep_zero=True),
    int64s(4, "supplementalGroups"),
    int64(5, "fsGroup", keep_zero=True),
    int64(6, "runAsGroup", keep_zero=True),
)

HOST_ALIAS = MessageSpec.of(
    "HostAlias",
    string(1, "ip"),
    strings(2, "hostnames"),
)

POD_SPEC = MessageSpec.of(
    "PodSpec",
    messages(1, "volumes", VOLUME),
    messages(2, "containers", CONTAINER),
    string(3, "restartPolicy"),
    int64(4, "terminationGracePeriodSeconds", keep_zero=True),
    int64(5, "activeDeadlineSeconds", keep_zero=True),
    string(6, "dnsPolicy"),
    string_map(7, "nodeSelector"),
    string(8, "serviceAccountName"),
    string(9, "serviceAccount"),
    string(10, "nodeName"),
    boolean(11, "hostNetwork"),
    boolean(12, "hostPID"),
    boolean(13, "hostIPC"),
    message(14, "securityContext", POD_SECURITY_CONTEXT),
    messages(15, "imagePullSecrets", LOCAL_OBJECT_REFERENCE),
    string(16, "hostname"),
    string(17, "subdomain"),
    message(18, "affinity", AFFINITY),
    string(19, "schedulerName"),
    messages(20, "initContainers", CONTAINER),
    boolean(21, "automountServiceAccountToken", keep_zero=True),
    messages(22, "tolerations", TOLERATION),
    messages(23, "hostAliases", HOST_ALIAS),
    string(24, "priorityClassName"),
    int32(25, "priority", keep_zero=True),
    boolean(27, "shareProcessNamespace", keep_zero=True),
    string(29, "runtimeClassName", keep_zero=True),
    boolean(30, "enableServiceLinks", keep_zero=True),
    string(31, "preemptionPolicy", keep_zero=True),
)

POD_TEMPLATE_SPEC = MessageSpec.of(
    "PodTemplateSpec",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", POD_SPEC),
)

# ---------------------------------------------------------------------------
# Top-level resources
# ---------------------------------------------------------------------------

CONFIG_MAP = MessageSpec.of(
    "ConfigMap",
    message(1, "metadata", OBJECT_META),
    string_map(2, "data"),
    bytes_map(3, "binaryData"),
    boolean(4, "immutable", keep_zero=True),
)

SECRET = MessageSpec.of(
    "Secret",
    message(1, "metadata", OBJECT_META),
    bytes_map(2, "data"),
    string(3, "type"),
    string_map(4, "stringData"),
    boolean(5, "immutable", keep_zero=True),
)

NAMESPACE_CONDITION = MessageSpec.of(
    "NamespaceCondition",
    string(1, "type"),
    string(2, "status"),
    message(4, "lastTransitionTime", TIME),
    string(5, "reason"),
    string(6, "message"),
)

NAMESPACE = MessageSpec.of(
    "Namespace",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", MessageSpec.of("NamespaceSpec", strings(1, "finalizers"))),
    message(
        3,
        "status",
        MessageSpec.of(
            "NamespaceStatus",
            string(1, "phase"),
            messages(2, "conditions", NAMESPACE_CONDITION),
        ),
    ),
)

SERVICE_PORT = MessageSpec.of(
    "ServicePort",
    string(1, "name"),
    string(2, "protocol"),
    int32(3, "port", keep_zero=True),
    message(4, "targetPort", INT_OR_STRING),
    int32(5, "nodePort"),
    string(6, "appProtocol", keep_zero=True),
)

SESSION_AFFINITY_CONFIG = MessageSpec.of(
    "SessionAffinityConfig",
    message(
        1,
        "clientIP",
        MessageSpec.of("ClientIPConfig", int32(1, "timeoutSeconds", keep_zero=True)),
    ),
)

SERVICE_SPEC = MessageSpec.of(
    "ServiceSpec",
    messages(1, "ports", SERVICE_PORT),
    string_map(2, "selector"),
    string(3, "clusterIP"),
    string(4, "type"),
    strings(5, "externalIPs"),
    string(7, "sessionAffinity"),
    string(8, "loadBalancerIP"),
    strings(9, "loadBalancerSourceRanges"),
    string(10, "externalName"),
    string(11, "externalTrafficPolicy"),
    int32(12, "healthCheckNodePort"),
    boolean(13, "publishNotReadyAddresses"),
    message(14, "sessionAffinityConfig", SESSION_AFFINITY_CONFIG),
    string(17, "ipFamilyPolicy", keep_zero=True),
    strings(18, "clusterIPs"),
    strings(19, "ipFamilies"),
    boolean(20, "allocateLoadBalancerNodePorts", keep_zero=True),
    string(21, "loadBalancerClass", keep_zero=True),
    string(22, "internalTrafficPolicy", keep_zero=True),
)

SERVICE = MessageSpec.of(
    "Service",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", SERVICE_SPEC),
    message(
        3,
        "status",
        MessageSpec.of("ServiceStatus", message(1, "loadBalancer", LOAD_BALANCER_STATUS)),
    ),
)

SERVICE_ACCOUNT = MessageSpec.of(
    "ServiceAccount",
    message(1, "metadata", OBJECT_META),
    messages(2, "secrets", OBJECT_REFERENCE),
    messages(3, "imagePullSecrets", LOCAL_OBJECT_REFERENCE),
    boolean(4, "automountServiceAccountToken", keep_zero=True),
)

PERSISTENT_VOLUME_SPEC = MessageSpec.of(
    "PersistentVolumeSpec",
    message_map(1, "capacity", QUANTITY),
    inline(2, PERSISTENT_VOLUME_SOURCE),
    strings(3, "accessModes"),
    message(4, "claimRef", OBJECT_REFERENCE),
    string(5, "persistentVolumeReclaimPolicy"),
    string(6, "storageClassName"),
    strings(7, "mountOptions"),
    string(8, "volumeMode", keep_zero=True),
    message(
        9,
        "nodeAffinity",
        MessageSpec.of("VolumeNodeAffinity", message(1, "required", NODE_SELECTOR)),
    ),
)

PERSISTENT_VOLUME = MessageSpec.of(
    "PersistentVolume",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", PERSISTENT_VOLUME_SPEC),
    message(
        3,
        "status",
        MessageSpec.of(
            "PersistentVolumeStatus",
            string(1, "phase"),
            string(2, "message"),
            string(3, "reason"),
        ),
    ),
)

PERSISTENT_VOLUME_CLAIM_SPEC = MessageSpec.of(
    "PersistentVolumeClaimSpec",
    strings(1, "accessModes"),
    message(2, "resources", RESOURCE_REQUIREMENTS),
    string(3, "volumeName"),
    message(4, "selector", LABEL_SELECTOR),
    string(5, "storageClassName", keep_zero=True),
    string(6, "volumeMode", keep_zero=True),
    message(7, "dataSource", TYPED_LOCAL_OBJECT_REFERENCE),
)

PERSISTENT_VOLUME_CLAIM_CONDITION = MessageSpec.of(
    "PersistentVolumeClaimCondition",
    string(1, "type"),
    string(2, "status"),
    message(3, "lastProbeTime", TIME),
    message(4, "lastTransitionTime", TIME),
    string(5, "reason"),
    string(6, "message"),
)

PERSISTENT_VOLUME_CLAIM = MessageSpec.of(
    "PersistentVolumeClaim",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", PERSISTENT_VOLUME_CLAIM_SPEC),
    message(
        3,
        "status",
        MessageSpec.of(
            "PersistentVolumeClaimStatus",
            string(1, "phase"),
            strings(2, "accessModes"),
            message_map(3, "capacity", QUANTITY),
            messages(4, "conditions", PERSISTENT_VOLUME_CLAIM_CONDITION),
        ),
    ),
)
