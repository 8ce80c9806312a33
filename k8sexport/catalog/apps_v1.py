"""``apps/v1`` workload shapes."""

from __future__ import annotations

from k8sexport.catalog.core_v1 import PERSISTENT_VOLUME_CLAIM, POD_TEMPLATE_SPEC
from k8sexport.catalog.meta import INT_OR_STRING, LABEL_SELECTOR, OBJECT_META, TIME
from k8sexport.catalog.schema import (
    MessageSpec,
    boolean,
    int32,
    int64,
    message,
    messages,
    string,
)


def _condition(name: str) -> MessageSpec:
    return MessageSpec.of(
        name,
        string(1, "type"),
        string(2, "status"),
        message(3, "lastTransitionTime", TIME),
        string(4, "reason"),
        string(5, "message"),
    )


# DeploymentCondition numbers its timestamps differently from the others.
DEPLOYMENT_CONDITION = MessageSpec.of(
    "DeploymentCondition",
    string(1, "type"),
    string(2, "status"),
    string(4, "reason"),
    string(5, "message"),
    message(6, "lastUpdateTime", TIME),
    message(7, "lastTransitionTime", TIME),
)


ROLLING_UPDATE_DEPLOYMENT = MessageSpec.of(
    "RollingUpdateDeployment",
    message(1, "maxUnavailable", INT_OR_STRING),
    message(2, "maxSurge", INT_OR_STRING),
)

DEPLOYMENT_STRATEGY = MessageSpec.of(
    "DeploymentStrategy",
    string(1, "type"),
    message(2, "rollingUpdate", ROLLING_UPDATE_DEPLOYMENT),
)

DEPLOYMENT_SPEC = MessageSpec.of(
    "DeploymentSpec",
    int32(1, "replicas", keep_zero=True),
    message(2, "selector", LABEL_SELECTOR),
    message(3, "template", POD_TEMPLATE_SPEC),
    message(4, "strategy", DEPLOYMENT_STRATEGY),
    int32(5, "minReadySeconds"),
    int32(6, "revisionHistoryLimit", keep_zero=True),
    boolean(7, "paused"),
    int32(9, "progressDeadlineSeconds", keep_zero=True),
)

DEPLOYMENT_STATUS = MessageSpec.of(
    "DeploymentStatus",
    int64(1, "observedGeneration"),
    int32(2, "replicas"),
    int32(3, "updatedReplicas"),
    int32(4, "availableReplicas"),
    int32(5, "unavailableReplicas"),
    messages(6, "conditions", DEPLOYMENT_CONDITION),
    int32(7, "readyReplicas"),
    int32(8, "collisionCount", keep_zero=True),
)

DEPLOYMENT = MessageSpec.of(
    "Deployment",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", DEPLOYMENT_SPEC),
    message(3, "status", DEPLOYMENT_STATUS),
)

DAEMON_SET_UPDATE_STRATEGY = MessageSpec.of(
    "DaemonSetUpdateStrategy",
    string(1, "type"),
    message(
        2,
        "rollingUpdate",
        MessageSpec.of(
            "RollingUpdateDaemonSet",
            message(1, "maxUnavailable", INT_OR_STRING),
            message(2, "maxSurge", INT_OR_STRING),
        ),
    ),
)

DAEMON_SET_SPEC = MessageSpec.of(
    "DaemonSetSpec",
    message(1, "selector", LABEL_SELECTOR),
    message(2, "template", POD_TEMPLATE_SPEC),
    message(3, "updateStrategy", DAEMON_SET_UPDATE_STRATEGY),
    int32(4, "minReadySeconds"),
    int32(6, "revisionHistoryLimit", keep_zero=True),
)

DAEMON_SET_STATUS = MessageSpec.of(
    "DaemonSetStatus",
    int32(1, "currentNumberScheduled", keep_zero=True),
    int32(2, "numberMisscheduled", keep_zero=True),
    int32(3, "desiredNumberScheduled", keep_zero=True),
    int32(4, "numberReady", keep_zero=True),
    int64(5, "observedGeneration"),
    int32(6, "updatedNumberScheduled"),
    int32(7, "numberAvailable"),
    int32(8, "numberUnavailable"),
    int32(9, "collisionCount", keep_zero=True),
    messages(10, "conditions", _condition("DaemonSetCondition")),
)

DAEMON_SET = MessageSpec.of(
    "DaemonSet",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", DAEMON_SET_SPEC),
    message(3, "status", DAEMON_SET_STATUS),
)

STATEFUL_SET_UPDATE_STRATEGY = MessageSpec.of(
    "StatefulSetUpdateStrategy",
    string(1, "type"),
    message(
        2,
        "rollingUpdate",
        MessageSpec.of(
            "RollingUpdateStatefulSetStrategy",
            int32(1, "partition", keep_zero=True),
            message(2, "maxUnavailable", INT_OR_STRING),
        ),
    ),
)

STATEFUL_SET_SPEC = MessageSpec.of(
    "StatefulSetSpec",
    int32(1, "replicas", keep_zero=True),
    message(2, "selector", LABEL_SELECTOR),
    message(3, "template", POD_TEMPLATE_SPEC),
    messages(4, "volumeClaimTemplates", PERSISTENT_VOLUME_CLAIM),
    string(5, "serviceName"),
    string(6, "podManagementPolicy"),
    message(7, "updateStrategy", STATEFUL_SET_UPDATE_STRATEGY),
    int32(8, "revisionHistoryLimit", keep_zero=True),
    int32(9, "minReadySeconds"),
)

STATEFUL_SET_STATUS = MessageSpec.of(
    "StatefulSetStatus",
    int64(1, "observedGeneration"),
    int32(2, "replicas", keep_zero=True),
    int32(3, "readyReplicas"),
    int32(4, "currentReplicas"),
    int32(5, "updatedReplicas"),
    string(6, "currentRevision"),
    string(7, "updateRevision"),
    int32(9, "collisionCount", keep_zero=True),
    messages(10, "conditions", _condition("StatefulSetCondition")),
    int32(11, "availableReplicas"),
)

STATEFUL_SET = MessageSpec.of(
    "StatefulSet",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", STATEFUL_SET_SPEC),
    message(3, "status", STATEFUL_SET_STATUS),
)
