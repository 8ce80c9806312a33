"""Resource catalog — the known ``(apiVersion, kind)`` schemas.

``DEFAULT_RESOURCE_TYPES`` is the whole catalog; to support another type,
declare its ``MessageSpec`` and add one ``ResourceType`` line below.
"""

from __future__ import annotations

from functools import lru_cache

from k8sexport.catalog import apps_v1, batch, coordination, core_v1, networking, rbac_v1
from k8sexport.catalog.registry import ResourceRegistry, ResourceType

DEFAULT_RESOURCE_TYPES: tuple[ResourceType, ...] = (
    # core
    ResourceType("v1", "ConfigMap", core_v1.CONFIG_MAP),
    ResourceType("v1", "Namespace", core_v1.NAMESPACE),
    ResourceType("v1", "Secret", core_v1.SECRET),
    ResourceType("v1", "Service", core_v1.SERVICE),
    ResourceType("v1", "ServiceAccount", core_v1.SERVICE_ACCOUNT),
    ResourceType("v1", "PersistentVolume", core_v1.PERSISTENT_VOLUME),
    ResourceType("v1", "PersistentVolumeClaim", core_v1.PERSISTENT_VOLUME_CLAIM),
    # ingress
    ResourceType("extensions/v1beta1", "Ingress", networking.INGRESS_V1BETA1),
    ResourceType("networking.k8s.io/v1beta1", "Ingress", networking.INGRESS_V1BETA1),
    ResourceType("networking.k8s.io/v1", "Ingress", networking.INGRESS_V1),
    # batch
    ResourceType("batch/v1", "Job", batch.JOB),
    ResourceType("batch/v1", "CronJob", batch.CRON_JOB),
    ResourceType("batch/v1beta1", "CronJob", batch.CRON_JOB),
    # apps
    ResourceType("apps/v1", "Deployment", apps_v1.DEPLOYMENT),
    ResourceType("apps/v1", "DaemonSet", apps_v1.DAEMON_SET),
    ResourceType("apps/v1", "StatefulSet", apps_v1.STATEFUL_SET),
    # rbac
    ResourceType("rbac.authorization.k8s.io/v1", "ClusterRole", rbac_v1.CLUSTER_ROLE),
    ResourceType("rbac.authorization.k8s.io/v1", "ClusterRoleBinding", rbac_v1.CLUSTER_ROLE_BINDING),
    ResourceType("rbac.authorization.k8s.io/v1", "Role", rbac_v1.ROLE),
    ResourceType("rbac.authorization.k8s.io/v1", "RoleBinding", rbac_v1.ROLE_BINDING),
    # coordination
    ResourceType("coordination.k8s.io/v1", "Lease", coordination.LEASE),
)


@lru_cache(maxsize=1)
def default_registry() -> ResourceRegistry:
    """The process-wide registry over ``DEFAULT_RESOURCE_TYPES``."""
    return ResourceRegistry(DEFAULT_RESOURCE_TYPES)


__all__ = [
    "DEFAULT_RESOURCE_TYPES",
    "ResourceRegistry",
    "ResourceType",
    "default_registry",
]
