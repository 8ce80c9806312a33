"""``coordination.k8s.io/v1`` Lease.

Leader-election and node-heartbeat leases are among the most frequently
rewritten keys in any etcd snapshot.
"""

from __future__ import annotations

from k8sexport.catalog.meta import MICRO_TIME, OBJECT_META
from k8sexport.catalog.schema import MessageSpec, int32, message, string

LEASE_SPEC = MessageSpec.of(
    "LeaseSpec",
    string(1, "holderIdentity", keep_zero=True),
    int32(2, "leaseDurationSeconds", keep_zero=True),
    message(3, "acquireTime", MICRO_TIME),
    message(4, "renewTime", MICRO_TIME),
    int32(5, "leaseTransitions", keep_zero=True),
)

LEASE = MessageSpec.of(
    "Lease",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", LEASE_SPEC),
)
