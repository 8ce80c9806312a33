"""``batch/v1`` and ``batch/v1beta1`` shapes.

CronJob moved from ``batch/v1beta1`` to ``batch/v1`` without renumbering,
so both versions share one spec.
"""

from __future__ import annotations

from k8sexport.catalog.core_v1 import OBJECT_REFERENCE, POD_TEMPLATE_SPEC
from k8sexport.catalog.meta import LABEL_SELECTOR, OBJECT_META, TIME
from k8sexport.catalog.schema import (
    MessageSpec,
    boolean,
    int32,
    int64,
    message,
    messages,
    string,
)

JOB_CONDITION = MessageSpec.of(
    "JobCondition",
    string(1, "type"),
    string(2, "status"),
    message(3, "lastProbeTime", TIME),
    message(4, "lastTransitionTime", TIME),
    string(5, "reason"),
    string(6, "message"),
)

JOB_SPEC = MessageSpec.of(
    "JobSpec",
    int32(1, "parallelism", keep_zero=True),
    int32(2, "completions", keep_zero=True),
    int64(3, "activeDeadlineSeconds", keep_zero=True),
    message(4, "selector", LABEL_SELECTOR),
    boolean(5, "manualSelector", keep_zero=True),
    message(6, "template", POD_TEMPLATE_SPEC),
    int32(7, "backoffLimit", keep_zero=True),
    int32(8, "ttlSecondsAfterFinished", keep_zero=True),
    string(9, "completionMode", keep_zero=True),
    boolean(10, "suspend", keep_zero=True),
)

JOB_STATUS = MessageSpec.of(
    "JobStatus",
    messages(1, "conditions", JOB_CONDITION),
    message(2, "startTime", TIME),
    message(3, "completionTime", TIME),
    int32(4, "active"),
    int32(5, "succeeded"),
    int32(6, "failed"),
)

JOB = MessageSpec.of(
    "Job",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", JOB_SPEC),
    message(3, "status", JOB_STATUS),
)

JOB_TEMPLATE_SPEC = MessageSpec.of(
    "JobTemplateSpec",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", JOB_SPEC),
)

CRON_JOB_SPEC = MessageSpec.of(
    "CronJobSpec",
    string(1, "schedule"),
    int64(2, "startingDeadlineSeconds", keep_zero=True),
    string(3, "concurrencyPolicy"),
    boolean(4, "suspend", keep_zero=True),
    message(5, "jobTemplate", JOB_TEMPLATE_SPEC),
    int32(6, "successfulJobsHistoryLimit", keep_zero=True),
    int32(7, "failedJobsHistoryLimit", keep_zero=True),
    string(8, "timeZone", keep_zero=True),
)

CRON_JOB_STATUS = MessageSpec.of(
    "CronJobStatus",
    messages(1, "active", OBJECT_REFERENCE),
    message(4, "lastScheduleTime", TIME),
    message(5, "lastSuccessfulTime", TIME),
)

CRON_JOB = MessageSpec.of(
    "CronJob",
    message(1, "metadata", OBJECT_META),
    message(2, "spec", CRON_JOB_SPEC),
    message(3, "status", CRON_JOB_STATUS),
)
