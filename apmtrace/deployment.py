"""Deployment metadata and the root-span trace decorator."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TYPE_CHECKING

from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource

from apmtrace import constants

if TYPE_CHECKING:
    from apmtrace.tracer.trace import Trace

TraceDecorator = Callable[["Trace"], None]

_BUILD_NUMBER_SUFFIX = re.compile(r"-\d+$")


@dataclass(frozen=True)
class DeploymentMetaData:
    service_name: Optional[str] = None
    build_stamp: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DeploymentMetaData":
        """
        Read deployment metadata from the environment.

        Explicit ``APM_SERVICE_NAME`` / ``APM_BUILDSTAMP`` win. Otherwise an
        OpenShift ``OPENSHIFT_BUILD_NAME`` such as ``checkout-7`` yields the
        service ``checkout`` with build stamp ``checkout-7``. ``OTEL_SERVICE_NAME``
        is the last fallback for the service name.
        """
        env = os.environ if environ is None else environ
        service_name = env.get("APM_SERVICE_NAME")
        build_stamp = env.get("APM_BUILDSTAMP")

        build_name = env.get("OPENSHIFT_BUILD_NAME")
        if build_name:
            service_name = service_name or _BUILD_NUMBER_SUFFIX.sub("", build_name)
            build_stamp = build_stamp or build_name

        service_name = service_name or env.get("OTEL_SERVICE_NAME")
        return cls(service_name=service_name or None, build_stamp=build_stamp or None)

    @classmethod
    def from_resource(cls, resource: Resource) -> "DeploymentMetaData":
        """Map an OpenTelemetry Resource's service name and version."""
        attributes = resource.attributes
        service_name = attributes.get(SERVICE_NAME)
        build_stamp = attributes.get(SERVICE_VERSION)
        return cls(
            service_name=str(service_name) if service_name else None,
            build_stamp=str(build_stamp) if build_stamp else None,
        )


DEFAULT_META_DATA = DeploymentMetaData.from_env()


def make_trace_decorator(meta_data: DeploymentMetaData) -> TraceDecorator:
    """
    Build a decorator that tags a trace's root span with deployment metadata.

    Only the first node is inspected. A tag already present on the root span
    is left alone, so values set by application code always win.
    """
    service_name = meta_data.service_name
    build_stamp = meta_data.build_stamp

    def decorate(trace: "Trace") -> None:
        if not trace.nodes:
            return
        span = trace.nodes[0].get_span()
        if span is None:
            return

        tags = span.get_tags()
        if service_name and constants.PROP_SERVICE_NAME not in tags:
            span.set_tag(constants.PROP_SERVICE_NAME, service_name)
        if build_stamp and constants.PROP_BUILD_STAMP not in tags:
            span.set_tag(constants.PROP_BUILD_STAMP, build_stamp)

    return decorate
