"""Basic smoke tests for apmtrace.

Quick sanity checks that a producer and a consumer tracer correlate across a
carrier. Detailed behavior is covered by the per-module tests.
"""

import pytest

import apmtrace
from apmtrace import FORMAT_HTTP_HEADERS, DeploymentMetaData, Tracer, constants


class RecordingRecorder:
    def __init__(self):
        self.traces = []

    def record(self, trace):
        self.traces.append(trace)


def test_version_exposed():
    """Smoke test: version is accessible."""
    assert hasattr(apmtrace, '__version__')
    assert isinstance(apmtrace.__version__, str)
    assert len(apmtrace.__version__) > 0


def test_producer_consumer_correlation():
    """A client span's injected headers let the server join the same trace."""
    client = Tracer(recorder=RecordingRecorder(), deployment_meta_data=DeploymentMetaData("frontend"))
    server = Tracer(recorder=RecordingRecorder(), deployment_meta_data=DeploymentMetaData("orders"))

    with client.start_span("GET /orders", tags={"transaction": "list-orders"}) as client_span:
        headers = {}
        client.inject(client_span, FORMAT_HTTP_HEADERS, headers)

        # Header names are often re-cased in transit
        received = {key.lower(): value for key, value in headers.items()}
        wire_context = server.extract(FORMAT_HTTP_HEADERS, received)
        with server.start_span("handle", child_of=wire_context):
            pass

    client_trace = client.get_recorder().traces[0]
    server_trace = server.get_recorder().traces[0]

    assert client_trace.trace_id == server_trace.trace_id
    assert server_trace.transaction == "list-orders"

    producer = client_trace.root
    consumer = server_trace.root
    assert producer.node_type == constants.NODE_TYPE_PRODUCER
    assert consumer.node_type == constants.NODE_TYPE_CONSUMER
    assert producer.correlation_ids[0].value == consumer.correlation_ids[0].value

    assert producer.span.get_tag(constants.PROP_SERVICE_NAME) == "frontend"
    assert consumer.span.get_tag(constants.PROP_SERVICE_NAME) == "orders"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
