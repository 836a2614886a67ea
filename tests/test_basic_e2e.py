"""Basic smoke tests for spanflow.

Quick sanity checks that core functionality works end to end.
"""

import pytest

import spanflow
from spanflow import traced


def test_version_exposed():
    """Smoke test: version is accessible."""
    assert isinstance(spanflow.__version__, str)
    assert len(spanflow.__version__) > 0


def test_distributed_trace_across_two_services():
    """A client span's headers let a second tracer continue the same trace."""
    from spanflow.writer import InMemoryWriter

    client_writer, server_writer = InMemoryWriter(), InMemoryWriter()
    client = spanflow.Tracer(writer=client_writer, service_name="frontend")
    server = spanflow.Tracer(writer=server_writer, service_name="backend")

    with client.start_active("http.request") as client_scope:
        client_scope.span.set_tag("sampling.priority", "2")
        headers = {}
        spanflow.inject(client_scope.span.context, headers)

        with server.start_active("web.request", child_of=spanflow.extract(headers)) as server_scope:
            server_span = server_scope.span

    [[client_span]] = client_writer.traces
    [[received]] = server_writer.traces
    assert received is server_span
    assert server_span.trace_id == client_span.trace_id
    assert server_span.parent_id == client_span.span_id
    assert server_span.service_name == "backend"
    assert server_span.context.sampling_priority == spanflow.SamplingPriority.USER_KEEP


def test_traced_can_be_imported_and_used():
    @traced(name="test_function")
    def simple_function(x: int, y: int) -> int:
        return x + y

    assert simple_function(2, 3) == 5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
