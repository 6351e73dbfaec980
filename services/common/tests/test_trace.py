from services.common.core.trace import TraceId


class TestTraceId:
    def test_parse_existing_header(self):
        """Full X-Amzn-Trace-Id header round-trips."""
        header = "Root=1-5759e988-bd862e3fe1be46a994272793;Parent=53995c3f42cd8ad8;Sampled=1"
        trace = TraceId.parse(header)

        assert trace.root == "1-5759e988-bd862e3fe1be46a994272793"
        assert trace.parent == "53995c3f42cd8ad8"
        assert trace.sampled == "1"
        assert str(trace) == header

    def test_parse_partial_header(self):
        """Root only: Sampled defaults to 1."""
        header = "Root=1-5759e988-bd862e3fe1be46a994272793"
        trace = TraceId.parse(header)
        assert trace.root == "1-5759e988-bd862e3fe1be46a994272793"
        assert trace.parent is None
        assert trace.sampled == "1"

    def test_parse_raw_id(self):
        """A bare ID without Root= is used as the root."""
        trace = TraceId.parse("1-5759e988-bd862e3fe1be46a994272793")
        assert trace.root == "1-5759e988-bd862e3fe1be46a994272793"

    def test_parse_ignores_malformed_parts(self):
        trace = TraceId.parse("Root=1-abc-def;garbage;Sampled=0")
        assert trace.root == "1-abc-def"
        assert trace.sampled == "0"
