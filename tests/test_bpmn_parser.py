"""
Unit tests for the BPMN parser.
"""

import pytest

from flowpath.bpmn import parse_bpmn
from flowpath.exceptions import DocumentParseError

# Default namespace, no <outgoing> children, nested sub-process
NESTED_PROCESS = """<?xml version="1.0" encoding="UTF-8"?>
<definitions xmlns="http://www.omg.org/spec/BPMN/20100524/MODEL" id="defs">
  <process id="order" isExecutable="true">
    <startEvent id="start" />
    <parallelGateway id="fork" />
    <subProcess id="pack" name="Pack order">
      <startEvent id="pack_start" />
      <task id="pick" name="Pick items" />
      <endEvent id="pack_end" />
      <sequenceFlow id="p1" sourceRef="pack_start" targetRef="pick" />
      <sequenceFlow id="p2" sourceRef="pick" targetRef="pack_end" />
    </subProcess>
    <sendTask id="notify" name="Notify customer" />
    <parallelGateway id="join" />
    <endEvent id="done" />
    <sequenceFlow id="f1" sourceRef="start" targetRef="fork" />
    <sequenceFlow id="f2" sourceRef="fork" targetRef="notify" />
    <sequenceFlow id="f3" sourceRef="fork" targetRef="pack" />
    <sequenceFlow id="f4" sourceRef="pack" targetRef="join" />
    <sequenceFlow id="f5" sourceRef="notify" targetRef="join" />
    <sequenceFlow id="f6" sourceRef="join" targetRef="done" />
  </process>
</definitions>
"""


def make_process(body: str, prefix: str = "bpmn2") -> str:
    """Wrap flow elements in a prefixed definitions/process document."""
    return (
        f'<{prefix}:definitions xmlns:{prefix}="http://www.omg.org/spec/BPMN/20100524/MODEL">'
        f'<{prefix}:process id="p">{body}</{prefix}:process>'
        f"</{prefix}:definitions>"
    )


class TestInvoiceDocument:
    """Parse the prefixed invoice fixture."""

    def test_node_ids_in_document_order(self, invoice_graph):
        """All flow nodes are found, in document order."""
        assert [node.id for node in invoice_graph] == [
            "StartEvent_1",
            "assignApprover",
            "approveInvoice",
            "invoice_approved",
            "prepareBankTransfer",
            "ServiceTask_1",
            "invoiceProcessed",
            "reviewInvoice",
            "reviewSuccessful_gw",
            "invoiceNotProcessed",
        ]

    def test_non_flow_elements_skipped(self, invoice_graph):
        """Participants, lanes and sequence flows are not nodes."""
        for element_id in ("Process_Engine_1", "Approver", "invoice", "SequenceFlow_1"):
            assert element_id not in invoice_graph

    def test_kinds_and_names(self, invoice_graph):
        """Kind is the local tag name, name comes from the attribute."""
        node = invoice_graph.node_by_id("assignApprover")
        assert node.kind == "businessRuleTask"
        assert node.name == "Assign Approver Group"

    def test_outgoing_order_wins(self, invoice_graph):
        """<outgoing> order is used over sequence flow document order."""
        successors = invoice_graph.successors("invoice_approved")
        assert [node.id for node in successors] == ["prepareBankTransfer", "reviewInvoice"]

    def test_loop_edge(self, invoice_graph):
        """The review loop back to approval is an edge."""
        successors = invoice_graph.successors("reviewSuccessful_gw")
        assert [node.id for node in successors] == ["invoiceNotProcessed", "approveInvoice"]

    def test_edge_count(self, invoice_graph):
        """Every sequence flow is one edge."""
        assert invoice_graph.edge_count() == 10


class TestNestedDocument:
    """Parse a default-namespace document with a sub-process."""

    @pytest.fixture
    def graph(self):
        return parse_bpmn(NESTED_PROCESS)

    def test_subprocess_contents_included(self, graph):
        """Nodes inside a sub-process are part of the graph."""
        assert "pick" in graph
        assert graph.node_by_id("pack").kind == "subProcess"
        assert [node.id for node in graph.successors("pack_start")] == ["pick"]

    def test_sequence_flow_order_without_outgoing(self, graph):
        """Without <outgoing>, successor order follows the flows."""
        assert [node.id for node in graph.successors("fork")] == ["notify", "pack"]

    def test_missing_name_is_none(self, graph):
        """Nodes without a name attribute have name None."""
        assert graph.node_by_id("fork").name is None

    def test_sink_has_no_successors(self, graph):
        """End events have no successors."""
        assert graph.successors("done") == ()


class TestPrefixes:
    """Namespace prefixes do not matter."""

    @pytest.mark.parametrize("prefix", ["bpmn", "bpmn2", "semantic"])
    def test_any_prefix(self, prefix):
        """Elements are matched by local name."""
        xml = make_process(
            f'<{prefix}:startEvent id="s"/><{prefix}:endEvent id="e"/>'
            f'<{prefix}:sequenceFlow id="f" sourceRef="s" targetRef="e"/>',
            prefix=prefix,
        )
        graph = parse_bpmn(xml)
        assert [node.id for node in graph.successors("s")] == ["e"]


class TestEncodings:
    """Byte input is decoded according to the XML declaration."""

    def test_latin1_bytes(self):
        """ISO-8859-1 bytes keep their non-ASCII names."""
        xml = make_process('<bpmn2:userTask id="t" name="Prüfung"/>').replace(
            "<bpmn2:definitions", '<?xml version="1.0" encoding="ISO-8859-1"?><bpmn2:definitions', 1
        )
        graph = parse_bpmn(xml.encode("latin-1"))
        assert graph.node_by_id("t").name == "Prüfung"

    def test_utf8_bytes_with_bom(self, invoice_bpmn_path):
        """A UTF-8 BOM in front of the XML is accepted."""
        graph = parse_bpmn(b"\xef\xbb\xbf" + invoice_bpmn_path.read_bytes())
        assert len(graph) == 10


class TestErrors:
    """Structurally broken documents."""

    def test_no_definitions(self):
        """A non-BPMN document is rejected."""
        with pytest.raises(DocumentParseError, match="definitions"):
            parse_bpmn("<html><body>Not BPMN</body></html>")

    def test_empty_document(self):
        """An empty string is rejected."""
        with pytest.raises(DocumentParseError):
            parse_bpmn("")

    def test_node_without_id(self):
        """Flow nodes must have an id."""
        with pytest.raises(DocumentParseError, match="no id"):
            parse_bpmn(make_process('<bpmn2:task name="anonymous"/>'))

    def test_duplicate_ids(self):
        """Two flow nodes with one id are rejected."""
        with pytest.raises(DocumentParseError, match="Duplicate"):
            parse_bpmn(make_process('<bpmn2:task id="t"/><bpmn2:userTask id="t"/>'))

    def test_flow_to_unknown_node(self):
        """Sequence flows must connect flow nodes."""
        xml = make_process('<bpmn2:task id="t"/><bpmn2:sequenceFlow id="f" sourceRef="t" targetRef="x"/>')
        with pytest.raises(DocumentParseError, match="unknown nodes"):
            parse_bpmn(xml)

    def test_outgoing_unknown_flow(self):
        """<outgoing> must reference an existing sequence flow."""
        xml = make_process('<bpmn2:task id="t"><bpmn2:outgoing>nowhere</bpmn2:outgoing></bpmn2:task>')
        with pytest.raises(DocumentParseError, match="unknown sequence flow"):
            parse_bpmn(xml)

    def test_outgoing_foreign_flow(self):
        """<outgoing> must reference a flow that starts at the node."""
        xml = make_process(
            '<bpmn2:task id="a"><bpmn2:outgoing>f</bpmn2:outgoing></bpmn2:task>'
            '<bpmn2:task id="b"/><bpmn2:task id="c"/>'
            '<bpmn2:sequenceFlow id="f" sourceRef="b" targetRef="c"/>'
        )
        with pytest.raises(DocumentParseError, match="starts at"):
            parse_bpmn(xml)
