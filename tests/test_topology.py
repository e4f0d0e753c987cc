"""Unit tests for node list resolution."""

import unittest
from minio_node.local.exceptions import TopologyError
from minio_node.local.topology import (
    NodeSpec, distributed_drives, is_range_syntax, parse_node, resolve_topology, split_list,
)


class TestSplitList(unittest.TestCase):
    """Test separator handling."""

    def test_commas_and_semicolons(self) -> None:
        self.assertEqual(split_list("a,b;c"), ["a", "b", "c"])

    def test_empty_tokens_dropped(self) -> None:
        self.assertEqual(split_list(" a,,b; ;c "), ["a", "b", "c"])

    def test_empty_input(self) -> None:
        self.assertEqual(split_list(""), [])
        self.assertEqual(split_list(None), [])


class TestRangeSyntax(unittest.TestCase):
    """Test detection of the ellipsis marker."""

    def test_detects_marker(self) -> None:
        self.assertTrue(is_range_syntax("minio{1...4}"))
        self.assertTrue(is_range_syntax("minio{1...4}/data{1...2}"))

    def test_explicit_list(self) -> None:
        self.assertFalse(is_range_syntax("minio1,minio2"))
        self.assertFalse(is_range_syntax(""))

    def test_range_topology_is_pass_through(self) -> None:
        topology = resolve_topology("minio{1...4}/data", "https")
        self.assertTrue(topology.is_range)
        self.assertEqual(topology.nodes, ())
        self.assertEqual(topology.range_expressions, ("https://minio{1...4}/data",))


class TestExplicitTopology(unittest.TestCase):
    """Test resolution of explicit node lists."""

    def test_drives_preserve_order(self) -> None:
        drives = distributed_drives("node1,node2;node3", "http")
        self.assertEqual(len(drives), 3)
        self.assertEqual(drives, ["", "", ""])

    def test_drives_from_paths(self) -> None:
        drives = distributed_drives("node1/mnt/a;node2:9000/mnt/b,node3/mnt/c", "http")
        self.assertEqual(drives, ["/mnt/a", "/mnt/b", "/mnt/c"])

    def test_drives_empty_input(self) -> None:
        self.assertEqual(distributed_drives("", "http"), [])

    def test_parse_node_with_port_and_path(self) -> None:
        node = parse_node("minio1:9100/export", "http")
        self.assertEqual(node, NodeSpec(scheme="http", host="minio1", port=9100, path="/export"))

    def test_parse_node_invalid_port(self) -> None:
        with self.assertRaises(TopologyError):
            parse_node("minio1:notaport", "http")

    def test_resolve_keeps_order(self) -> None:
        topology = resolve_topology("c,a;b", "http")
        self.assertFalse(topology.is_range)
        self.assertEqual([n.host for n in topology.nodes], ["c", "a", "b"])

    def test_server_uri_defaults(self) -> None:
        node = parse_node("minio1", "http")
        self.assertEqual(node.server_uri(9000, "/data"), "http://minio1:9000/data")

    def test_server_uri_explicit_values(self) -> None:
        node = parse_node("minio1:9100/export", "https")
        self.assertEqual(node.server_uri(9000, "/data"), "https://minio1:9100/export")


if __name__ == "__main__":
    unittest.main()
