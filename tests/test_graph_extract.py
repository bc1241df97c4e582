import unittest

from memviz.graph.extract import parse_markdown


class TestGraphExtract(unittest.TestCase):
    def test_extracts_each_entity_kind(self):
        text = "## Standup\n[[Launch]] went out #infra\nSee [log](2026-01-01.md) and <MEMORY.md>\n"
        res = parse_markdown(text, "memory/2026-01-02.md")

        ids = [n.id for n in res.nodes]
        self.assertEqual(
            ids,
            [
                "file:memory/2026-01-02.md",
                "concept:Launch",
                "tag:infra",
                "event:memory/2026-01-02.md#Standup",
            ],
        )
        self.assertEqual(
            [(e.source, e.target, e.type) for e in res.edges],
            [
                ("file:memory/2026-01-02.md", "concept:Launch", "contains"),
                ("file:memory/2026-01-02.md", "tag:infra", "tagged"),
                ("file:memory/2026-01-02.md", "event:memory/2026-01-02.md#Standup", "header"),
            ],
        )
        self.assertEqual(res.refs, ["Launch", "2026-01-01.md", "MEMORY.md"])
        self.assertIn("launch", res.keywords)

    def test_labels(self):
        res = parse_markdown("#infra\n## A very long header that keeps on going past the limit", "memory/x.md")
        by_type = {n.type: n for n in res.nodes}

        self.assertEqual(by_type["file"].label, "memory/x.md")
        self.assertEqual(by_type["file"].label_short, "x.md")
        self.assertEqual(by_type["file"].path, "memory/x.md")
        self.assertEqual(by_type["tag"].label, "#infra")
        self.assertEqual(by_type["event"].path, "memory/x.md")
        self.assertEqual(len(by_type["event"].label_short), 28)
        self.assertTrue(by_type["event"].label_short.endswith("…"))
        self.assertEqual(by_type["event"].label_full, "A very long header that keeps on going past the limit")

    def test_repeated_concept_emitted_per_occurrence(self):
        res = parse_markdown("[[X]] [[X]]", "MEMORY.md")
        self.assertEqual([n.id for n in res.nodes].count("concept:X"), 2)
        self.assertEqual(res.refs, ["X", "X"])

    def test_deterministic(self):
        text = "[[A]] #b\n## C\n[d](e.md) plenty of words here for keywords"
        self.assertEqual(parse_markdown(text, "MEMORY.md"), parse_markdown(text, "MEMORY.md"))

    def test_node_serialization(self):
        res = parse_markdown("[[A]]", "MEMORY.md")
        self.assertEqual(
            res.nodes[1].to_dict(),
            {"id": "concept:A", "type": "concept", "label": "A", "labelShort": "A", "labelFull": "A"},
        )
        self.assertEqual(res.nodes[0].to_dict()["path"], "MEMORY.md")


if __name__ == "__main__":
    unittest.main()
