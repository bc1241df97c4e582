import unittest

from memviz.config import GraphOptions
from memviz.graph.build import build_graph
from memviz.graph.model import Edge, FileParse
from memviz.graph.similarity import jaccard, keyword_similarity_edges, shared_token_edges


CORE = [f"core{i:02d}" for i in range(10)]


def _parse(name, words):
    return FileParse(relative_path=f"memory/{name}.md", keywords=frozenset(words))


def _hub_corpus():
    """16 files sharing a 10-word core (120 strong pairs) plus one weak pair.

    `g` shares both unique words of f01 and six core words, so it clears the
    8-word threshold against f01 only, with a lower score than the core pairs.
    """
    files = [_parse(f"f{i:02d}", CORE + [f"uniq{i:02d}a", f"uniq{i:02d}b"]) for i in range(1, 17)]
    g = _parse("g", ["uniq01a", "uniq01b"] + CORE[:6] + [f"gext{i:02d}" for i in range(20)])
    return files + [g]


class TestJaccard(unittest.TestCase):
    def test_symmetric(self):
        a = {"alpha", "bravo", "charlie"}
        b = {"bravo", "charlie", "delta", "echo"}
        self.assertEqual(jaccard(a, b), jaccard(b, a))
        self.assertEqual(jaccard(a, b), (2, 2 / 5))

    def test_empty(self):
        self.assertEqual(jaccard(set(), set()), (0, 0.0))


class TestKeywordSimilarity(unittest.TestCase):
    def test_one_edge_per_unordered_pair(self):
        edges = keyword_similarity_edges([_parse("a", CORE), _parse("b", CORE)])
        self.assertEqual(len(edges), 1)
        e = edges[0]
        self.assertEqual((e.source, e.target, e.type, e.via), ("file:memory/a.md", "file:memory/b.md", "related", "text"))
        self.assertEqual((e.weight, e.score), (10, 1.0))

    def test_thresholds(self):
        seven = _parse("seven", CORE[:7])
        self.assertEqual(keyword_similarity_edges([seven, _parse("b", CORE)]), [])

        # 8 shared out of a union of 8 + 300 extra words: jaccard just under 0.03
        big = _parse("big", CORE[:8] + [f"x{i:03d}" for i in range(300)])
        self.assertEqual(keyword_similarity_edges([big, _parse("small", CORE[:8])]), [])

        ok = _parse("ok", CORE[:8] + [f"x{i:03d}" for i in range(200)])
        edges = keyword_similarity_edges([ok, _parse("small", CORE[:8])])
        self.assertEqual(len(edges), 1)
        self.assertEqual(edges[0].score, 8 / 208)

    def test_empty_keyword_sets_skipped(self):
        self.assertEqual(keyword_similarity_edges([_parse("a", []), _parse("b", [])]), [])

    def test_keeps_top_120_of_121(self):
        edges = keyword_similarity_edges(_hub_corpus())
        self.assertEqual(len(edges), 120)
        self.assertNotIn("file:memory/g.md", {e.target for e in edges})
        self.assertTrue(all(e.score == 10 / 14 for e in edges))

        # The dropped pair is the 121st candidate.
        edges = keyword_similarity_edges(_hub_corpus(), GraphOptions(max_similarity_edges=200))
        self.assertEqual(len(edges), 121)
        self.assertEqual((edges[-1].source, edges[-1].target), ("file:memory/f01.md", "file:memory/g.md"))
        self.assertEqual((edges[-1].weight, edges[-1].score), (8, 8 / 32))

    def test_ranked_by_score_then_weight(self):
        a = _parse("a", CORE + ["one"])
        b = _parse("b", CORE + ["two"])
        c = _parse("c", CORE[:9] + ["three", "four"])
        edges = keyword_similarity_edges([a, b, c])
        scores = [(e.score, e.weight) for e in edges]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual((edges[0].source, edges[0].target), ("file:memory/a.md", "file:memory/b.md"))

    def test_through_build_graph(self):
        g = build_graph(_hub_corpus())
        self.assertEqual(sum(1 for e in g.links if e.type == "related"), 120)


class TestSharedTokens(unittest.TestCase):
    def test_counts_common_concepts_and_tags(self):
        links = [
            Edge("file:a.md", "concept:X", "contains"),
            Edge("file:a.md", "tag:t", "tagged"),
            Edge("file:a.md", "event:a.md#H", "header"),
            Edge("file:b.md", "concept:X", "contains"),
            Edge("file:b.md", "tag:t", "tagged"),
            Edge("file:b.md", "tag:t", "tagged"),
            Edge("file:c.md", "concept:Y", "contains"),
            Edge("file:a.md", "file:b.md", "ref"),
        ]
        edges = shared_token_edges(links)
        self.assertEqual(edges, [Edge("file:a.md", "file:b.md", "related", weight=2, via="tags")])

    def test_shared_header_text_is_not_a_token(self):
        links = [
            Edge("file:a.md", "event:a.md#Standup", "header"),
            Edge("file:b.md", "event:b.md#Standup", "header"),
        ]
        self.assertEqual(shared_token_edges(links), [])


if __name__ == "__main__":
    unittest.main()
