"""Memory graph: files, concepts, tags and headers, and the links between them.

Every build re-scans the whole corpus; the only state kept between builds is
the in-memory cache in `memviz.graph.cache`. Extraction is markup-driven
(wikilinks, #tags, ## headers, markdown links) plus bag-of-words overlap.
"""
