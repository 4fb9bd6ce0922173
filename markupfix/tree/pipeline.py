from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple
from .attribute_lowering import lower_attributes
from .expression_rewrite import rewrite_conditions
from .filter_flatten import filter_and_flatten
from .nesting_rules import DEFAULT_RULES, NestingRule, repair_nesting
from .node import Document, Node
from .param_consolidation import consolidate_params
from .table_repair import repair_tables
from .tree_utils import count_tags, walk
logger = logging.getLogger(__name__)
PassFn = Callable[[List[Node]], Tuple[List[Node], int]]

@dataclass
class PassReport:
    name: str
    changes: int
    nodes_before: int
    nodes_after: int

@dataclass
class NormalizationPipeline:
    nesting_rules: Sequence[NestingRule] = DEFAULT_RULES
    reports: List[PassReport] = field(default_factory=list)

    def passes(self) -> List[Tuple[str, PassFn]]:
        return [('attribute_lowering', lambda nodes: (nodes, lower_attributes(nodes))), ('param_consolidation', lambda nodes: (nodes, consolidate_params(nodes))), ('expression_rewrite', lambda nodes: (nodes, rewrite_conditions(nodes))), ('table_repair', lambda nodes: (nodes, repair_tables(nodes))), ('nesting_repair', lambda nodes: (nodes, sum(repair_nesting(nodes, self.nesting_rules).values()))), ('filter_flatten', self._filter)]

    @staticmethod
    def _filter(nodes: List[Node]) -> Tuple[List[Node], int]:
        before = sum((1 for _ in walk(nodes)))
        out = filter_and_flatten(nodes)
        return (out, before - sum((1 for _ in walk(out))))

    def run(self, document: Document) -> Document:
        self.reports = []
        elements = document.elements
        for name, fn in self.passes():
            before = sum((1 for _ in walk(elements)))
            elements, changes = fn(elements)
            after = sum((1 for _ in walk(elements)))
            self.reports.append(PassReport(name=name, changes=changes, nodes_before=before, nodes_after=after))
            logger.debug('Pass %s: %d change(s), %d -> %d node(s)', name, changes, before, after)
        document.elements = elements
        logger.info('Normalized %d top-level element(s) (%d changes)', len(elements), sum((r.changes for r in self.reports)))
        logger.debug('Tag counts: %s', count_tags(elements))
        return document

def normalize_document(raw: Dict[str, Any], pipeline: NormalizationPipeline | None=None) -> Document:
    return (pipeline or NormalizationPipeline()).run(Document.from_dict(raw))

def normalize_json(text: str, pipeline: NormalizationPipeline | None=None) -> str:
    return normalize_document(json.loads(text), pipeline).to_json()
