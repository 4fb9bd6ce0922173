from __future__ import annotations
from typing import TYPE_CHECKING, Any
if __package__ and __package__.startswith('markupfix.'):
    __all__ = ['DEFAULT_RULES', 'Document', 'NestingRule', 'NormalizationPipeline', 'Node', 'VisitContext', 'consolidate_params', 'filter_and_flatten', 'lower_attributes', 'normalize_document', 'normalize_json', 'repair_nesting', 'repair_tables', 'rewrite_conditions']
    if TYPE_CHECKING:
        from .attribute_lowering import lower_attributes
        from .expression_rewrite import rewrite_conditions
        from .filter_flatten import filter_and_flatten
        from .nesting_rules import DEFAULT_RULES, NestingRule, VisitContext, repair_nesting
        from .node import Document, Node
        from .param_consolidation import consolidate_params
        from .pipeline import NormalizationPipeline, normalize_document, normalize_json
        from .table_repair import repair_tables
    _EXPORTS: dict[str, tuple[str, str]] = {'lower_attributes': ('attribute_lowering', 'lower_attributes'), 'rewrite_conditions': ('expression_rewrite', 'rewrite_conditions'), 'filter_and_flatten': ('filter_flatten', 'filter_and_flatten'), 'DEFAULT_RULES': ('nesting_rules', 'DEFAULT_RULES'), 'NestingRule': ('nesting_rules', 'NestingRule'), 'VisitContext': ('nesting_rules', 'VisitContext'), 'repair_nesting': ('nesting_rules', 'repair_nesting'), 'Document': ('node', 'Document'), 'Node': ('node', 'Node'), 'consolidate_params': ('param_consolidation', 'consolidate_params'), 'NormalizationPipeline': ('pipeline', 'NormalizationPipeline'), 'normalize_document': ('pipeline', 'normalize_document'), 'normalize_json': ('pipeline', 'normalize_json'), 'repair_tables': ('table_repair', 'repair_tables')}

    def __getattr__(name: str) -> Any:
        spec = _EXPORTS.get(name)
        if spec is None:
            raise AttributeError(name)
        mod_name, attr = spec
        module = __import__(f'{__name__}.{mod_name}', fromlist=[attr])
        return getattr(module, attr)

    def __dir__() -> list[str]:
        return sorted(list(globals().keys()) + list(__all__))
else:
    __all__: list[str] = []
