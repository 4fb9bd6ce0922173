__all__ = ['ConversionConfig', 'Document', 'NormalizationPipeline', 'convert_markup', 'generate_and_validate', 'normalize_document', 'normalize_json']

def __getattr__(name):
    if name in {'Document', 'NormalizationPipeline', 'normalize_document', 'normalize_json'}:
        from .tree import pipeline
        from .tree.node import Document
        return {'Document': Document, 'NormalizationPipeline': pipeline.NormalizationPipeline, 'normalize_document': pipeline.normalize_document, 'normalize_json': pipeline.normalize_json}[name]
    if name == 'generate_and_validate':
        from .agent.regenerate import generate_and_validate
        return generate_and_validate
    if name in {'ConversionConfig', 'convert_markup'}:
        from .agent.conversion import ConversionConfig, convert_markup
        return {'ConversionConfig': ConversionConfig, 'convert_markup': convert_markup}[name]
    raise AttributeError(f"module 'markupfix' has no attribute '{name}'")
