"""Feature extraction, aggregation, request building and biomarker normalization"""

from voicestress.analysis.extractor import LibrosaFeatureExtractor
from voicestress.analysis.aggregator import FeatureAggregator
from voicestress.analysis.request_builder import AnalysisRequestBuilder
from voicestress.analysis.biomarkers import BiomarkerNormalizer, split_groups

__all__ = [
    'LibrosaFeatureExtractor',
    'FeatureAggregator',
    'AnalysisRequestBuilder',
    'BiomarkerNormalizer',
    'split_groups',
]
