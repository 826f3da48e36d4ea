"""
Marketing classifiers.
"""

from .rules import RuleBasedClassifier, KeywordRule, SenderPatternRule, HeaderRule

__all__ = ['RuleBasedClassifier', 'KeywordRule', 'SenderPatternRule', 'HeaderRule']
