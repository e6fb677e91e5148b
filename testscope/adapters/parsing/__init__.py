"""
Parsing adapters for testscope.

This package contains the name classifier and the line-oriented scanner that
links source files and packages to test scripts.
"""

from .annotation_scanner import AnnotationScanner
from .name_classifier import NameClassifier

__all__ = ["AnnotationScanner", "NameClassifier"]
