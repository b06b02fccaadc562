"""Hidden Character Detector: find invisible and deceptive Unicode in text."""

__version__ = "0.1.0"

from hcdetect.categories import Category
from hcdetect.scanner import Finding, scan

__all__ = ["Category", "Finding", "scan", "__version__"]
