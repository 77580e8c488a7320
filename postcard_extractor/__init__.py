"""
Postcard Scan Extractor
License: GPLv3
"""

APP_NAME = "PostcardScanExtractor"
__version__ = "0.1.0"
