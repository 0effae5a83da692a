"""
Site search: crawler, lemmatized inverted index dan ranked full-text search
"""

__version__ = "1.0.0"
