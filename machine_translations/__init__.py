"""
Machine translation of Shopware-style ``*_translation`` tables via DeepL.
"""

__version__ = "1.0.0"
