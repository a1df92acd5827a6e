# Path: cpms/dictionary/__init__.py
"""
Dictionary Module - Concept and Pattern Documents

YAML documents describing matchable concepts and the patterns that
combine them. DocumentLoader reads this directory by default.

Structure:
    dictionary/
    ├── concepts/
    │   ├── login/        # email, password, submit
    │   └── payment/      # card name, number, expiry, cvv, pay button
    └── patterns/         # login, payment

Adding a concept:
    Drop a YAML file under concepts/. No code changes required.
"""

from pathlib import Path


DICTIONARY_DIR = Path(__file__).parent


__all__ = ['DICTIONARY_DIR']
