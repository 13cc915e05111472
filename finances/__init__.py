"""
Personal Finances - Source Package

A small ledger of revenues and expenses owned by users.

DESIGN PRINCIPLES:
1. Fail early, fail visibly (first violated rule is reported)
2. Only EFFECTED entries move the balance
3. Storage layer is swappable
4. Every change is auditable
"""

__version__ = "1.0.0"
__author__ = "Personal Finances Team"
