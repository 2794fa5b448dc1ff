"""
Customer data resolver: a sequential conveyor that merges a structured customer
record and a chat transcript into one resolved profile per item.
"""

__version__ = "0.1.0"
