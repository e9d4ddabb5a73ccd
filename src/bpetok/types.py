"""
Core types for tokenization.
"""

type Token = str
type Rank = int
type Record = tuple[str, Rank]
