"""Normalization package.

One normalizer per identifier family.  Each normalizer takes a raw cell
value and returns a canonical form that is safe to index and compare::

    def normalize(raw: str) -> str:
        ...

``split_multi_value`` turns one cell into an ordered list of raw values
before element-wise normalization.
"""
