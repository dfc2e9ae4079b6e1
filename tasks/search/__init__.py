"""
Task search engine: normalization, derived searchable text, predicates,
visibility scoping and keyset pagination.

Import submodules directly; this package does not import any models.
"""
