"""Concrete adapters for the storage interfaces.

- ``submission``: SQLite submission store (ISubmissionProvider)
- ``blob``: local filesystem asset store (IBlobProvider)
- ``user``: SQLite user principal store (IUserProvider)
"""
