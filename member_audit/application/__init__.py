"""Application layer: DTOs, pure auditing services, and repository protocols.

Infrastructure implements the protocols (SQLAlchemy lookups and repository).
"""
