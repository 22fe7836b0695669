"""Application layer: interfaces, DTOs and services.

Infrastructure implements the interfaces (repositories, cache, hashing).
"""
