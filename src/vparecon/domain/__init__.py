"""Domain layer for vparecon application.

Services are imported from their modules (e.g. vparecon.domain.matching)
rather than re-exported here, so the store layer can import entities
without pulling in the services that depend on it.
"""
