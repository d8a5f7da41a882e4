"""Domain layer for bizdocs application.

Services are imported from their modules (``bizdocs.domain.transaction`` and
so on) so that the database layer can import entities without a cycle.
"""
