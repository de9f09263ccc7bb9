"""
Service layer modules orchestrate resource workflows (clusters, droplets, databases, etc.)
on top of the HTTP client.
"""

__all__ = [
    "creation",
    "polling",
    "kubernetes_service",
    "droplet_service",
    "database_service",
    "registry_service",
    "network_service",
]
