from .composition import compose_request, threat_family

__all__ = ["compose_request", "threat_family"]
