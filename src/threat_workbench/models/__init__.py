from .inputs import ComposeRequest, RawComposeRequest, RawThreat, to_compose_request, to_threat_record

__all__ = ["ComposeRequest", "RawComposeRequest", "RawThreat", "to_compose_request", "to_threat_record"]
