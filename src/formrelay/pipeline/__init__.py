from .orchestrator import EndpointProfile, Orchestrator

__all__ = ["EndpointProfile", "Orchestrator"]
