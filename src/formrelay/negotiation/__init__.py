from .negotiator import Negotiator, parse_accept, parse_content_type

__all__ = ["Negotiator", "parse_accept", "parse_content_type"]
