from .builder import ResponseBuilder

__all__ = ["ResponseBuilder"]
