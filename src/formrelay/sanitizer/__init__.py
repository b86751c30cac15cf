from .adapters import LibrarySanitizer, Sanitizer, create_sanitizer

__all__ = ["LibrarySanitizer", "Sanitizer", "create_sanitizer"]
