from .decoder import DecodeResult, Decoded, Undecodable, decode, transport_decode

__all__ = ["DecodeResult", "Decoded", "Undecodable", "decode", "transport_decode"]
