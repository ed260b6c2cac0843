from .parcel_registry import ParcelRegistry

__all__ = ["ParcelRegistry"]
