from .device_resolver import DeviceResolver

__all__ = ["DeviceResolver"]
