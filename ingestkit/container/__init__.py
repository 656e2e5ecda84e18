from ingestkit.container.service_container import ServiceContainer

__all__ = ["ServiceContainer"]
