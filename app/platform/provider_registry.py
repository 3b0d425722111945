from app.core.config import settings
from app.platform.ports.object_storage import ObjectStoragePort
from app.platform.adapters.storage_local import LocalFilesystemStorage
from app.platform.adapters.storage_s3 import S3Storage
from app.platform.ports.notification_bus import NotificationBusPort
from app.platform.adapters.bus_memory import InMemoryNotificationBus
from app.platform.adapters.bus_redis import RedisNotificationBus

class ProviderRegistry:
    _object_storage: ObjectStoragePort | None = None
    _notification_bus: NotificationBusPort | None = None

    @classmethod
    def object_storage(cls) -> ObjectStoragePort:
        if cls._object_storage is None:
            if settings.OBJECT_STORAGE_PROVIDER == "s3":
                cls._object_storage = S3Storage()
            else:
                cls._object_storage = LocalFilesystemStorage(settings.LOCAL_STORAGE_ROOT)
        return cls._object_storage

    @classmethod
    def notification_bus(cls) -> NotificationBusPort:
        if cls._notification_bus is None:
            prov = (settings.NOTIFICATION_BUS_PROVIDER or "memory").lower()
            if prov == "redis":
                cls._notification_bus = RedisNotificationBus()
            else:
                cls._notification_bus = InMemoryNotificationBus()
        return cls._notification_bus

    @classmethod
    async def close(cls) -> None:
        if cls._notification_bus is not None:
            await cls._notification_bus.close()
            cls._notification_bus = None

registry = ProviderRegistry()

# FastAPI dependencies; override these in tests
def get_object_storage() -> ObjectStoragePort:
    return registry.object_storage()

def get_notification_bus() -> NotificationBusPort:
    return registry.notification_bus()
