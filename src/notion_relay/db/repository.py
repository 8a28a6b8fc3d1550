from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from notion_relay.webhook.models import Namespace, SubscriberRegistration

from .models import Base, Delivery, KeyValue, Subscription


def _to_registration(row: Subscription) -> SubscriberRegistration:
    return SubscriberRegistration(
        id=row.id,
        namespace=Namespace(row.namespace),
        event_types=tuple(row.event_types or ()),
        entity_id=row.entity_id,
    )


class Repository:
    def __init__(self, database_url: str) -> None:
        self._engine = create_async_engine(database_url, echo=False)
        self._session_factory = async_sessionmaker(self._engine, expire_on_commit=False)

    async def init_db(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    # -- KeyValue --

    async def get_value(self, key: str) -> str | None:
        async with self._session_factory() as session:
            row = await session.get(KeyValue, key)
            return row.value if row else None

    async def set_value(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            existing = await session.get(KeyValue, key)
            now = datetime.now(timezone.utc)
            if existing:
                existing.value = value
                existing.updated_at = now
            else:
                session.add(KeyValue(key=key, value=value, updated_at=now))
            await session.commit()

    # -- Subscription --

    async def add_subscription(
        self,
        namespace: Namespace,
        event_types: list[str] | None = None,
        entity_id: str | None = None,
    ) -> SubscriberRegistration:
        async with self._session_factory() as session:
            row = Subscription(
                namespace=namespace.value,
                event_types=list(event_types or []),
                entity_id=entity_id or None,
            )
            session.add(row)
            await session.commit()
            return _to_registration(row)

    async def get_subscription(self, subscription_id: int) -> SubscriberRegistration | None:
        async with self._session_factory() as session:
            row = await session.get(Subscription, subscription_id)
            return _to_registration(row) if row else None

    async def list_subscribers(
        self, namespace: Namespace | None = None
    ) -> list[SubscriberRegistration]:
        async with self._session_factory() as session:
            stmt = select(Subscription).order_by(Subscription.id)
            if namespace is not None:
                stmt = stmt.where(Subscription.namespace == namespace.value)
            result = await session.execute(stmt)
            return [_to_registration(row) for row in result.scalars()]

    async def remove_subscription(self, subscription_id: int) -> bool:
        """Delete a subscription and its deliveries. Returns False if it didn't exist."""
        async with self._session_factory() as session:
            existing = await session.get(Subscription, subscription_id)
            if not existing:
                return False
            await session.execute(
                delete(Delivery).where(Delivery.subscription_id == subscription_id)
            )
            await session.delete(existing)
            await session.commit()
            return True

    # -- Delivery --

    async def record_deliveries(
        self,
        subscription_ids: list[int],
        event_id: str | None,
        event_type: str,
        payload: dict,
    ) -> None:
        """Write one outbox row per subscription in a single transaction."""
        async with self._session_factory() as session:
            for subscription_id in subscription_ids:
                session.add(
                    Delivery(
                        subscription_id=subscription_id,
                        event_id=event_id,
                        event_type=event_type,
                        payload=payload,
                    )
                )
            await session.commit()

    async def list_deliveries(self, subscription_id: int, limit: int = 100) -> list[Delivery]:
        async with self._session_factory() as session:
            stmt = (
                select(Delivery)
                .where(Delivery.subscription_id == subscription_id)
                .order_by(Delivery.id.desc())
                .limit(limit)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())
