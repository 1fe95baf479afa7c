"""SQL repositories for translations, users, shipper locations and VietQR codes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from servicekit.entity import ShipperLocation, Translation, User, VietQR, VietQRStatus
from servicekit.models import (
    ShipperLocationModel,
    TranslationModel,
    UserModel,
    to_shipper_location_entity,
    to_shipper_location_model,
)
from servicekit.postgres import Postgres

_ID = BigInteger().with_variant(Integer(), "sqlite")
_NO_ROWS = "no rows in result set"

metadata = MetaData()

history_table = Table(
    "history",
    metadata,
    Column("source", String(255), nullable=False),
    Column("destination", String(255), nullable=False),
    Column("original", Text, nullable=False),
    Column("translation", Text, nullable=False),
)

users_table = Table(
    "users",
    metadata,
    Column("id", _ID, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

shipper_locations_table = Table(
    ShipperLocationModel.table_name,
    metadata,
    Column("id", _ID, primary_key=True, autoincrement=True),
    Column("shipper_id", String(255), nullable=False, index=True),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("timestamp", DateTime(timezone=True), nullable=False),
)

vietqr_table = Table(
    "vietqr",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("status", String(32), nullable=False),
    Column("content", Text, nullable=False),
)


class RepositoryError(Exception):
    """A database operation failed."""


class RecordNotFoundError(RepositoryError):
    """The requested row does not exist."""


class UserNotFoundError(RecordNotFoundError):
    """No user has the requested e-mail address."""

    def __init__(self) -> None:
        super().__init__("user not found")


def create_schema(engine: Engine) -> None:
    """Create every table the repositories use, if missing."""
    metadata.create_all(engine)


def _to_db(value: datetime) -> datetime:
    return value.astimezone(timezone.utc) if value.tzinfo is not None else value


def _from_db(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _user(row: Any, with_password: bool = False) -> User:
    return User(
        id=row.id,
        email=row.email,
        username=row.username,
        password=row.password if with_password else "",
        created_at=_from_db(row.created_at),
        updated_at=_from_db(row.updated_at),
    )


class _Repository:
    def __init__(self, pg: Postgres) -> None:
        self._engine = pg.engine

    def _execute(self, where: str, statement: Any) -> Any:
        try:
            with self._engine.begin() as conn:
                return conn.execute(statement)
        except SQLAlchemyError as exc:
            raise RepositoryError(f"{where}: {exc}") from exc

    def _fetch_all(self, where: str, statement: Any) -> list[Any]:
        try:
            with self._engine.connect() as conn:
                return list(conn.execute(statement))
        except SQLAlchemyError as exc:
            raise RepositoryError(f"{where}: {exc}") from exc

    def _fetch_one(self, where: str, statement: Any) -> Any:
        try:
            with self._engine.connect() as conn:
                return conn.execute(statement).first()
        except SQLAlchemyError as exc:
            raise RepositoryError(f"{where}: {exc}") from exc


class TranslationRepository(_Repository):
    """The translation history table."""

    def get_history(self) -> list[Translation]:
        rows = self._fetch_all(
            "TranslationRepo - GetHistory - r.Pool.Query", select(history_table)
        )
        return [
            Translation(
                source=row.source,
                destination=row.destination,
                original=row.original,
                translation=row.translation,
            )
            for row in rows
        ]

    def store(self, model: TranslationModel) -> None:
        self._execute(
            "TranslationRepo - Store - r.Pool.Exec",
            insert(history_table).values(
                source=model.source,
                destination=model.destination,
                original=model.original,
                translation=model.translation,
            ),
        )


class UserRepository(_Repository):
    """The users table."""

    _public_columns = (
        users_table.c.id,
        users_table.c.email,
        users_table.c.username,
        users_table.c.created_at,
        users_table.c.updated_at,
    )

    def create(self, model: UserModel) -> User:
        """Insert the user with fresh timestamps; the result carries no password."""
        now = datetime.now(timezone.utc)
        result = self._execute(
            "UserRepo - Create - r.Pool.QueryRow",
            insert(users_table).values(
                email=model.email,
                username=model.username,
                password=model.password,
                created_at=_to_db(now),
                updated_at=_to_db(now),
            ),
        )
        return User(
            id=result.inserted_primary_key[0],
            email=model.email,
            username=model.username,
            created_at=now,
            updated_at=now,
        )

    def get_by_id(self, user_id: int) -> User:
        where = "UserRepo - GetByID - r.Pool.QueryRow"
        row = self._fetch_one(
            where, select(*self._public_columns).where(users_table.c.id == user_id)
        )
        if row is None:
            raise RecordNotFoundError(f"{where}: {_NO_ROWS}")
        return _user(row)

    def get_by_email(self, email: str) -> User:
        """Return the user with the address, password included."""
        row = self._fetch_one(
            "UserRepo - GetByEmail - r.Pool.QueryRow",
            select(users_table).where(users_table.c.email == email),
        )
        if row is None:
            raise UserNotFoundError()
        return _user(row, with_password=True)

    def update(self, model: UserModel) -> None:
        """Refresh updated_at and overwrite only the non-empty fields."""
        values: dict[str, Any] = {"updated_at": _to_db(datetime.now(timezone.utc))}
        for name in ("email", "username", "password"):
            value = getattr(model, name)
            if value:
                values[name] = value
        self._execute(
            "UserRepo - Update - r.Pool.Exec",
            update(users_table).where(users_table.c.id == model.id).values(**values),
        )

    def delete(self, user_id: int) -> None:
        self._execute(
            "UserRepo - Delete - r.Pool.Exec",
            delete(users_table).where(users_table.c.id == user_id),
        )

    def list(self) -> list[User]:
        rows = self._fetch_all(
            "UserRepo - List - r.Pool.Query",
            select(*self._public_columns).order_by(users_table.c.id),
        )
        return [_user(row) for row in rows]


class ShipperLocationRepository(_Repository):
    """The append-only shipper location history."""

    def store(self, loc: ShipperLocation) -> None:
        model = to_shipper_location_model(loc)
        self._execute(
            "ShipperLocationRepo - Store",
            insert(shipper_locations_table).values(
                shipper_id=model.shipper_id,
                latitude=model.latitude,
                longitude=model.longitude,
                timestamp=_to_db(model.timestamp),
            ),
        )

    def get_latest_by_shipper_id(self, shipper_id: str) -> ShipperLocation:
        where = "ShipperLocationRepo - GetLatestByShipperID"
        table = shipper_locations_table
        row = self._fetch_one(
            where,
            select(table)
            .where(table.c.shipper_id == shipper_id)
            .order_by(table.c.timestamp.desc())
            .limit(1),
        )
        if row is None:
            raise RecordNotFoundError(f"{where}: {_NO_ROWS}")
        return to_shipper_location_entity(
            ShipperLocationModel(
                id=row.id,
                shipper_id=row.shipper_id,
                latitude=row.latitude,
                longitude=row.longitude,
                timestamp=_from_db(row.timestamp),
            )
        )


class VietQRRepository(_Repository):
    """Generated VietQR codes and their status."""

    def store(self, qr: VietQR) -> None:
        self._execute(
            "VietQRRepo - Store",
            insert(vietqr_table).values(
                id=qr.id, status=VietQRStatus(qr.status).value, content=qr.content
            ),
        )

    def find_by_id(self, qr_id: str) -> VietQR:
        where = "VietQRRepo - FindByID"
        row = self._fetch_one(where, select(vietqr_table).where(vietqr_table.c.id == qr_id))
        if row is None:
            raise RecordNotFoundError(f"{where}: {_NO_ROWS}")
        return VietQR(id=row.id, status=VietQRStatus(row.status), content=row.content)

    def update_status(self, qr_id: str, status: VietQRStatus) -> None:
        self._execute(
            "VietQRRepo - UpdateStatus",
            update(vietqr_table)
            .where(vietqr_table.c.id == qr_id)
            .values(status=VietQRStatus(status).value),
        )