import json
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from advisornet.domain.entities import (
    TAG_FIELDS,
    ApprovalStatus,
    Connection,
    InviteToken,
    Profile,
    Publication,
    User,
    UserType,
    utcnow,
)
from advisornet.domain.errors import ConflictError


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def _uuid(value: str | None) -> UUID | None:
    return UUID(value) if value else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteUserRepo(_SQLiteRepo):
    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, password_hash, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    password_hash=excluded.password_hash,
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.password_hash,
                    user.status,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )

            # Replace role assignments
            conn.execute("DELETE FROM role_assignments WHERE user_id = ?", (str(user.id),))
            for role in dict.fromkeys(user.roles):
                conn.execute(
                    "INSERT INTO role_assignments (id, user_id, role, created_at) "
                    "VALUES (?, ?, ?, ?)",
                    (str(uuid4()), str(user.id), role, utcnow().isoformat()),
                )

            conn.commit()
            return user
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError(f"Email already registered: {user.email}") from e
        finally:
            conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ? COLLATE NOCASE", (email.strip(),)
            ).fetchone()
            if not row:
                return None
            return self._map_row_to_user(conn, row)
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            if not row:
                return None
            return self._map_row_to_user(conn, row)
        finally:
            conn.close()

    def list_all(self) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY email").fetchall()
            return [self._map_row_to_user(conn, row) for row in rows]
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def delete(self, user_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM users WHERE id = ?", (str(user_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row_to_user(self, conn: sqlite3.Connection, row: dict[str, Any]) -> User:
        role_rows = conn.execute(
            "SELECT role FROM role_assignments WHERE user_id = ? ORDER BY created_at",
            (row["id"],),
        ).fetchall()
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            password_hash=row["password_hash"],
            roles=[r["role"] for r in role_rows],
            status=row["status"],
            created_at=parse_dt(row["created_at"]) or utcnow(),
            updated_at=parse_dt(row["updated_at"]) or utcnow(),
        )


class SQLiteInviteTokenRepo(_SQLiteRepo):
    def save(self, token: InviteToken) -> InviteToken:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO invite_tokens (
                    id, token, is_active, expires_at, used_at, used_by, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    token=excluded.token,
                    is_active=excluded.is_active,
                    expires_at=excluded.expires_at,
                    used_at=excluded.used_at,
                    used_by=excluded.used_by
            """,
                (
                    str(token.id),
                    token.token,
                    1 if token.is_active else 0,
                    token.expires_at.isoformat(),
                    _iso(token.used_at),
                    str(token.used_by) if token.used_by else None,
                    str(token.created_by) if token.created_by else None,
                    token.created_at.isoformat(),
                ),
            )
            conn.commit()
            return token
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError("Token already exists") from e
        finally:
            conn.close()

    def get_by_id(self, token_id: UUID) -> InviteToken | None:
        return self._get_one("SELECT * FROM invite_tokens WHERE id = ?", (str(token_id),))

    def get_by_token(self, token: str) -> InviteToken | None:
        return self._get_one("SELECT * FROM invite_tokens WHERE token = ?", (token,))

    def list_all(self) -> list[InviteToken]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM invite_tokens ORDER BY created_at DESC"
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def deactivate_all_except(self, token_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE invite_tokens SET is_active = 0 WHERE id != ?", (str(token_id),)
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, token_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM invite_tokens WHERE id = ?", (str(token_id),))
            conn.commit()
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> InviteToken | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> InviteToken:
        return InviteToken(
            id=UUID(row["id"]),
            token=row["token"],
            is_active=bool(row["is_active"]),
            expires_at=parse_dt(row["expires_at"]) or utcnow(),
            used_at=parse_dt(row["used_at"]),
            used_by=_uuid(row["used_by"]),
            created_by=_uuid(row["created_by"]),
            created_at=parse_dt(row["created_at"]) or utcnow(),
        )


_PROFILE_TEXT_COLUMNS = (
    "headline",
    "bio",
    "location",
    "organisation",
    "contact_number",
    "avatar_url",
    "linkedin_url",
    "website_url",
    "education",
    "experience",
    "company_type",
    "company_size",
)

_PROFILE_COLUMNS = (
    "id",
    "user_id",
    "email",
    "full_name",
    "user_type",
    "approval_status",
    *_PROFILE_TEXT_COLUMNS,
    *TAG_FIELDS,
    "founded_year",
    "invite_token_id",
    "created_at",
    "updated_at",
)


class SQLiteProfileRepo(_SQLiteRepo):
    def save(self, profile: Profile) -> Profile:
        values: dict[str, Any] = {
            "id": str(profile.id),
            "user_id": str(profile.user_id),
            "email": profile.email,
            "full_name": profile.full_name,
            "user_type": profile.user_type,
            "approval_status": profile.approval_status,
            "founded_year": profile.founded_year,
            "invite_token_id": str(profile.invite_token_id) if profile.invite_token_id else None,
            "created_at": profile.created_at.isoformat(),
            "updated_at": profile.updated_at.isoformat(),
        }
        for col in _PROFILE_TEXT_COLUMNS:
            values[col] = getattr(profile, col)
        for col in TAG_FIELDS:
            values[col] = json.dumps(getattr(profile, col))

        columns = ", ".join(_PROFILE_COLUMNS)
        placeholders = ", ".join("?" for _ in _PROFILE_COLUMNS)
        updates = ",\n                    ".join(
            f"{c}=excluded.{c}" for c in _PROFILE_COLUMNS if c not in ("id", "created_at")
        )

        conn = self._get_conn()
        try:
            conn.execute(
                f"""
                INSERT INTO profiles ({columns}) VALUES ({placeholders})
                ON CONFLICT(id) DO UPDATE SET
                    {updates}
            """,
                tuple(values[c] for c in _PROFILE_COLUMNS),
            )
            conn.commit()
            return profile
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError(f"Profile could not be saved: {e}") from e
        finally:
            conn.close()

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE id = ?", (str(profile_id),))

    def get_by_user_id(self, user_id: UUID) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE user_id = ?", (str(user_id),))

    def get_many(self, profile_ids: Iterable[UUID]) -> dict[UUID, Profile]:
        ids = [str(p) for p in set(profile_ids)]
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = self._get_all(f"SELECT * FROM profiles WHERE id IN ({placeholders})", tuple(ids))
        return {p.id: p for p in rows}

    def list_by_type(
        self, user_type: UserType, approval_status: ApprovalStatus = "approved"
    ) -> list[Profile]:
        return self._get_all(
            "SELECT * FROM profiles WHERE user_type = ? AND approval_status = ? "
            "ORDER BY full_name COLLATE NOCASE ASC",
            (user_type, approval_status),
        )

    def list_by_status(self, approval_status: ApprovalStatus) -> list[Profile]:
        return self._get_all(
            "SELECT * FROM profiles WHERE approval_status = ? ORDER BY created_at DESC",
            (approval_status,),
        )

    def delete(self, profile_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM profiles WHERE id = ?", (str(profile_id),))
            conn.commit()
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> Profile | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _get_all(self, query: str, params: tuple[Any, ...]) -> list[Profile]:
        conn = self._get_conn()
        try:
            return [self._map_row(r) for r in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Profile:
        data: dict[str, Any] = {col: row[col] for col in _PROFILE_TEXT_COLUMNS}
        for col in TAG_FIELDS:
            data[col] = json.loads(row[col]) if row[col] else []
        return Profile(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            email=row["email"],
            full_name=row["full_name"],
            user_type=row["user_type"],
            approval_status=row["approval_status"],
            founded_year=row["founded_year"],
            invite_token_id=_uuid(row["invite_token_id"]),
            created_at=parse_dt(row["created_at"]) or utcnow(),
            updated_at=parse_dt(row["updated_at"]) or utcnow(),
            **data,
        )


class SQLiteConnectionRepo(_SQLiteRepo):
    def save(self, connection: Connection) -> Connection:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO connections (
                    id, sender_id, receiver_id, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(connection.id),
                    str(connection.sender_id),
                    str(connection.receiver_id),
                    connection.status,
                    connection.created_at.isoformat(),
                    connection.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return connection
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ConflictError("Connection already exists") from e
        finally:
            conn.close()

    def get_by_id(self, connection_id: UUID) -> Connection | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM connections WHERE id = ?", (str(connection_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_between(self, a: UUID, b: UUID) -> Connection | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM connections WHERE "
                "(sender_id = ? AND receiver_id = ?) OR (sender_id = ? AND receiver_id = ?)",
                (str(a), str(b), str(b), str(a)),
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_for_profile(self, profile_id: UUID) -> list[Connection]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM connections WHERE sender_id = ? OR receiver_id = ? "
                "ORDER BY created_at DESC",
                (str(profile_id), str(profile_id)),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def delete(self, connection_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM connections WHERE id = ?", (str(connection_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Connection:
        return Connection(
            id=UUID(row["id"]),
            sender_id=UUID(row["sender_id"]),
            receiver_id=UUID(row["receiver_id"]),
            status=row["status"],
            created_at=parse_dt(row["created_at"]) or utcnow(),
            updated_at=parse_dt(row["updated_at"]) or utcnow(),
        )


class SQLitePublicationRepo(_SQLiteRepo):
    def save(self, publication: Publication) -> Publication:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO publications (
                    id, profile_id, title, description, publication_type,
                    file_url, file_path, external_url, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    description=excluded.description,
                    publication_type=excluded.publication_type,
                    file_url=excluded.file_url,
                    file_path=excluded.file_path,
                    external_url=excluded.external_url,
                    updated_at=excluded.updated_at
            """,
                (
                    str(publication.id),
                    str(publication.profile_id),
                    publication.title,
                    publication.description,
                    publication.publication_type,
                    publication.file_url,
                    publication.file_path,
                    publication.external_url,
                    publication.created_at.isoformat(),
                    publication.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return publication
        finally:
            conn.close()

    def get_by_id(self, publication_id: UUID) -> Publication | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM publications WHERE id = ?", (str(publication_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_profile(self, profile_id: UUID) -> list[Publication]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM publications WHERE profile_id = ? ORDER BY created_at DESC",
                (str(profile_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def delete(self, publication_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM publications WHERE id = ?", (str(publication_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Publication:
        return Publication(
            id=UUID(row["id"]),
            profile_id=UUID(row["profile_id"]),
            title=row["title"],
            description=row["description"],
            publication_type=row["publication_type"],
            file_url=row["file_url"],
            file_path=row["file_path"],
            external_url=row["external_url"],
            created_at=parse_dt(row["created_at"]) or utcnow(),
            updated_at=parse_dt(row["updated_at"]) or utcnow(),
        )
