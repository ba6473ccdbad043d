"""Neo4j implementation of ContactStore.
Graph: (c:Contact {id, name, email, phone, type})-[:HAS_IMAGE]->(i:ContactImage {id, contact_id, ...}).
Integer ids come from (:Sequence {name}) counter nodes, advanced inside the writing transaction.
"""

from contextlib import contextmanager
from datetime import datetime, timezone

from neo4j.exceptions import DriverError, Neo4jError

from leadbook.application.dto import ContactInput, ContactUpdate, ImageUpload
from leadbook.application.ports import StorageError
from leadbook.domain import Contact, ContactImage, ContactType, ImageLimitExceeded

CONTACT_SEQUENCE = "contact"
IMAGE_SEQUENCE = "contact_image"

_CONSTRAINT_QUERIES = (
    "CREATE CONSTRAINT contact_id_unique IF NOT EXISTS "
    "FOR (c:Contact) REQUIRE c.id IS UNIQUE",
    "CREATE CONSTRAINT contact_image_id_unique IF NOT EXISTS "
    "FOR (i:ContactImage) REQUIRE i.id IS UNIQUE",
    "CREATE CONSTRAINT sequence_name_unique IF NOT EXISTS "
    "FOR (s:Sequence) REQUIRE s.name IS UNIQUE",
)

_NEXT_IDS_QUERY = """
MERGE (s:Sequence {name: $name})
ON CREATE SET s.value = 0
SET s.value = s.value + $count
RETURN s.value AS last_id
"""

_LIST_CONTACTS_QUERY = """
MATCH (c:Contact)
OPTIONAL MATCH (c)-[:HAS_IMAGE]->(i:ContactImage)
RETURN c, count(i) AS image_count
ORDER BY c.id
"""

_GET_CONTACT_QUERY = """
MATCH (c:Contact {id: $contact_id})
OPTIONAL MATCH (c)-[:HAS_IMAGE]->(i:ContactImage)
RETURN c, count(i) AS image_count
"""

_CREATE_CONTACT_QUERY = """
CREATE (c:Contact {id: $id, name: $name, email: $email, phone: $phone, type: $type})
RETURN c
"""

_UPDATE_CONTACT_QUERY = """
MATCH (c:Contact {id: $contact_id})
SET c.name = $name, c.email = $email, c.phone = $phone
WITH c
OPTIONAL MATCH (c)-[:HAS_IMAGE]->(i:ContactImage)
RETURN c, count(i) AS image_count
"""

_DELETE_CONTACT_QUERY = """
MATCH (c:Contact {id: $contact_id})
OPTIONAL MATCH (c)-[:HAS_IMAGE]->(i:ContactImage)
WITH c, collect(i) AS images
FOREACH (img IN images | DETACH DELETE img)
DETACH DELETE c
RETURN count(*) AS deleted
"""

_COUNT_IMAGES_QUERY = """
MATCH (:Contact {id: $contact_id})-[:HAS_IMAGE]->(i:ContactImage)
RETURN count(i) AS image_count
"""

_LIST_IMAGES_QUERY = """
MATCH (:Contact {id: $contact_id})-[:HAS_IMAGE]->(i:ContactImage)
RETURN i
ORDER BY i.uploaded_at, i.id
"""

_GET_IMAGE_QUERY = """
MATCH (:Contact {id: $contact_id})-[:HAS_IMAGE]->(i:ContactImage {id: $image_id})
RETURN i
"""

# Setting and removing a property takes the node's write lock until commit.
_LOCK_AND_COUNT_QUERY = """
MATCH (c:Contact {id: $contact_id})
SET c._lock = true
REMOVE c._lock
WITH c
OPTIONAL MATCH (c)-[:HAS_IMAGE]->(i:ContactImage)
RETURN c.id AS contact_id, count(i) AS image_count
"""

_CREATE_IMAGES_QUERY = """
MATCH (c:Contact {id: $contact_id})
UNWIND $images AS img
CREATE (c)-[:HAS_IMAGE]->(i:ContactImage {
    id: img.id,
    contact_id: $contact_id,
    image_data: img.image_data,
    file_name: img.file_name,
    content_type: img.content_type,
    uploaded_at: img.uploaded_at
})
RETURN i
ORDER BY i.id
"""

_DELETE_IMAGE_QUERY = """
MATCH (:Contact {id: $contact_id})-[:HAS_IMAGE]->(i:ContactImage {id: $image_id})
DETACH DELETE i
RETURN count(*) AS deleted
"""


def _datetime_to_iso(dt: datetime) -> str:
    # Fixed-width UTC form so string order matches time order.
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def ensure_contact_constraints(driver: object) -> None:
    """Create uniqueness constraints for contact, image, and sequence ids. Idempotent."""
    try:
        with driver.session() as session:
            for query in _CONSTRAINT_QUERIES:
                session.run(query).consume()
    except (Neo4jError, DriverError) as exc:
        raise StorageError(str(exc)) from exc


def _next_ids(tx, name: str, count: int) -> list[int]:
    last_id = tx.run(_NEXT_IDS_QUERY, name=name, count=count).single()["last_id"]
    return list(range(last_id - count + 1, last_id + 1))


def _node_to_contact(node, image_count: int) -> Contact:
    return Contact(
        id=node["id"],
        name=node["name"],
        email=node.get("email"),
        phone=node.get("phone"),
        type=ContactType(node["type"]),
        image_count=image_count,
    )


def _node_to_image(node) -> ContactImage:
    return ContactImage(
        id=node["id"],
        contact_id=node["contact_id"],
        image_data=node["image_data"],
        file_name=node.get("file_name"),
        content_type=node.get("content_type"),
        uploaded_at=_iso_to_datetime(node["uploaded_at"]),
    )


class Neo4jContactStore:
    """Stores contacts and images as nodes. Writes run in managed write transactions."""

    def __init__(self, driver: object, *, database: str | None = None) -> None:
        self._driver = driver
        self._database = database

    @contextmanager
    def _session(self):
        try:
            with self._driver.session(database=self._database) as session:
                yield session
        except (Neo4jError, DriverError) as exc:
            raise StorageError(str(exc)) from exc

    def list_contacts(self) -> list[Contact]:
        with self._session() as session:
            result = session.run(_LIST_CONTACTS_QUERY)
            return [_node_to_contact(rec["c"], rec["image_count"]) for rec in result]

    def get_contact(self, contact_id: int) -> Contact | None:
        with self._session() as session:
            record = session.run(_GET_CONTACT_QUERY, contact_id=contact_id).single()
        if not record:
            return None
        return _node_to_contact(record["c"], record["image_count"])

    def add_contact(self, data: ContactInput) -> Contact:
        def _create(tx):
            (contact_id,) = _next_ids(tx, CONTACT_SEQUENCE, 1)
            record = tx.run(
                _CREATE_CONTACT_QUERY,
                id=contact_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
                type=ContactType.parse(data.type).value,
            ).single()
            return _node_to_contact(record["c"], 0)

        with self._session() as session:
            return session.execute_write(_create)

    def update_contact(self, contact_id: int, data: ContactUpdate) -> Contact | None:
        def _update(tx):
            record = tx.run(
                _UPDATE_CONTACT_QUERY,
                contact_id=contact_id,
                name=data.name,
                email=data.email,
                phone=data.phone,
            ).single()
            if not record:
                return None
            return _node_to_contact(record["c"], record["image_count"])

        with self._session() as session:
            return session.execute_write(_update)

    def delete_contact(self, contact_id: int) -> bool:
        def _delete(tx):
            return tx.run(_DELETE_CONTACT_QUERY, contact_id=contact_id).single()["deleted"]

        with self._session() as session:
            return session.execute_write(_delete) > 0

    def count_images(self, contact_id: int) -> int:
        with self._session() as session:
            record = session.run(_COUNT_IMAGES_QUERY, contact_id=contact_id).single()
        return record["image_count"] if record else 0

    def list_images(self, contact_id: int) -> list[ContactImage]:
        with self._session() as session:
            result = session.run(_LIST_IMAGES_QUERY, contact_id=contact_id)
            return [_node_to_image(rec["i"]) for rec in result]

    def get_image(self, contact_id: int, image_id: int) -> ContactImage | None:
        with self._session() as session:
            record = session.run(
                _GET_IMAGE_QUERY, contact_id=contact_id, image_id=image_id
            ).single()
        if not record:
            return None
        return _node_to_image(record["i"])

    def add_images(
        self,
        contact_id: int,
        uploads: list[ImageUpload],
        *,
        uploaded_at: datetime,
        max_images: int,
    ) -> list[ContactImage] | None:
        def _add(tx):
            record = tx.run(_LOCK_AND_COUNT_QUERY, contact_id=contact_id).single()
            if not record:
                return None
            current = record["image_count"]
            if current + len(uploads) > max_images:
                raise ImageLimitExceeded(current, len(uploads), max_images)
            ids = _next_ids(tx, IMAGE_SEQUENCE, len(uploads))
            images = [
                {
                    "id": image_id,
                    "image_data": upload.image_data,
                    "file_name": upload.file_name,
                    "content_type": upload.content_type,
                    "uploaded_at": _datetime_to_iso(uploaded_at),
                }
                for image_id, upload in zip(ids, uploads)
            ]
            result = tx.run(_CREATE_IMAGES_QUERY, contact_id=contact_id, images=images)
            return [_node_to_image(rec["i"]) for rec in result]

        with self._session() as session:
            return session.execute_write(_add)

    def delete_image(self, contact_id: int, image_id: int) -> bool:
        def _delete(tx):
            return tx.run(
                _DELETE_IMAGE_QUERY, contact_id=contact_id, image_id=image_id
            ).single()["deleted"]

        with self._session() as session:
            return session.execute_write(_delete) > 0
