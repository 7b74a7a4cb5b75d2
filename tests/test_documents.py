"""
Tests for event document attachments.

Covers upload checks, the filesystem object store, the attach/read/delete
flow and the HTTP endpoints.
"""
import pytest
import pytest_asyncio
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from eventdesk.errors import (
    DocumentRejectedError,
    NotFoundError,
    ObjectNotFoundError,
    PersistenceError,
    StorageError,
)
from eventdesk.events.documents import (
    MAX_DOCUMENT_BYTES,
    check_upload,
    delete_document,
    read_document,
    storage_key,
    store_document,
)
from eventdesk.models import Event, EventDocument

from tests.conftest import OTHER_OWNER_ID, OWNER_ID

PDF = b"%PDF-1.4 contrato"


def _stored_files(store):
    return [p for p in store.root.rglob("*") if p.is_file()]


@pytest_asyncio.fixture
async def event(seed):
    return await seed(Event(user_id=OWNER_ID, nome_evento="Casamento", data_evento=date(2025, 3, 10)))


# =============================================================================
# Unit Tests - Upload rules and keys
# =============================================================================

class TestCheckUpload:

    def test_accepts_allowed_type_at_limit(self):
        check_upload(MAX_DOCUMENT_BYTES, "application/pdf")

    def test_missing_type_is_accepted(self):
        check_upload(10, None)
        check_upload(10, "")

    def test_rejects_oversized_file(self):
        with pytest.raises(DocumentRejectedError) as exc_info:
            check_upload(MAX_DOCUMENT_BYTES + 1, "application/pdf")

        assert exc_info.value.detail == "Arquivo excede 5MB"

    def test_rejects_type_outside_allowlist(self):
        with pytest.raises(DocumentRejectedError) as exc_info:
            check_upload(10, "application/x-msdownload")

        assert exc_info.value.detail == "Tipo de arquivo não permitido"


class TestStorageKey:

    def test_owner_scoped_key(self):
        now = datetime(2025, 3, 10, tzinfo=timezone.utc)

        assert storage_key(OWNER_ID, 7, "contrato.pdf", now) == (
            "users/owner-123/eventos/7/1741564800000_contrato.pdf"
        )

    def test_separators_in_names_are_flattened(self):
        now = datetime(2025, 3, 10, tzinfo=timezone.utc)

        key = storage_key("a/b", 7, "../../etc/passwd", now)

        assert key == "users/a_b/eventos/7/1741564800000_.._.._etc_passwd"


# =============================================================================
# Unit Tests - LocalObjectStore
# =============================================================================

class TestLocalObjectStore:

    @pytest.mark.asyncio
    async def test_put_get_delete(self, object_store):
        await object_store.put("users/u/eventos/1/a.pdf", PDF, "application/pdf")

        assert await object_store.get("users/u/eventos/1/a.pdf") == PDF

        await object_store.delete("users/u/eventos/1/a.pdf")
        with pytest.raises(ObjectNotFoundError):
            await object_store.get("users/u/eventos/1/a.pdf")

    @pytest.mark.asyncio
    async def test_delete_missing_object_is_quiet(self, object_store):
        await object_store.delete("users/u/nothing.pdf")

    @pytest.mark.asyncio
    async def test_key_cannot_escape_root(self, object_store):
        with pytest.raises(StorageError):
            await object_store.put("../outside.pdf", PDF, "application/pdf")


# =============================================================================
# Integration Tests - attach, read, delete
# =============================================================================

class TestDocumentLifecycle:

    @pytest.mark.asyncio
    async def test_store_and_read(self, event, db_session, object_store):
        document = await store_document(
            db_session, object_store, event.id, OWNER_ID,
            filename=" contrato<1>.pdf ", content_type="application/pdf", data=PDF,
            tipo_documento="Contrato",
        )

        assert document.nome_arquivo == "contrato1.pdf"
        assert document.tipo_documento == "Contrato"
        assert document.tamanho == len(PDF)
        assert document.storage_key.startswith(f"users/{OWNER_ID}/eventos/{event.id}/")

        stored, content = await read_document(db_session, object_store, document.id, event.id, OWNER_ID)
        assert stored.id == document.id
        assert content == PDF

    @pytest.mark.asyncio
    async def test_defaults_for_type_and_mime(self, event, db_session, object_store):
        document = await store_document(
            db_session, object_store, event.id, OWNER_ID,
            filename="nota.pdf", content_type=None, data=PDF,
        )

        assert document.tipo_documento == "Outro"
        assert document.mime_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_blank_file_name_rejected(self, event, db_session, object_store):
        with pytest.raises(DocumentRejectedError) as exc_info:
            await store_document(
                db_session, object_store, event.id, OWNER_ID,
                filename="  ", content_type="application/pdf", data=PDF,
            )

        assert exc_info.value.detail == "Arquivo inválido"
        assert _stored_files(object_store) == []

    @pytest.mark.asyncio
    async def test_foreign_event_stores_nothing(self, seed, db_session, object_store):
        foreign = await seed(Event(user_id=OTHER_OWNER_ID, nome_evento="Outro", data_evento=date(2025, 4, 1)))

        with pytest.raises(NotFoundError):
            await store_document(
                db_session, object_store, foreign.id, OWNER_ID,
                filename="a.pdf", content_type="application/pdf", data=PDF,
            )

        assert _stored_files(object_store) == []

    @pytest.mark.asyncio
    async def test_failed_insert_removes_stored_object(self, event, db_session, session_factory, object_store):
        db_session.commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))

        with pytest.raises(PersistenceError):
            await store_document(
                db_session, object_store, event.id, OWNER_ID,
                filename="a.pdf", content_type="application/pdf", data=PDF,
            )

        assert _stored_files(object_store) == []
        async with session_factory() as session:
            assert await session.scalar(select(func.count(EventDocument.id))) == 0

    @pytest.mark.asyncio
    async def test_delete_survives_store_failure(self, event, db_session, session_factory, object_store):
        document = await store_document(
            db_session, object_store, event.id, OWNER_ID,
            filename="a.pdf", content_type="application/pdf", data=PDF,
        )
        object_store.delete = AsyncMock(side_effect=StorageError("bucket offline"))

        await delete_document(db_session, object_store, document.id, event.id, OWNER_ID)

        async with session_factory() as session:
            assert await session.get(EventDocument, document.id) is None

    @pytest.mark.asyncio
    async def test_document_of_other_event_not_found(self, event, seed, db_session, object_store):
        other = await seed(Event(user_id=OWNER_ID, nome_evento="Festa", data_evento=date(2025, 5, 1)))
        document = await store_document(
            db_session, object_store, event.id, OWNER_ID,
            filename="a.pdf", content_type="application/pdf", data=PDF,
        )

        with pytest.raises(NotFoundError) as exc_info:
            await read_document(db_session, object_store, document.id, other.id, OWNER_ID)

        assert exc_info.value.detail == "Documento não encontrado"


# =============================================================================
# HTTP endpoints
# =============================================================================

class TestDocumentRoutes:

    @pytest.mark.asyncio
    async def test_upload_list_download_delete(self, client, event):
        created = await client.post(
            f"/api/eventos/{event.id}/documentos",
            files={"file": ("contrato.pdf", PDF, "application/pdf")},
            data={"tipo_documento": "Contrato"},
        )
        assert created.status_code == 201
        document_id = created.json()["id"]

        listing = (await client.get(f"/api/eventos/{event.id}/documentos")).json()
        assert [(d["id"], d["nome_arquivo"], d["tipo_documento"], d["tamanho"]) for d in listing] == [
            (document_id, "contrato.pdf", "Contrato", len(PDF)),
        ]

        download = await client.get(f"/api/eventos/{event.id}/documentos/{document_id}/download")
        assert download.status_code == 200
        assert download.content == PDF
        assert download.headers["content-type"] == "application/pdf"
        assert 'filename="contrato.pdf"' in download.headers["content-disposition"]

        deleted = await client.delete(f"/api/eventos/{event.id}/documentos/{document_id}")
        assert deleted.json() == {"success": True}
        assert (await client.get(f"/api/eventos/{event.id}/documentos")).json() == []

    @pytest.mark.asyncio
    async def test_disallowed_type(self, client, event):
        response = await client.post(
            f"/api/eventos/{event.id}/documentos",
            files={"file": ("setup.exe", b"MZ", "application/x-msdownload")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Tipo de arquivo não permitido"

    @pytest.mark.asyncio
    async def test_file_over_5mb(self, client, event):
        response = await client.post(
            f"/api/eventos/{event.id}/documentos",
            files={"file": ("grande.pdf", b"0" * (MAX_DOCUMENT_BYTES + 1), "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Arquivo excede 5MB"

    @pytest.mark.asyncio
    async def test_missing_file_field(self, client, event):
        response = await client.post(f"/api/eventos/{event.id}/documentos", data={"tipo_documento": "x"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_upload_to_foreign_event(self, client, seed):
        foreign = await seed(Event(user_id=OTHER_OWNER_ID, nome_evento="Outro", data_evento=date(2025, 4, 1)))

        response = await client.post(
            f"/api/eventos/{foreign.id}/documentos",
            files={"file": ("a.pdf", PDF, "application/pdf")},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Evento não encontrado"

    @pytest.mark.asyncio
    async def test_download_when_bytes_are_gone(self, client, event, object_store):
        created = await client.post(
            f"/api/eventos/{event.id}/documentos",
            files={"file": ("a.pdf", PDF, "application/pdf")},
        )
        for path in _stored_files(object_store):
            path.unlink()

        response = await client.get(f"/api/eventos/{event.id}/documentos/{created.json()['id']}/download")

        assert response.status_code == 404
        assert response.json()["detail"] == "Documento não encontrado no armazenamento"

    @pytest.mark.asyncio
    async def test_delete_missing_document(self, client, event):
        response = await client.delete(f"/api/eventos/{event.id}/documentos/999")

        assert response.status_code == 404
