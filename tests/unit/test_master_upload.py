"""Tests for app.services.master_upload - coercion and the upload ledger."""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.errors import NotFound, StoreFailure
from app.models.master_description import MasterDescription, UploadMetadata
from app.schemas.master_description import MasterEntry
from app.services.master_upload import (
    coerce_number,
    delete_upload,
    linked_records_query,
    upload_master_descriptions,
)


class TestCoerceNumber:

    @pytest.mark.parametrize("value, expected", [
        (12, 12.0),
        (12.5, 12.5),
        ("99.90", 99.9),
        (" 7 ", 7.0),
        (None, 0.0),
        ("", 0.0),
        ("n/a", 0.0),
        ("nan", 0.0),
        (True, 0.0),
        ([1, 2], 0.0),
    ])
    def test_coercion(self, value, expected):
        assert coerce_number(value) == expected


def _entries(*part_nos):
    return [MasterEntry(part_no=p, description=f"Part {p}", ndp="10", mrp="bad") for p in part_nos]


class TestUpload:

    def test_upload_writes_ledger_and_rows(self, db, admin):
        meta = upload_master_descriptions(db, _entries("A", "B", "C"), "batch1", admin)

        assert meta.record_count == 3
        assert meta.total_received == 3
        assert meta.uploaded_by_email == admin.email
        rows = db.query(MasterDescription).filter(MasterDescription.file_id == meta.id).all()
        assert [r.part_no for r in rows] == ["A", "B", "C"]
        assert all(r.ndp == 10.0 and r.mrp == 0.0 for r in rows)
        assert all(r.upload_batch == "batch1" for r in rows)

    def test_failed_commit_rolls_everything_back(self, db, admin):
        with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("disk full"))):
            with pytest.raises(StoreFailure):
                upload_master_descriptions(db, _entries("A", "B"), "batch1", admin)

        assert db.query(UploadMetadata).count() == 0
        assert db.query(MasterDescription).count() == 0


class TestDeleteUpload:

    def test_delete_removes_linked_rows_only(self, db, admin, make_master):
        meta = upload_master_descriptions(db, _entries("A", "B"), "batch1", admin)
        other = upload_master_descriptions(db, _entries("C"), "batch2", admin)
        meta_id = meta.id

        assert delete_upload(db, meta_id) == 2
        assert db.query(UploadMetadata).filter(UploadMetadata.id == meta_id).first() is None
        assert db.query(MasterDescription).filter(MasterDescription.file_id == other.id).count() == 1

    def test_delete_includes_legacy_rows_by_filename(self, db, admin, make_master):
        make_master("OLD-1", "Legacy row", upload_batch="batch1")
        meta = upload_master_descriptions(db, _entries("A"), "batch1", admin)
        linkage = UploadMetadata(id=meta.id, filename=meta.filename)

        assert delete_upload(db, meta.id) == 2
        assert linked_records_query(db, linkage).count() == 0

    def test_same_filename_other_upload_is_kept(self, db, admin):
        first = upload_master_descriptions(db, _entries("A"), "batch1", admin)
        second = upload_master_descriptions(db, _entries("B"), "batch1", admin)

        assert delete_upload(db, first.id) == 1
        assert db.query(MasterDescription).filter(MasterDescription.file_id == second.id).count() == 1

    def test_unknown_upload_not_found(self, db):
        with pytest.raises(NotFound):
            delete_upload(db, 999)

    def test_failed_delete_keeps_ledger_and_rows(self, db, admin):
        meta = upload_master_descriptions(db, _entries("A", "B"), "batch1", admin)
        meta_id = meta.id

        with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("lost"))):
            with pytest.raises(StoreFailure):
                delete_upload(db, meta_id)

        assert db.query(UploadMetadata).filter(UploadMetadata.id == meta_id).count() == 1
        assert db.query(MasterDescription).filter(MasterDescription.file_id == meta_id).count() == 2
