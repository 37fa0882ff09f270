"""
PAR-Q intake endpoint and questionnaire model.
"""

import json
import pytest

from motiva_backend.api.parq import ParqIntakeError, submit_parq_db
from motiva_backend.interface.collections import PARQ_SUBMISSIONS
from motiva_backend.interface.parq import ParqSubmission
from motiva_backend.settings import settings
from motiva_backend.store.base import StoreError

VALID = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@example.com",
    "dateOfBirth": "1990-12-10",
}


class TestFlags:

    def test_no_flags(self):
        assert ParqSubmission.model_validate({**VALID, "medications": "no", "redFlagSymptoms": ["none"]}).flags_yes is False

    @pytest.mark.parametrize("answers", [
        {"hasHeartCondition": True},
        {"currentlyTakingMedication": "yes"},
        {"medicalConditions": "yes"},
        {"surgery": "yes"},
        {"pastInjuries": "yes"},
        {"redFlagSymptoms": ["dizziness"]},
    ])
    def test_flags(self, answers):
        assert ParqSubmission.model_validate({**VALID, **answers}).flags_yes is True

    def test_red_flags_with_none(self):
        assert ParqSubmission.model_validate({**VALID, "redFlagSymptoms": ["dizziness", "none"]}).flags_yes is False


class TestValidation:

    @pytest.mark.parametrize("missing", ["firstName", "lastName", "email"])
    def test_required(self, missing):
        payload = {k: v for k, v in VALID.items() if k != missing}
        assert ParqSubmission.model_validate(payload).validation_error() == \
            "Missing required fields: firstName, lastName, or email"

    @pytest.mark.parametrize("email", ["ada", "ada@example", "ada @example.com", "@example.com"])
    def test_email(self, email):
        assert ParqSubmission.model_validate({**VALID, "email": email}).validation_error() == "Invalid email format"


class TestSubmit:

    def test_stores_record(self, store):
        item_id = submit_parq_db(store, json.dumps({**VALID, "currentPain": "yes", "memberId": "m1"}))

        record = store.get(PARQ_SUBMISSIONS, item_id)
        assert record["clientName"] == "Ada Lovelace"
        assert record["flagsYes"] is True
        assert record["status"] == "New"
        assert record["notes"] == ""
        assert record["memberId"] == "m1"
        assert record["hasHeartCondition"] is False
        assert record["assignedTrainerId"] == settings.DEFAULT_TRAINER_ID
        assert json.loads(record["answers"])["currentPain"] == "yes"

    def test_form_data_and_trainer(self, store):
        item_id = submit_parq_db(store, json.dumps({**VALID, "formData": "raw answers", "assignedTrainerId": "t9"}))
        record = store.get(PARQ_SUBMISSIONS, item_id)
        assert record["answers"] == "raw answers"
        assert record["assignedTrainerId"] == "t9"

    @pytest.mark.parametrize("body,code", [
        (b"", "MISSING_BODY"),
        (b"{", "INVALID_JSON"),
        (b"[]", "INVALID_JSON"),
        (b'{"firstName": "Ada", "age": NaN}', "INVALID_JSON"),
        (b'{"firstName": "Ada", "age": -Infinity}', "INVALID_JSON"),
        (json.dumps({"firstName": "Ada"}).encode(), "VALIDATION_ERROR"),
        (json.dumps({**VALID, "redFlagSymptoms": "dizzy"}).encode(), "VALIDATION_ERROR"),
    ])
    def test_rejected(self, store, body, code):
        with pytest.raises(ParqIntakeError) as exc:
            submit_parq_db(store, body)
        assert exc.value.status_code == 400
        assert exc.value.code == code
        assert store.query(PARQ_SUBMISSIONS).find().total_count == 0

    def test_database_error(self, store, monkeypatch):
        def broken(*args, **kwargs):
            raise StoreError("disk full")
        monkeypatch.setattr(store, "insert", broken)

        with pytest.raises(ParqIntakeError) as exc:
            submit_parq_db(store, json.dumps(VALID))
        assert exc.value.status_code == 500
        assert exc.value.code == "DATABASE_ERROR"


class TestEndpoint:

    def test_success(self, client, store):
        response = client.post("/parq-submit", json=VALID)
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert store.get(PARQ_SUBMISSIONS, body["id"])["email"] == VALID["email"]

    def test_validation_error(self, client):
        response = client.post("/parq-submit", json={**VALID, "email": "nope"})
        assert response.status_code == 400
        assert response.json() == {"ok": False, "code": "VALIDATION_ERROR", "error": "Invalid email format"}

    def test_options(self, client):
        response = client.options("/parq-submit")
        assert response.json() == {"ok": True}

    def test_not_reachable_through_gateway(self, client, tokens):
        response = client.post("/protected-data-gateway", json={"operation": "getAll", "collection": PARQ_SUBMISSIONS},
                               headers={"Authorization": f"Bearer {tokens['admin']}"})
        assert response.status_code == 400
