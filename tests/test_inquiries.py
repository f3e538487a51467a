"""Tests for the inquiry lifecycle API."""

import datetime as dt
import logging

import pytest
from sqlalchemy.exc import IntegrityError

from hearth.models.enums import UserRole
from hearth.models.inquiry import Inquiry
from hearth.schemas.inquiry import PreferredTimeSchema, ScheduleRequest
from hearth.services import inquiry as inquiry_service
from hearth.services.notifications import INQUIRY_RESPONSE, MEETING_SCHEDULED, PROPERTY_INQUIRY

MESSAGE = "Is this still available? I would like to visit this weekend."


@pytest.fixture
def parties(make_user, make_property):
    owner = make_user(UserRole.SELLER, first_name="Vikram", last_name="Shah")
    buyer = make_user(UserRole.BUYER, first_name="Rahul", last_name="Nair")
    listing = make_property(owner, title="Sea view flat")
    return owner, buyer, listing


def _create(client, auth, buyer, listing, **overrides):
    body = {"propertyId": listing.id, "type": "visit", "message": MESSAGE}
    body.update(overrides)
    return client.post("/api/inquiries", json=body, headers=auth(buyer))


def _open_inquiry(client, auth, buyer, listing) -> int:
    response = _create(client, auth, buyer, listing)
    assert response.status_code == 201
    return response.json()["data"]["inquiry"]["id"]


class TestCreateInquiry:
    """Tests for POST /api/inquiries."""

    def test_creates_pending_inquiry_and_notifies_owner(self, client, auth, notifier, parties) -> None:
        owner, buyer, listing = parties

        response = _create(
            client,
            auth,
            buyer,
            listing,
            contactPreference="whatsapp",
            preferredTime={"date": "2026-11-02", "time": "10:30"},
        )
        assert response.status_code == 201
        inquiry = response.json()["data"]["inquiry"]
        assert inquiry["status"] == "pending"
        assert inquiry["property"]["title"] == "Sea view flat"
        assert inquiry["propertyOwner"]["id"] == owner.id
        assert inquiry["inquirer"]["name"] == "Rahul Nair"
        assert inquiry["contactPreference"] == "whatsapp"
        assert inquiry["preferredTime"] == {"date": "2026-11-02", "time": "10:30"}

        recipient, template_id, context = notifier.sent[0]
        assert template_id == PROPERTY_INQUIRY
        assert recipient.email == owner.email
        assert context["inquirer"]["name"] == "Rahul Nair"

    def test_defaults_contact_preference_to_phone(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        inquiry = _create(client, auth, buyer, listing).json()["data"]["inquiry"]
        assert inquiry["contactPreference"] == "phone"
        assert inquiry["preferredTime"] is None

    def test_rejects_own_property(self, client, auth, parties) -> None:
        owner, _, listing = parties
        response = _create(client, auth, owner, listing)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot create inquiry for your own property"

    def test_rejects_duplicate_open_inquiry(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        _open_inquiry(client, auth, buyer, listing)

        response = _create(client, auth, buyer, listing)
        assert response.status_code == 400
        assert "already have an active inquiry" in response.json()["message"]

    @pytest.mark.parametrize("final_status", ["cancelled", "completed"])
    def test_allows_new_inquiry_after_close(self, client, auth, parties, final_status) -> None:
        _, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)
        client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": final_status}, headers=auth(buyer))

        response = _create(client, auth, buyer, listing)
        assert response.status_code == 201

    def test_missing_property(self, client, auth, make_user) -> None:
        buyer = make_user()
        response = client.post(
            "/api/inquiries",
            json={"propertyId": 999, "type": "call", "message": MESSAGE},
            headers=auth(buyer),
        )
        assert response.status_code == 404

    @pytest.mark.parametrize("message", ["too short", "x" * 1001, "         short         "])
    def test_message_length(self, client, auth, parties, message) -> None:
        _, buyer, listing = parties
        response = _create(client, auth, buyer, listing, message=message)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "message"

    def test_notifier_failure_keeps_inquiry(self, client, auth, parties, notifier) -> None:
        notifier.raise_error = True
        _, buyer, listing = parties

        response = _create(client, auth, buyer, listing)
        assert response.status_code == 201
        sent = client.get("/api/inquiries/sent", headers=auth(buyer)).json()["data"]
        assert sent["pagination"]["total"] == 1

    def test_lost_race_on_create_is_a_conflict(self, client, auth, parties, monkeypatch) -> None:
        _, buyer, listing = parties
        _open_inquiry(client, auth, buyer, listing)
        # Both requests passed the pre-check; storage must reject the second
        monkeypatch.setattr(inquiry_service, "_has_open_inquiry", lambda *args, **kwargs: False)

        response = _create(client, auth, buyer, listing)
        assert response.status_code == 400
        assert response.json()["message"] == inquiry_service.DUPLICATE_OPEN_INQUIRY
        sent = client.get("/api/inquiries/sent", headers=auth(buyer)).json()["data"]
        assert sent["pagination"]["total"] == 1


class TestOpenInquiryIndex:
    """Tests for the one-open-inquiry-per-pair storage constraint."""

    @staticmethod
    def _row(buyer, listing, status: str) -> Inquiry:
        return Inquiry(
            property_id=listing.id,
            inquirer_id=buyer.id,
            property_owner_id=listing.owner_id,
            type="visit",
            message=MESSAGE,
            status=status,
        )

    def test_second_open_row_rejected(self, db, parties) -> None:
        _, buyer, listing = parties
        db.add(self._row(buyer, listing, "pending"))
        db.commit()

        db.add(self._row(buyer, listing, "contacted"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_closed_rows_do_not_count(self, db, parties) -> None:
        _, buyer, listing = parties
        db.add_all(
            [
                self._row(buyer, listing, "cancelled"),
                self._row(buyer, listing, "completed"),
                self._row(buyer, listing, "pending"),
            ]
        )
        db.commit()
        assert db.query(Inquiry).count() == 3

    def test_is_open_follows_status(self, parties) -> None:
        _, buyer, listing = parties
        assert self._row(buyer, listing, "scheduled").get_is_open()
        assert not self._row(buyer, listing, "cancelled").get_is_open()


class TestInquirySchemas:
    """Tests for date fields on the request schemas."""

    def test_schedule_date_parses(self) -> None:
        assert ScheduleRequest.model_validate({"date": "2026-11-07"}).date == dt.date(2026, 11, 7)
        assert ScheduleRequest().date is None

    def test_preferred_time_date_optional(self) -> None:
        preferred = PreferredTimeSchema.model_validate({"time": "10:30"})
        assert preferred.date is None
        assert preferred.time == "10:30"


class TestRespond:
    """Tests for PUT /api/inquiries/{id}/respond."""

    def test_owner_responds(self, client, auth, notifier, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(
            f"/api/inquiries/{inquiry_id}/respond",
            json={"message": "  Yes, Saturday works.  "},
            headers=auth(owner),
        )
        assert response.status_code == 200
        inquiry = response.json()["data"]["inquiry"]
        assert inquiry["status"] == "contacted"
        assert inquiry["response"]["message"] == "Yes, Saturday works."
        assert inquiry["response"]["respondedBy"] == owner.id
        assert notifier.templates_sent() == [PROPERTY_INQUIRY, INQUIRY_RESPONSE]
        assert notifier.sent[-1][0].email == buyer.email

    def test_blank_message(self, client, auth, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/respond", json={"message": "   "}, headers=auth(owner))
        assert response.status_code == 400
        assert response.json()["message"] == "Response message is required"

    def test_validation_before_existence(self, client, auth, parties) -> None:
        owner, _, _ = parties
        response = client.put("/api/inquiries/999/respond", json={}, headers=auth(owner))
        assert response.status_code == 400

    def test_missing_inquiry(self, client, auth, parties) -> None:
        owner, _, _ = parties
        response = client.put("/api/inquiries/999/respond", json={"message": "Hello"}, headers=auth(owner))
        assert response.status_code == 404

    def test_non_owner_forbidden(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/respond", json={"message": "Hi"}, headers=auth(buyer))
        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to respond to this inquiry"

    def test_cannot_respond_when_closed(self, client, auth, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)
        client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "cancelled"}, headers=auth(buyer))

        response = client.put(f"/api/inquiries/{inquiry_id}/respond", json={"message": "Hi"}, headers=auth(owner))
        assert response.status_code == 400

    def test_notifier_failure_keeps_response(self, client, auth, parties, notifier) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)
        notifier.fail = True

        response = client.put(f"/api/inquiries/{inquiry_id}/respond", json={"message": "Hi"}, headers=auth(owner))
        assert response.status_code == 200
        stored = client.get(f"/api/inquiries/{inquiry_id}", headers=auth(buyer)).json()["data"]["inquiry"]
        assert stored["status"] == "contacted"


class TestSchedule:
    """Tests for PUT /api/inquiries/{id}/schedule."""

    def test_owner_schedules(self, client, auth, notifier, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(
            f"/api/inquiries/{inquiry_id}/schedule",
            json={"date": "2026-11-07", "time": "11:00", "type": "physical", "location": "At the gate"},
            headers=auth(owner),
        )
        assert response.status_code == 200
        inquiry = response.json()["data"]["inquiry"]
        assert inquiry["status"] == "scheduled"
        assert inquiry["meetingScheduled"] == {
            "date": "2026-11-07",
            "time": "11:00",
            "location": "At the gate",
            "type": "physical",
        }
        assert notifier.templates_sent()[-1] == MEETING_SCHEDULED

    def test_location_optional(self, client, auth, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(
            f"/api/inquiries/{inquiry_id}/schedule",
            json={"date": "2026-11-07", "time": "11:00", "type": "virtual"},
            headers=auth(owner),
        )
        assert response.status_code == 200

    def test_requires_date_time_and_type(self, client, auth, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(
            f"/api/inquiries/{inquiry_id}/schedule",
            json={"date": "2026-11-07", "type": "virtual"},
            headers=auth(owner),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Date, time, and meeting type are required"

    def test_non_owner_forbidden(self, client, auth, make_user, parties) -> None:
        _, buyer, listing = parties
        stranger = make_user()
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(
            f"/api/inquiries/{inquiry_id}/schedule",
            json={"date": "2026-11-07", "time": "11:00", "type": "virtual"},
            headers=auth(stranger),
        )
        assert response.status_code == 403


class TestStatusUpdate:
    """Tests for PUT /api/inquiries/{id}/status."""

    @pytest.mark.parametrize("target", ["pending", "contacted", "scheduled", "completed", "cancelled"])
    def test_accepts_every_status(self, client, auth, parties, target) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": target}, headers=auth(owner))
        assert response.status_code == 200
        assert response.json()["data"]["inquiry"]["status"] == target

    def test_reopens_closed_inquiry(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)
        client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "completed"}, headers=auth(buyer))

        response = client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "pending"}, headers=auth(buyer))
        assert response.status_code == 200

    def test_reopening_next_to_an_open_inquiry_conflicts(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        first_id = _open_inquiry(client, auth, buyer, listing)
        client.put(f"/api/inquiries/{first_id}/status", json={"status": "cancelled"}, headers=auth(buyer))
        _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{first_id}/status", json={"status": "pending"}, headers=auth(buyer))
        assert response.status_code == 400
        assert "already have an active inquiry" in response.json()["message"]

    def test_invalid_status(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "archived"}, headers=auth(buyer))
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid status"

    def test_stranger_forbidden(self, client, auth, make_user, parties) -> None:
        _, buyer, listing = parties
        stranger = make_user()
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "cancelled"}, headers=auth(stranger))
        assert response.status_code == 403

    def test_unguarded_move_is_audit_logged(self, client, auth, parties, caplog) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        with caplog.at_level(logging.WARNING, logger="hearth.services.inquiry"):
            client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "completed"}, headers=auth(owner))
        assert any("outside guarded transitions" in r.getMessage() for r in caplog.records)


class TestFeedback:
    """Tests for PUT /api/inquiries/{id}/feedback."""

    def test_inquirer_rates_completed_inquiry(self, client, auth, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)
        client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "completed"}, headers=auth(owner))

        response = client.put(
            f"/api/inquiries/{inquiry_id}/feedback",
            json={"rating": 4, "feedback": "Prompt and helpful."},
            headers=auth(buyer),
        )
        assert response.status_code == 200
        inquiry = response.json()["data"]["inquiry"]
        assert inquiry["rating"] == 4
        assert inquiry["feedback"] == "Prompt and helpful."

    def test_requires_completed(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/feedback", json={"rating": 5}, headers=auth(buyer))
        assert response.status_code == 400

    def test_rating_range(self, client, auth, parties) -> None:
        _, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        response = client.put(f"/api/inquiries/{inquiry_id}/feedback", json={"rating": 6}, headers=auth(buyer))
        assert response.status_code == 400

    def test_owner_cannot_rate(self, client, auth, parties) -> None:
        owner, buyer, listing = parties
        inquiry_id = _open_inquiry(client, auth, buyer, listing)
        client.put(f"/api/inquiries/{inquiry_id}/status", json={"status": "completed"}, headers=auth(owner))

        response = client.put(f"/api/inquiries/{inquiry_id}/feedback", json={"rating": 5}, headers=auth(owner))
        assert response.status_code == 403


class TestInquiryQueries:
    """Tests for the sent, received and detail views."""

    def test_sent_and_received(self, client, auth, make_user, make_property, parties) -> None:
        owner, buyer, listing = parties
        other_listing = make_property(owner, title="Second listing")
        _open_inquiry(client, auth, buyer, listing)
        second_id = _open_inquiry(client, auth, buyer, other_listing)

        sent = client.get("/api/inquiries/sent", headers=auth(buyer)).json()["data"]
        assert sent["pagination"]["total"] == 2
        assert sent["pagination"]["limit"] == 10
        assert sent["items"][0]["id"] == second_id

        received = client.get("/api/inquiries/received", headers=auth(owner)).json()["data"]
        assert received["pagination"]["total"] == 2
        assert client.get("/api/inquiries/sent", headers=auth(owner)).json()["data"]["items"] == []

    def test_received_filters(self, client, auth, make_property, parties) -> None:
        owner, buyer, listing = parties
        other_listing = make_property(owner)
        first_id = _open_inquiry(client, auth, buyer, listing)
        _create(client, auth, buyer, other_listing, type="call")
        client.put(f"/api/inquiries/{first_id}/respond", json={"message": "Call me"}, headers=auth(owner))

        by_status = client.get(
            "/api/inquiries/received", params={"status": "contacted"}, headers=auth(owner)
        ).json()["data"]
        assert [i["id"] for i in by_status["items"]] == [first_id]

        by_type = client.get("/api/inquiries/received", params={"type": "call"}, headers=auth(owner)).json()["data"]
        assert [i["type"] for i in by_type["items"]] == ["call"]

    def test_received_rejects_unknown_status(self, client, auth, parties) -> None:
        owner, _, _ = parties
        response = client.get("/api/inquiries/received", params={"status": "lost"}, headers=auth(owner))
        assert response.status_code == 400

    def test_detail_visible_to_parties_only(self, client, auth, make_user, parties) -> None:
        owner, buyer, listing = parties
        stranger = make_user()
        inquiry_id = _open_inquiry(client, auth, buyer, listing)

        assert client.get(f"/api/inquiries/{inquiry_id}", headers=auth(owner)).status_code == 200
        assert client.get(f"/api/inquiries/{inquiry_id}", headers=auth(buyer)).status_code == 200
        assert client.get(f"/api/inquiries/{inquiry_id}", headers=auth(stranger)).status_code == 403

    def test_requires_identity(self, client) -> None:
        assert client.get("/api/inquiries/sent").status_code == 401
