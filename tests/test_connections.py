import pytest
from fastapi import HTTPException

from sito.domain.connections.service import ConnectionService
from sito.models import Connection
from sito.services.notification_service import EVENT_CONNECTION


class TestRequest:
    def test_request_creates_pending_row_and_notifies(self, db, owner, member, outbox):
        connection = ConnectionService(db, outbox).request(member, owner.id)

        assert connection.status == "pending"
        assert connection.requester_id == member.id
        assert [e.kind for e in outbox.pending] == [EVENT_CONNECTION]
        assert outbox.pending[0].recipient_id == owner.id

    def test_duplicate_request_conflicts(self, db, owner, member):
        service = ConnectionService(db)
        service.request(member, owner.id)

        with pytest.raises(HTTPException) as exc:
            service.request(member, owner.id)
        assert exc.value.status_code == 409
        assert exc.value.detail == "Connection already requested"
        assert db.query(Connection).count() == 1

    def test_reverse_direction_is_a_separate_row(self, db, owner, member):
        service = ConnectionService(db)
        service.request(member, owner.id)
        service.request(owner, member.id)
        assert db.query(Connection).count() == 2

    def test_cannot_connect_with_yourself(self, db, member):
        with pytest.raises(HTTPException) as exc:
            ConnectionService(db).request(member, member.id)
        assert exc.value.status_code == 400

    def test_unknown_profile(self, db, member):
        with pytest.raises(HTTPException) as exc:
            ConnectionService(db).request(member, "00000000-0000-4000-8000-000000000000")
        assert exc.value.status_code == 404


class TestAnswer:
    def test_owner_accepts(self, db, owner, member):
        service = ConnectionService(db)
        connection = service.request(member, owner.id)

        accepted = service.accept(owner, connection.id)
        assert accepted.status == "accepted"
        assert service.relationship(member, owner.id).connected is True

    def test_requester_cannot_answer_own_request(self, db, owner, member):
        service = ConnectionService(db)
        connection = service.request(member, owner.id)

        with pytest.raises(HTTPException) as exc:
            service.accept(member, connection.id)
        assert exc.value.status_code == 403

    def test_answered_request_cannot_change(self, db, owner, member):
        service = ConnectionService(db)
        connection = service.request(member, owner.id)
        service.reject(owner, connection.id)

        with pytest.raises(HTTPException) as exc:
            service.accept(owner, connection.id)
        assert exc.value.status_code == 409
        db.refresh(connection)
        assert connection.status == "rejected"

    def test_missing_connection(self, db, owner):
        with pytest.raises(HTTPException) as exc:
            ConnectionService(db).reject(owner, "no-such-id")
        assert exc.value.status_code == 404


class TestRelationship:
    def test_both_directions_are_reported(self, db, owner, member):
        service = ConnectionService(db)
        forward = service.request(member, owner.id)
        service.request(owner, member.id)
        service.reject(owner, forward.id)

        view = service.relationship(member, owner.id)
        assert view.outgoing == "rejected"
        assert view.incoming == "pending"
        assert view.connected is False

    def test_no_rows_means_no_relationship(self, db, owner, member):
        view = ConnectionService(db).relationship(member, owner.id)
        assert view.outgoing is None and view.incoming is None
        assert view.connected is False

    def test_accepted_listing_covers_both_directions(self, db, owner, member, make_profile):
        service = ConnectionService(db)
        third = make_profile("Third")
        first = service.request(member, owner.id)
        second = service.request(third, member.id)
        service.accept(owner, first.id)
        service.accept(member, second.id)

        assert {c.id for c in service.list_accepted(member)} == {first.id, second.id}
