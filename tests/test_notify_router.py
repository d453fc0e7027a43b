from unittest.mock import patch

import pytest

from sito.models import Subscription


@pytest.fixture
def connection_payload(owner):
    return {"recipient_id": owner.id, "summary": "Sam wants to connect", "requester_name": "Sam"}


class TestDispatchNotification:
    def test_without_provider_key_succeeds_with_warning(self, client, connection_payload):
        with patch("sito.email_service.RESEND_API_KEY", None):
            response = client.post("/notify/connection", json=connection_payload)

        assert response.status_code == 200
        assert response.json() == {"success": True, "warning": "Email service not configured"}

    def test_email_is_sent_to_recipient(self, client, owner, connection_payload):
        with patch("sito.email_service.RESEND_API_KEY", "re_test"), patch(
            "sito.email_service.resend.Emails.send", return_value={"id": "email_123"}
        ) as send:
            response = client.post("/notify/connection", json=connection_payload)

        assert response.status_code == 200
        assert response.json()["id"] == "email_123"
        sent = send.call_args[0][0]
        assert sent["to"] == [owner.email]
        assert "Sam" in sent["subject"]

    def test_provider_failure_is_a_bad_gateway(self, client, connection_payload):
        with patch("sito.email_service.RESEND_API_KEY", "re_test"), patch(
            "sito.email_service.resend.Emails.send", side_effect=RuntimeError("rejected")
        ):
            response = client.post("/notify/connection", json=connection_payload)

        assert response.status_code == 502

    def test_unknown_recipient(self, client):
        response = client.post(
            "/notify/connection", json={"recipient_id": "nobody", "requester_name": "Sam"}
        )
        assert response.status_code == 404

    def test_unknown_kind(self, client, connection_payload):
        response = client.post("/notify/carrier-pigeon", json=connection_payload)
        assert response.status_code == 404

    def test_missing_fields_for_kind(self, client, owner):
        response = client.post(
            "/notify/product-interest", json={"recipient_id": owner.id, "respondent_name": "Sam"}
        )
        assert response.status_code == 400
        assert "course_title" in response.json()["detail"]

    def test_dispatch_key_is_enforced_when_configured(self, client, connection_payload):
        with patch("sito.routes.notifications.MAIL_DISPATCH_KEY", "s3cret"), patch(
            "sito.email_service.RESEND_API_KEY", None
        ):
            refused = client.post("/notify/connection", json=connection_payload)
            accepted = client.post(
                "/notify/connection",
                json=connection_payload,
                headers={"X-Dispatch-Key": "s3cret"},
            )

        assert refused.status_code == 401
        assert accepted.status_code == 200


class TestBlogPostFanOut:
    @pytest.fixture
    def subscribers(self, db, owner, make_profile):
        readers = [make_profile("Reader One"), make_profile("Reader Two")]
        for reader in readers:
            db.add(Subscription(subscriber_id=reader.id, owner_id=owner.id))
        db.commit()
        return readers

    @pytest.fixture
    def post_payload(self, owner):
        return {
            "recipient_id": owner.id,
            "summary": "New post: Firing schedules",
            "blog_post_id": "post-1",
            "blog_title": "Firing schedules",
        }

    def test_every_subscriber_is_emailed(self, client, subscribers, post_payload):
        with patch("sito.email_service.RESEND_API_KEY", "re_test"), patch(
            "sito.email_service.resend.Emails.send", return_value={"id": "email_1"}
        ) as send:
            response = client.post("/notify/blog-post", json=post_payload)

        assert response.status_code == 200
        assert response.json() == {"success": True, "notified": 2, "failed": []}
        recipients = sorted(call[0][0]["to"][0] for call in send.call_args_list)
        assert recipients == sorted(s.email for s in subscribers)
        sent = send.call_args[0][0]
        assert sent["subject"] == "New Post: Firing schedules"
        assert "/blog/post-1" in sent["html"]

    def test_one_failed_recipient_does_not_stop_the_rest(self, client, subscribers, post_payload):
        with patch("sito.email_service.RESEND_API_KEY", "re_test"), patch(
            "sito.email_service.resend.Emails.send",
            side_effect=[RuntimeError("mailbox full"), {"id": "email_2"}],
        ) as send:
            response = client.post("/notify/blog-post", json=post_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["notified"] == 1
        assert len(body["failed"]) == 1
        assert body["failed"][0]["recipient_id"] in {s.id for s in subscribers}
        assert send.call_count == 2

    def test_no_subscribers(self, client, post_payload):
        with patch("sito.email_service.RESEND_API_KEY", "re_test"), patch(
            "sito.email_service.resend.Emails.send"
        ) as send:
            response = client.post("/notify/blog-post", json=post_payload)

        assert response.status_code == 200
        assert response.json()["message"] == "No subscribers to notify"
        send.assert_not_called()

    def test_without_provider_key_succeeds_with_warning(self, client, subscribers, post_payload):
        with patch("sito.email_service.RESEND_API_KEY", None):
            response = client.post("/notify/blog-post", json=post_payload)

        assert response.status_code == 200
        assert response.json()["warning"] == "Email service not configured"

    def test_missing_post_fields(self, client, owner):
        response = client.post(
            "/notify/blog-post", json={"recipient_id": owner.id, "blog_title": "Untitled"}
        )
        assert response.status_code == 400
        assert "blog_post_id" in response.json()["detail"]

    def test_subscribers_of_other_authors_are_not_emailed(
        self, client, db, owner, make_profile, post_payload
    ):
        other_author = make_profile("Other Author")
        reader = make_profile("Reader")
        db.add(Subscription(subscriber_id=reader.id, owner_id=other_author.id))
        db.commit()

        with patch("sito.email_service.RESEND_API_KEY", "re_test"), patch(
            "sito.email_service.resend.Emails.send"
        ) as send:
            response = client.post("/notify/blog-post", json=post_payload)

        assert response.json()["notified"] == 0
        send.assert_not_called()
