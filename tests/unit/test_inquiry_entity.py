"""Unit tests for the Inquiry domain entity."""
from uuid import uuid4

import pytest

from src.domain.entities.inquiry import Inquiry, parse_status
from src.domain.enums.inquiry_status import InquiryStatus
from src.domain.enums.role import Role
from src.domain.errors import ValidationError
from src.domain.events.domain_events import InquiryCreatedEvent, InquiryStatusChangedEvent
from src.domain.state_machine.inquiry_state_machine import InvalidStateTransitionError
from tests.factories import make_listing, make_principal


def _make_inquiry(**kwargs) -> Inquiry:  # type: ignore[no-untyped-def]
    inquiry = Inquiry.create(
        listing=kwargs.pop("listing", make_listing()),
        requester_id=kwargs.pop("requester_id", uuid4()),
        message=kwargs.pop("message", "Is it still available?"),
        **kwargs,
    )
    inquiry.collect_events()
    return inquiry


class TestCreate:
    def test_snapshots_listing_owner(self) -> None:
        owner = make_principal(Role.AGENT)
        listing = make_listing(owner)

        inquiry = _make_inquiry(listing=listing)

        assert inquiry.listing_id == listing.id
        assert inquiry.original_owner_id == owner.id
        assert inquiry.status is InquiryStatus.PENDING
        assert inquiry.response is None

    def test_owner_snapshot_survives_owner_change(self) -> None:
        owner = make_principal(Role.AGENT)
        listing = make_listing(owner)
        inquiry = _make_inquiry(listing=listing)

        listing.owner_id = uuid4()

        assert inquiry.original_owner_id == owner.id

    def test_message_is_trimmed(self) -> None:
        assert _make_inquiry(message="  hello  ").message == "hello"

    @pytest.mark.parametrize("message", ["", "   ", "x" * 501])
    def test_rejects_bad_message(self, message: str) -> None:
        with pytest.raises(ValidationError):
            _make_inquiry(message=message)

    def test_accepts_message_at_limit(self) -> None:
        assert len(_make_inquiry(message="x" * 500).message) == 500

    def test_emits_created_event_with_handler(self) -> None:
        handler_id = uuid4()
        inquiry = Inquiry.create(
            listing=make_listing(), requester_id=uuid4(), message="Hi", handler_id=handler_id
        )
        [event] = inquiry.collect_events()

        assert isinstance(event, InquiryCreatedEvent)
        assert event.handler_id == handler_id


class TestRespond:
    def test_respond_sets_status_and_timestamp(self) -> None:
        inquiry = _make_inquiry()

        patch = inquiry.respond("  Yes, come by Saturday. ", responder_id=uuid4())

        assert inquiry.status is InquiryStatus.RESPONDED
        assert inquiry.response == "Yes, come by Saturday."
        assert inquiry.responded_at is not None
        assert patch == {
            "status": InquiryStatus.RESPONDED,
            "response": "Yes, come by Saturday.",
            "responded_at": inquiry.responded_at,
        }

    def test_second_response_replaces_first(self) -> None:
        inquiry = _make_inquiry()
        inquiry.respond("first", responder_id=uuid4())
        inquiry.respond("second", responder_id=uuid4())

        assert inquiry.response == "second"

    def test_empty_response_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _make_inquiry().respond("  ", responder_id=uuid4())

    def test_cannot_respond_when_closed(self) -> None:
        inquiry = _make_inquiry()
        inquiry.set_status("closed", changed_by=uuid4())

        with pytest.raises(InvalidStateTransitionError):
            inquiry.respond("too late", responder_id=uuid4())


class TestSetStatus:
    def test_close_pending(self) -> None:
        inquiry = _make_inquiry()
        changed_by = uuid4()

        assert inquiry.set_status(InquiryStatus.CLOSED, changed_by) == {
            "status": InquiryStatus.CLOSED
        }
        [event] = inquiry.collect_events()
        assert isinstance(event, InquiryStatusChangedEvent)
        assert event.from_status is InquiryStatus.PENDING
        assert event.to_status is InquiryStatus.CLOSED
        assert event.changed_by == changed_by

    def test_unknown_status_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            parse_status("archived")

    def test_closed_cannot_reopen(self) -> None:
        inquiry = _make_inquiry()
        inquiry.set_status("closed", uuid4())

        with pytest.raises(InvalidStateTransitionError):
            inquiry.set_status("pending", uuid4())
