"""PartyService — scheduled group sessions, membership, and invites.

Rules enforced here on top of the schema:

- Membership is flat. The creator is recorded for audit only and gets no
  extra rights; any member may invite, and disbanding is not restricted.
- A user joins a party at most once, bringing exactly one of their own
  characters.
- Invites resolve once: ``pending`` to ``accepted`` or ``declined``, with
  ``responded_at`` stamped on that transition. Expired invites cannot be
  accepted.
- Disbanding sets ``disbanded_at`` once and for all. A disbanded party
  keeps its rows but takes no new members or invites.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from legionctl.domain.lifecycle import (
    INVITE_TRANSITIONS,
    as_utc,
    is_active,
    is_expired,
    is_valid_transition,
    utc_now,
)
from legionctl.domain.models import Party, PartyInvite, PartyMember
from legionctl.domain.types import InviteStatus
from legionctl.infrastructure.database.schema import (
    characters,
    parties,
    party_invites,
    party_members,
    users,
)
from legionctl.services.base import BaseService, as_uuid
from legionctl.services.contracts import PartyInsert, PartyInviteInsert, PartyInviteResponse
from legionctl.services.result import ServiceResult, ValidationResult
from legionctl.services.roster import unknown_quest_ids
from legionctl.services.validation import (
    validate_party_insert,
    validate_party_invite_insert,
    violations_from_error,
)

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy import Connection

logger = logging.getLogger(__name__)


class PartyService(BaseService):
    """Creates parties and drives the member and invite lifecycles."""

    def create_party(self, payload: dict[str, Any]) -> ServiceResult:
        op = "create_party"
        validation = validate_party_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = PartyInsert.model_validate(validation.data).to_row()

        with self._store.transaction() as conn:
            if self._fetch(conn, users, values["created_by"]) is None:
                return self._not_found(op, "user", values["created_by"])
            missing = unknown_quest_ids(conn, values["shared_quest_ids"])
            if missing:
                return self._fail(
                    op, "UNKNOWN_QUESTS", f"Unknown quest ids: {missing}", quest_ids=missing
                )
            party_id = conn.execute(insert(parties).values(**values)).inserted_primary_key[0]
            row = self._fetch(conn, parties, party_id)

        party = Party.from_row(row)
        logger.info("Created party %s", party.id)
        return ServiceResult(ok=True, op=op, data=party.model_dump(mode="json"))

    def get_party(self, party_id: UUID | str) -> ServiceResult:
        """Return a party with its members, active or not."""
        op = "get_party"
        failure = self._check_ids(op, party=party_id)
        if failure is not None:
            return failure
        party_id = as_uuid(party_id)
        with self._store.connect() as conn:
            row = self._fetch(conn, parties, party_id)
            if row is None:
                return self._not_found(op, "party", party_id)
            member_rows = conn.execute(
                select(party_members)
                .where(party_members.c.party_id == party_id)
                .order_by(party_members.c.joined_at)
            ).all()

        data = Party.from_row(row).model_dump(mode="json")
        data["members"] = [PartyMember.from_row(m).model_dump(mode="json") for m in member_rows]
        return ServiceResult(ok=True, op=op, data=data)

    def list_active_parties(self) -> ServiceResult:
        """List parties that have not been disbanded, soonest first."""
        op = "list_active_parties"
        with self._store.connect() as conn:
            rows = conn.execute(
                select(parties)
                .where(parties.c.disbanded_at.is_(None))
                .order_by(parties.c.scheduled_start)
            ).all()

        items = [Party.from_row(r).model_dump(mode="json") for r in rows]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def join_party(
        self,
        party_id: UUID | str,
        user_id: UUID | str,
        character_id: UUID | str,
    ) -> ServiceResult:
        op = "join_party"
        failure = self._check_ids(op, party=party_id, user=user_id, character=character_id)
        if failure is not None:
            return failure
        party_id, user_id, character_id = (
            as_uuid(party_id),
            as_uuid(user_id),
            as_uuid(character_id),
        )
        try:
            with self._store.transaction() as conn:
                failure = self._check_joinable(conn, op, party_id)
                if failure is not None:
                    return failure

                char_row = self._fetch(conn, characters, character_id)
                if char_row is None:
                    return self._not_found(op, "character", character_id)
                if char_row.user_id != user_id:
                    return self._fail(
                        op,
                        "CHARACTER_NOT_OWNED",
                        f"Character {character_id} does not belong to user {user_id}",
                        character_id=str(character_id),
                        user_id=str(user_id),
                    )

                conn.execute(
                    insert(party_members).values(
                        party_id=party_id, user_id=user_id, character_id=character_id
                    )
                )
                row = conn.execute(
                    select(party_members).where(
                        party_members.c.party_id == party_id,
                        party_members.c.user_id == user_id,
                    )
                ).one()
        except IntegrityError:
            return self._fail(
                op,
                "DUPLICATE_MEMBER",
                f"User {user_id} is already in party {party_id}",
                party_id=str(party_id),
                user_id=str(user_id),
            )

        member = PartyMember.from_row(row)
        return ServiceResult(ok=True, op=op, data=member.model_dump(mode="json"))

    def send_invite(
        self,
        payload: dict[str, Any],
        *,
        now: datetime | None = None,
    ) -> ServiceResult:
        """Invite a user to a party.

        ``expiresAt`` defaults to *now* plus ``[invites] default_ttl_hours``.
        The sender must be a member of the party; the recipient must not be.
        """
        op = "send_invite"
        now = as_utc(now) if now else utc_now()
        ttl = timedelta(hours=self._store.settings.invites.default_ttl_hours)
        if "expiresAt" not in payload and "expires_at" not in payload:
            payload = {**payload, "expiresAt": (now + ttl).isoformat()}

        validation = validate_party_invite_insert(payload)
        if not validation.ok:
            return self._invalid(op, validation)
        values = PartyInviteInsert.model_validate(validation.data).to_row()

        with self._store.transaction() as conn:
            failure = self._check_joinable(conn, op, values["party_id"])
            if failure is not None:
                return failure
            for kind in ("sender_id", "recipient_id"):
                if self._fetch(conn, users, values[kind]) is None:
                    return self._not_found(op, "user", values[kind])
            if not self._is_member(conn, values["party_id"], values["sender_id"]):
                return self._fail(
                    op,
                    "NOT_A_MEMBER",
                    f"User {values['sender_id']} is not in party {values['party_id']}",
                )
            if self._is_member(conn, values["party_id"], values["recipient_id"]):
                return self._fail(
                    op,
                    "ALREADY_MEMBER",
                    f"User {values['recipient_id']} is already in party {values['party_id']}",
                )
            invite_id = conn.execute(
                insert(party_invites).values(**values, sent_at=now)
            ).inserted_primary_key[0]
            row = self._fetch(conn, party_invites, invite_id)

        invite = PartyInvite.from_row(row)
        return ServiceResult(ok=True, op=op, data=invite.model_dump(mode="json"))

    def respond_invite(
        self,
        invite_id: UUID | str,
        status: str,
        *,
        now: datetime | None = None,
    ) -> ServiceResult:
        """Accept or decline a pending invite, stamping ``responded_at``.

        Accepting records the answer only; the recipient still joins with
        :meth:`join_party`, since joining needs a character.
        """
        op = "respond_invite"
        failure = self._check_ids(op, invite=invite_id)
        if failure is not None:
            return failure
        invite_id = as_uuid(invite_id)
        now = as_utc(now) if now else utc_now()
        try:
            response = PartyInviteResponse.model_validate({"status": status})
        except ValidationError as exc:
            validation = ValidationResult(
                ok=False, entity="invite-response", errors=violations_from_error(exc)
            )
            return self._invalid(op, validation)

        with self._store.transaction() as conn:
            row = self._fetch(conn, party_invites, invite_id)
            if row is None:
                return self._not_found(op, "invite", invite_id)
            current = str(row.status)
            if not is_valid_transition(current, response.status, INVITE_TRANSITIONS):
                return self._fail(
                    op,
                    "INVALID_TRANSITION",
                    f"Invite is already {current}",
                    current=current,
                    requested=str(response.status),
                )
            if response.status == InviteStatus.ACCEPTED and is_expired(row.expires_at, now):
                return self._fail(op, "INVITE_EXPIRED", f"Invite {invite_id} has expired")

            # Guarded on status so a concurrent response cannot overwrite this one.
            result = conn.execute(
                update(party_invites)
                .where(
                    party_invites.c.id == invite_id,
                    party_invites.c.status == InviteStatus.PENDING,
                )
                .values(status=response.status, responded_at=now)
            )
            if result.rowcount != 1:
                return self._fail(op, "INVALID_TRANSITION", "Invite was answered concurrently")
            row = self._fetch(conn, party_invites, invite_id)

        invite = PartyInvite.from_row(row)
        return ServiceResult(ok=True, op=op, data=invite.model_dump(mode="json"))

    def disband_party(self, party_id: UUID | str, *, now: datetime | None = None) -> ServiceResult:
        """Soft-delete a party. The party row and its history are kept."""
        op = "disband_party"
        failure = self._check_ids(op, party=party_id)
        if failure is not None:
            return failure
        party_id = as_uuid(party_id)
        now = as_utc(now) if now else utc_now()
        with self._store.transaction() as conn:
            row = self._fetch(conn, parties, party_id)
            if row is None:
                return self._not_found(op, "party", party_id)
            if not is_active(row.disbanded_at):
                return self._fail(
                    op,
                    "ALREADY_DISBANDED",
                    f"Party {party_id} was disbanded at {row.disbanded_at.isoformat()}",
                )
            result = conn.execute(
                update(parties)
                .where(parties.c.id == party_id, parties.c.disbanded_at.is_(None))
                .values(disbanded_at=now)
            )
            if result.rowcount != 1:
                return self._fail(
                    op, "ALREADY_DISBANDED", f"Party {party_id} was disbanded concurrently"
                )
            row = self._fetch(conn, parties, party_id)

        logger.info("Disbanded party %s", party_id)
        return ServiceResult(ok=True, op=op, data=Party.from_row(row).model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_joinable(self, conn: Connection, op: str, party_id: UUID) -> ServiceResult | None:
        row = self._fetch(conn, parties, party_id)
        if row is None:
            return self._not_found(op, "party", party_id)
        if not is_active(row.disbanded_at):
            return self._fail(op, "PARTY_DISBANDED", f"Party {party_id} has been disbanded")
        return None

    @staticmethod
    def _is_member(conn: Connection, party_id: UUID, user_id: UUID) -> bool:
        found = conn.execute(
            select(party_members.c.user_id).where(
                party_members.c.party_id == party_id,
                party_members.c.user_id == user_id,
            )
        ).first()
        return found is not None
