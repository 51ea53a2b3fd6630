import datetime as dt
import logging
import secrets
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.db.models import INVITATION_ROLES, OrganizationInvitation
from src.db.repo_holder import RepoHolder
from src.web.dependencies import get_current_user_email, get_current_user_id, get_repo, require_member
from src.web.schemas import InvitationOut, ReceivedInvitationOut
from src.web.validation import (
    bad_request,
    not_found,
    parse_choice,
    parse_email,
    parse_uuid,
    read_json,
    require_fields,
)

router = APIRouter(tags=["invitations"])

INVITING_ROLES = ("owner", "admin")
INVITATION_ACTIONS = ("accept", "reject")


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def invite_url(request: Request, token: str) -> str:
    return f"{request.app.state.settings.app_url.rstrip('/')}/invite/{token}"


async def get_open_invitation(repo: RepoHolder, token: str) -> OrganizationInvitation:
    """Loads a pending, unexpired invitation; an expired one is marked as such on the way."""
    invitation = await repo.invitation.get_by_token(token)

    if invitation is None:
        raise HTTPException(status_code=404, detail="Invitation not found")

    if invitation.status == "pending" and invitation.is_expired(utcnow()):
        await repo.invitation.update(invitation, status="expired")
        raise HTTPException(status_code=410, detail="Invitation has expired")

    if invitation.status == "expired":
        raise HTTPException(status_code=410, detail="Invitation has expired")

    if invitation.status != "pending":
        raise HTTPException(status_code=409, detail=f"Invitation has already been {invitation.status}")

    return invitation


@router.get("/organizations/{organization_id}/invitations", response_model=list[InvitationOut])
async def list_invitations(
    organization_id: str,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    organization_id = parse_uuid(organization_id, "organization ID")
    await require_member(repo, organization_id, user_id)

    invitations = await repo.invitation.list_for_organization(organization_id)

    return [InvitationOut.model_validate(invitation) for invitation in invitations]


@router.post("/organizations/{organization_id}/invitations", status_code=201)
async def create_invitation(
    organization_id: str,
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    data = await read_json(request)
    require_fields(data, ("email",), "Email is required")

    email = parse_email(data["email"])
    role = parse_choice(data.get("role") or "member", INVITATION_ROLES, "role")
    organization_id = parse_uuid(organization_id, "organization ID")

    if await repo.organization.get_by_id(organization_id) is None:
        raise not_found("Organization")

    sender = await repo.member.get_membership(organization_id, user_id)
    if sender is None or sender.role not in INVITING_ROLES:
        raise HTTPException(status_code=403, detail="Insufficient permissions to send invitations")

    now = utcnow()
    await repo.invitation.expire_stale(now)

    if await repo.invitation.get_pending(organization_id, email) is not None:
        raise HTTPException(status_code=409, detail="Invitation already sent")

    ttl_days = request.app.state.settings.invitation_ttl_days
    invitation = await repo.invitation.create(
        organization_id=organization_id,
        invited_by=user_id,
        email=email,
        role=role,
        token=secrets.token_hex(32),
        expires_at=now + dt.timedelta(days=ttl_days),
    )
    logging.info(f"Invitation {invitation.id} sent to {email} for organization {organization_id}")

    return {
        "message": "Invitation sent successfully",
        "invitation": {
            "id": str(invitation.id),
            "email": invitation.email,
            "role": invitation.role,
            "inviteUrl": invite_url(request, invitation.token),
            "expiresAt": invitation.expires_at.isoformat(),
        },
    }


@router.delete("/organizations/{organization_id}/invitations")
async def cancel_invitation(
    organization_id: str,
    invitation_id: str | None = Query(None, alias="invitationId"),
    user_id: uuid.UUID = Depends(get_current_user_id),
    repo: RepoHolder = Depends(get_repo),
):
    if not invitation_id:
        raise bad_request("Invitation ID is required")

    organization_id = parse_uuid(organization_id, "organization ID")
    sender = await repo.member.get_membership(organization_id, user_id)
    if sender is None or sender.role not in INVITING_ROLES:
        raise HTTPException(status_code=403, detail="Insufficient permissions to cancel invitations")

    invitation = await repo.invitation.get_for_organization(parse_uuid(invitation_id, "invitation ID"), organization_id)

    if invitation is None:
        raise not_found("Invitation")

    if invitation.status == "pending":
        await repo.invitation.update(invitation, status="cancelled")

    return {"message": "Invitation cancelled successfully"}


@router.get("/invitations/received", response_model=list[ReceivedInvitationOut])
async def list_received_invitations(
    user_id: uuid.UUID = Depends(get_current_user_id),
    email: str = Depends(get_current_user_email),
    repo: RepoHolder = Depends(get_repo),
):
    """Invitations waiting for the session user, skipping organizations already joined."""
    invitations = await repo.invitation.list_received(email, user_id, utcnow())

    return [ReceivedInvitationOut.model_validate(invitation) for invitation in invitations]


@router.get("/invitations/{token}")
async def get_invitation(token: str, repo: RepoHolder = Depends(get_repo)):
    invitation = await get_open_invitation(repo, token)
    organization = invitation.organization

    return {
        "invitation": {
            "id": str(invitation.id),
            "email": invitation.email,
            "role": invitation.role,
            "organization": {
                "id": str(organization.id),
                "name": organization.name,
                "description": organization.description,
            },
            "expiresAt": invitation.expires_at.isoformat(),
        }
    }


@router.post("/invitations/{token}")
async def respond_to_invitation(
    token: str,
    request: Request,
    user_id: uuid.UUID = Depends(get_current_user_id),
    email: str = Depends(get_current_user_email),
    repo: RepoHolder = Depends(get_repo),
):
    data = await read_json(request)
    action = data.get("action")

    if action not in INVITATION_ACTIONS:
        raise bad_request("Invalid action")

    invitation = await get_open_invitation(repo, token)

    if invitation.email != email:
        raise HTTPException(status_code=403, detail="Email mismatch")

    if action == "reject":
        await repo.invitation.update(invitation, status="rejected", accepted_at=utcnow(), accepted_by=user_id)
        return {"message": "Invitation rejected"}

    if await repo.member.get_membership(invitation.organization_id, user_id) is not None:
        await repo.invitation.update(invitation, status="accepted", accepted_at=utcnow(), accepted_by=user_id)
        return {
            "message": "You are already a member of this organization",
            "organizationId": str(invitation.organization_id),
        }

    await repo.invitation.accept(invitation, user_id, utcnow())
    logging.info(f"User {user_id} joined organization {invitation.organization_id} as {invitation.role}")

    return {"message": "Invitation accepted successfully", "organizationId": str(invitation.organization_id)}
