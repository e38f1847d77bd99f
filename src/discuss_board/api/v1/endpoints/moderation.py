# src/discuss_board/api/v1/endpoints/moderation.py
"""Moderation endpoints: content reports, moderation actions, bans and appeals."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import (
    ActorDep,
    AdministratorDep,
    MemberDep,
    ModeratorDep,
    SessionDep,
    StaffDep,
)
from discuss_board.schemas.common import Page
from discuss_board.schemas.moderation import (
    AppealCreate,
    AppealResolution,
    AppealResponse,
    AppealSearchRequest,
    AppealUpdate,
    BanCreate,
    BanResponse,
    BanSearchRequest,
    ContentReportCreate,
    ContentReportResponse,
    ContentReportSearchRequest,
    ContentReportUpdate,
    ModerationActionCreate,
    ModerationActionResponse,
    ModerationActionSearchRequest,
)
from discuss_board.services import ModerationService, appeal_service, ban_service, report_service

router = APIRouter(tags=["moderation"])


@router.post(
    "/content-reports",
    response_model=ContentReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_content_report(
    payload: ContentReportCreate, db: SessionDep, member: MemberDep
) -> ContentReportResponse:
    """Report a post or a comment.

    Args:
        payload: Target (exactly one of post_id/comment_id), reason and details
        db: Database session
        member: Authorized member filing the report

    Returns:
        The new report, in ``pending`` state

    Raises:
        InvalidRequestError: If zero or two targets are given or they disagree with content_type
        NotFoundError: If the target does not exist
        ConflictError: If the member already reported the target
    """
    report = report_service.create_report(db, member, payload)
    return ContentReportResponse.model_validate(report)


@router.patch("/content-reports", response_model=Page[ContentReportResponse])
async def search_content_reports(
    request: ContentReportSearchRequest, db: SessionDep, staff: StaffDep
) -> dict:
    return report_service.search_reports(db, request)


@router.get("/content-reports/{report_id}", response_model=ContentReportResponse)
async def get_content_report(
    report_id: str, db: SessionDep, actor: ActorDep
) -> ContentReportResponse:
    return ContentReportResponse.model_validate(report_service.get_report_for(db, actor, report_id))


@router.put("/content-reports/{report_id}", response_model=ContentReportResponse)
async def update_content_report(
    report_id: str, payload: ContentReportUpdate, db: SessionDep, moderator: ModeratorDep
) -> ContentReportResponse:
    """Move a report through review; closing it notifies the reporter."""
    report = report_service.update_status(db, moderator, report_id, payload)
    return ContentReportResponse.model_validate(report)


@router.post(
    "/moderation-actions",
    response_model=ModerationActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_moderation_action(
    payload: ModerationActionCreate, db: SessionDep, moderator: ModeratorDep
) -> ModerationActionResponse:
    """Record a moderation action and apply its effect.

    Raises:
        ForbiddenError: If ``moderator_id`` is not the caller
        InvalidRequestError: Without targets or with an inverted effective range
        NotFoundError: If a target or the linked report is missing
    """
    action = ModerationService.create_action(db, moderator, payload)
    return ModerationActionResponse.model_validate(action)


@router.patch("/moderation-actions", response_model=Page[ModerationActionResponse])
async def search_moderation_actions(
    request: ModerationActionSearchRequest, db: SessionDep, staff: StaffDep
) -> dict:
    return ModerationService.search_actions(db, request)


@router.get("/moderation-actions/{action_id}", response_model=ModerationActionResponse)
async def get_moderation_action(
    action_id: str, db: SessionDep, staff: StaffDep
) -> ModerationActionResponse:
    return ModerationActionResponse.model_validate(ModerationService.get_action(db, action_id))


@router.delete("/moderation-actions/{action_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_moderation_action(
    action_id: str, db: SessionDep, administrator: AdministratorDep
) -> None:
    ModerationService.delete_action(db, action_id, administrator_id=administrator.id)


@router.post("/bans", response_model=BanResponse, status_code=status.HTTP_201_CREATED)
async def create_ban(payload: BanCreate, db: SessionDep, moderator: ModeratorDep) -> BanResponse:
    """Ban a member, ending all of their sessions."""
    return BanResponse.model_validate(ban_service.create_ban(db, moderator, payload))


@router.patch("/bans", response_model=Page[BanResponse])
async def search_bans(request: BanSearchRequest, db: SessionDep, staff: StaffDep) -> dict:
    return ban_service.search_bans(db, request)


@router.get("/bans/{ban_id}", response_model=BanResponse)
async def get_ban(ban_id: str, db: SessionDep, staff: StaffDep) -> BanResponse:
    return BanResponse.model_validate(ban_service.get_ban(db, ban_id))


@router.delete("/bans/{ban_id}", response_model=BanResponse)
async def lift_ban(ban_id: str, db: SessionDep, staff: StaffDep) -> BanResponse:
    ban = ban_service.lift_ban(db, ban_id, actor_id=staff.role_id, actor_role=staff.role)
    return BanResponse.model_validate(ban)


@router.post("/appeals", response_model=AppealResponse, status_code=status.HTTP_201_CREATED)
async def create_appeal(
    payload: AppealCreate, db: SessionDep, member: MemberDep
) -> AppealResponse:
    return AppealResponse.model_validate(appeal_service.create_appeal(db, member, payload))


@router.patch("/appeals", response_model=Page[AppealResponse])
async def search_appeals(request: AppealSearchRequest, db: SessionDep, actor: ActorDep) -> dict:
    """List appeals; members only see their own."""
    return appeal_service.search_appeals(db, actor, request)


@router.get("/appeals/{appeal_id}", response_model=AppealResponse)
async def get_appeal(appeal_id: str, db: SessionDep, actor: ActorDep) -> AppealResponse:
    return AppealResponse.model_validate(appeal_service.get_appeal(db, actor, appeal_id))


@router.put("/appeals/{appeal_id}", response_model=AppealResponse)
async def update_appeal(
    appeal_id: str, payload: AppealUpdate, db: SessionDep, member: MemberDep
) -> AppealResponse:
    return AppealResponse.model_validate(
        appeal_service.update_appeal(db, member, appeal_id, payload)
    )


@router.put("/appeals/{appeal_id}/resolution", response_model=AppealResponse)
async def resolve_appeal(
    appeal_id: str, payload: AppealResolution, db: SessionDep, staff: StaffDep
) -> AppealResponse:
    """Accept or reject an appeal; accepting reverses the appealed action."""
    return AppealResponse.model_validate(
        appeal_service.resolve_appeal(db, staff, appeal_id, payload)
    )
