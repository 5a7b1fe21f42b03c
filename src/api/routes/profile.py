from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from src.adapters.sqlite.repos import SQLiteCollectionRepo, SQLiteProfileRepo, SQLiteUserRepo
from src.api.deps import (
    get_clock,
    get_collection_repo,
    get_current_user,
    get_profile_repo,
    get_rules,
    get_user_repo,
)
from src.api.schemas import (
    AccountRequest,
    BasicInfoRequest,
    InstantMessageRequest,
    collections_to_dict,
    envelope,
    profile_to_dict,
    user_to_dict,
)
from src.components.collections import ReplaceCollectionInput, run_replace
from src.components.profile import (
    GetProfileInput,
    ProfileOutput,
    UpdateAccountInput,
    UpdateBasicInput,
    UpdateInstantMessageInput,
    UpdateVisibilityInput,
    run_get,
    run_update_account,
    run_update_basic,
    run_update_instant_message,
    run_update_visibility,
)
from src.domain.collections import is_collection_type
from src.domain.entities import User
from src.rules.models import Rules

router = APIRouter()


def _profile_data(result: ProfileOutput) -> dict[str, Any]:
    assert result.user is not None
    return {
        "user": user_to_dict(result.user),
        **profile_to_dict(result.profile),
        **collections_to_dict(result.collections),
    }


def _raise_for(result: ProfileOutput) -> None:
    if result.success:
        return
    code = result.error_code
    if code == "user_not_found":
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    if code == "username_taken":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.message)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)


@router.get("/me")
def get_my_profile(
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    collection_repo: SQLiteCollectionRepo = Depends(get_collection_repo),
) -> dict[str, Any]:
    """The signed-in user's profile with every ordered collection."""
    result = run_get(
        GetProfileInput(user_id=current_user.id), user_repo, profile_repo, collection_repo
    )
    _raise_for(result)
    return envelope(_profile_data(result))


@router.put("/basic")
def update_basic(
    req: BasicInfoRequest,
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    inp = UpdateBasicInput(
        user_id=current_user.id,
        name=req.name,
        job_title=req.job_title,
        bio=req.bio,
        website=req.website,
        location=req.location,
        profile_image_url=req.profile_image_url,
        resume_url=req.resume_url,
        skills=tuple(req.skills) if req.skills is not None else None,
    )
    result = run_update_basic(inp, user_repo, profile_repo, rules, clock)
    _raise_for(result)
    return envelope(_profile_data(result), message="Profile updated successfully")


@router.put("/visibility")
def update_visibility(
    settings: dict[str, bool] = Body(...),
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    inp = UpdateVisibilityInput(user_id=current_user.id, settings=settings)
    result = run_update_visibility(inp, user_repo, profile_repo, clock)
    _raise_for(result)
    assert result.profile is not None
    return envelope(
        {"visibility": result.profile.visibility.model_dump()},
        message="Visibility settings updated",
    )


@router.put("/account")
def update_account(
    req: AccountRequest,
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    inp = UpdateAccountInput(user_id=current_user.id, name=req.name, username=req.username)
    result = run_update_account(inp, user_repo, profile_repo, rules, clock)
    _raise_for(result)
    assert result.user is not None
    return envelope({"user": user_to_dict(result.user)}, message="Account updated successfully")


@router.put("/instant-message")
def update_instant_message(
    req: InstantMessageRequest,
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    inp = UpdateInstantMessageInput(
        user_id=current_user.id,
        subject=req.instant_message_subject,
        body=req.instant_message_body,
    )
    result = run_update_instant_message(inp, user_repo, profile_repo, rules, clock)
    _raise_for(result)
    assert result.user is not None
    return envelope(
        {
            "instant_message_subject": result.user.instant_message_subject,
            "instant_message_body": result.user.instant_message_body,
        },
        message="Instant message updated successfully",
    )


@router.put("/{collection}")
def replace_collection(
    collection: str,
    body: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    collection_repo: SQLiteCollectionRepo = Depends(get_collection_repo),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    """Replace one ordered collection with the array in the body, in order."""
    if not is_collection_type(collection):
        raise HTTPException(status_code=404, detail=f"Unknown collection: {collection}")

    items = body.get(collection)
    if not isinstance(items, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{collection} must be an array",
        )

    inp = ReplaceCollectionInput(
        user_id=current_user.id, collection=collection, items=tuple(items)
    )
    result = run_replace(inp, collection_repo, rules.collections)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)

    return envelope(
        {collection: [item.model_dump(mode="json") for item in result.items]},
        message=f"{collection.capitalize()} updated successfully",
    )
