from fastapi import APIRouter, Depends

from dashboard.deps import profile_service, unwrap
from dashboard.services.profile import ProfileService
from shared.models import ProfileUpdate

router = APIRouter()


@router.get("/api/profile")
def get_profile(profile: ProfileService = Depends(profile_service)):
    return {"data": unwrap(profile.get_profile()).data}


@router.put("/api/profile")
def update_profile(changes: ProfileUpdate, profile: ProfileService = Depends(profile_service)):
    outcome = unwrap(profile.update_profile(changes))
    return {"data": outcome.data, "message": outcome.message}
