from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData
from structlog import get_logger

from elmo_backend.api.dependencies.database import get_db_session
from elmo_backend.api.schemas.submission import ResourceIdResponse, SubmissionResponse
from elmo_backend.config import Settings, get_settings
from elmo_backend.persistence.pipeline import save_dataset
from elmo_backend.persistence.resource import save_resource_information_and_rights

logger = get_logger(__name__)
router = APIRouter(prefix="/resources")


def form_to_submission(form: FormData) -> dict:
    """Collapse form data into a submission mapping.

    Repeated ``name[]`` keys become lists under ``name``; other keys keep
    their last value.
    """
    submission = {}
    for key in form.keys():
        if key.endswith("[]"):
            submission[key[:-2]] = [str(v) for v in form.getlist(key)]
        else:
            submission[key] = str(form[key])
    return submission


def _invalid_resource() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Resource information is incomplete or invalid",
    )


@router.post("", response_model=SubmissionResponse | ResourceIdResponse)
async def submit_resource(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    submission = form_to_submission(await request.form())

    try:
        if submission.get("get_resource_id") == "1":
            resource_id = await save_resource_information_and_rights(db, submission)
            if resource_id is False:
                raise _invalid_resource()
            request.state.resource_id = resource_id
            return ResourceIdResponse(resource_id=resource_id)

        result = await save_dataset(db, submission, settings)
    except IntegrityError as e:
        logger.warning("Rejected conflicting resource", doi=submission.get("doi"))
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Resource conflicts with an existing record",
        ) from e

    if result.resource_id is None:
        raise _invalid_resource()
    request.state.resource_id = result.resource_id
    return SubmissionResponse(**result.model_dump())
