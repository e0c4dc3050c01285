"""
API v1 routes.

Defines REST endpoints for the bank registration pipeline. Each step
endpoint hands its form to the matching step controller and maps the
StepOutcome onto an HTTP status code.
"""

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from bank_onboarding.adapters.notify.collector import CollectingNotifier
from bank_onboarding.api.dependencies import get_notifier, get_registration_flow
from bank_onboarding.api.models import (
    BasicInfoRequest,
    ErrorResponse,
    NoticeModel,
    RegistrationResponse,
    VerificationRequest,
    parse_agent_count,
)
from bank_onboarding.domain.controllers import RegistrationFlow, StepOutcome
from bank_onboarding.domain.exceptions import CollaboratorError
from bank_onboarding.domain.models import BankDetailsInfo, BankRegistrationForm, SupportingDocument
from bank_onboarding.domain.ports import TransitionOutcome
from bank_onboarding.domain.registration import step_path
from bank_onboarding.domain.validation import MAX_DOCUMENT_BYTES

router = APIRouter(tags=["v1"])

_FAILURE_STATUS = {
    TransitionOutcome.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    TransitionOutcome.COLLABORATOR_FAILED: status.HTTP_400_BAD_REQUEST,
    TransitionOutcome.MISSING_PREDECESSOR: status.HTTP_409_CONFLICT,
    TransitionOutcome.UNREACHABLE: status.HTTP_409_CONFLICT,
    TransitionOutcome.IN_PROGRESS: status.HTTP_429_TOO_MANY_REQUESTS,
}

_STEP_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or collaborator rejection"},
    401: {"model": ErrorResponse, "description": "Invalid credentials"},
    409: {"model": ErrorResponse, "description": "Step not reachable; follow redirect_to"},
    422: {"description": "Validation error"},
    503: {"model": ErrorResponse, "description": "Registration state unavailable"},
}


def _messages(notifier: CollectingNotifier) -> list[NoticeModel]:
    return [NoticeModel(kind=n.kind, message=n.message) for n in notifier.notices]


def _respond(
    outcome: StepOutcome,
    response: Response,
    notifier: CollectingNotifier,
    success_status: int = status.HTTP_200_OK,
) -> RegistrationResponse | ErrorResponse:
    """Translate a step outcome into the response body and status code."""
    result = outcome.result
    if outcome.ok:
        response.status_code = success_status
        return RegistrationResponse(
            state=result.state,
            next_step=outcome.navigate_to or step_path(result.state),
            identity_id=result.session.uid if result.session is not None else None,
            messages=_messages(notifier),
        )

    response.status_code = _FAILURE_STATUS[result.outcome]
    return ErrorResponse(
        detail=result.reason,
        redirect_to=outcome.navigate_to,
        messages=_messages(notifier),
    )


@router.get(
    "/registration",
    response_model=RegistrationResponse | ErrorResponse,
    responses={503: _STEP_RESPONSES[503]},
    summary="Current registration state",
    description="Resolve which registration step is reachable for this client.",
)
async def get_registration_state(
    response: Response,
    flow: RegistrationFlow = Depends(get_registration_flow),
) -> RegistrationResponse | ErrorResponse:
    try:
        state = flow.current_state()
    except CollaboratorError as e:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ErrorResponse(detail=str(e))
    return RegistrationResponse(state=state, next_step=step_path(state))


@router.post(
    "/registration/basic-info",
    response_model=RegistrationResponse | ErrorResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_STEP_RESPONSES,
    summary="Create the bank account",
    description="Step 1: submit contact details and a password to create the account.",
)
async def submit_basic_info(
    request_data: BasicInfoRequest,
    response: Response,
    flow: RegistrationFlow = Depends(get_registration_flow),
    notifier: CollectingNotifier = Depends(get_notifier),
) -> RegistrationResponse | ErrorResponse:
    """
    Create the account and store identity fields for the next step.

    - **email**: Work email address
    - **password** / **confirm_password**: At least 6 characters, matching
    """
    form = BankRegistrationForm(**request_data.model_dump())
    outcome = flow.basic_info.submit(form)
    return _respond(outcome, response, notifier, status.HTTP_201_CREATED)


@router.post(
    "/registration/details",
    response_model=RegistrationResponse | ErrorResponse,
    responses=_STEP_RESPONSES,
    summary="Submit bank details",
    description="Step 2: submit bank details with an optional supporting document "
    "(PDF, XLS, XLSX or CSV, at most 5MB). Authenticated requests complete "
    "registration immediately.",
)
async def submit_details(
    response: Response,
    bank_name: str = Form(...),
    registration_number: str = Form(...),
    head_office_address: str = Form(...),
    num_agents: str | None = Form(None),
    supporting_document: UploadFile | None = File(None),
    flow: RegistrationFlow = Depends(get_registration_flow),
    notifier: CollectingNotifier = Depends(get_notifier),
) -> RegistrationResponse | ErrorResponse:
    try:
        agent_count = parse_agent_count(num_agents)
    except ValueError:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return ErrorResponse(detail="Number of POS agents must be a whole number")

    document = None
    if supporting_document is not None and supporting_document.filename:
        document = SupportingDocument(
            filename=supporting_document.filename,
            content_type=supporting_document.content_type or "application/octet-stream",
            # Bounded read: anything past the limit fails the size rule
            data=await supporting_document.read(MAX_DOCUMENT_BYTES + 1),
        )

    details = BankDetailsInfo(
        bank_name=bank_name,
        registration_number=registration_number,
        head_office_address=head_office_address,
        num_agents=agent_count,
        supporting_document=document,
    )
    outcome = flow.details.submit(details)
    return _respond(outcome, response, notifier)


@router.post(
    "/registration/verification",
    response_model=RegistrationResponse | ErrorResponse,
    responses=_STEP_RESPONSES,
    summary="Verify the registration",
    description="Step 3: submit the 6-character verification code to create the "
    "bank profile and finish registration.",
)
async def verify_registration(
    request_data: VerificationRequest,
    response: Response,
    flow: RegistrationFlow = Depends(get_registration_flow),
    notifier: CollectingNotifier = Depends(get_notifier),
) -> RegistrationResponse | ErrorResponse:
    outcome = flow.verification.submit_code(request_data.code)
    return _respond(outcome, response, notifier)


@router.delete(
    "/registration",
    response_model=RegistrationResponse | ErrorResponse,
    responses={400: _STEP_RESPONSES[400]},
    summary="Abandon the registration",
    description="Discard any partially collected registration data for this client.",
)
async def abandon_registration(
    response: Response,
    flow: RegistrationFlow = Depends(get_registration_flow),
) -> RegistrationResponse | ErrorResponse:
    result = flow.abandon()
    if not result.ok:
        response.status_code = _FAILURE_STATUS[result.outcome]
        return ErrorResponse(detail=result.reason)
    return RegistrationResponse(state=result.state, next_step=step_path(result.state))
