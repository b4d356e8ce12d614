from typing import List

from fastapi import APIRouter, Depends, status

from maeson_realty.dependencies.auth import get_user_client
from maeson_realty.schemas.inquiry import Inquiry, InquiryCreateRequest, InquiryStatusUpdateRequest
from maeson_realty.services.backend import SupabaseClient
from maeson_realty.services.inquiries import (
    create_inquiry,
    delete_inquiry,
    list_received_inquiries,
    list_sent_inquiries,
    update_inquiry_status,
)

router = APIRouter(prefix="/api/v1/inquiries", tags=["inquiries"])


@router.post("", response_model=Inquiry, status_code=status.HTTP_201_CREATED)
async def send_inquiry(request: InquiryCreateRequest, client: SupabaseClient = Depends(get_user_client)):
    return await create_inquiry(client, request)


@router.get("/sent", response_model=List[Inquiry])
async def sent_inquiries(client: SupabaseClient = Depends(get_user_client)):
    return await list_sent_inquiries(client)


@router.get("/received", response_model=List[Inquiry])
async def received_inquiries(client: SupabaseClient = Depends(get_user_client)):
    return await list_received_inquiries(client)


@router.patch("/{inquiry_id}", response_model=Inquiry)
async def respond_to_inquiry(
    inquiry_id: str,
    request: InquiryStatusUpdateRequest,
    client: SupabaseClient = Depends(get_user_client),
):
    return await update_inquiry_status(client, inquiry_id, request.status, request.response)


@router.delete("/{inquiry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inquiry_endpoint(inquiry_id: str, client: SupabaseClient = Depends(get_user_client)):
    await delete_inquiry(client, inquiry_id)
