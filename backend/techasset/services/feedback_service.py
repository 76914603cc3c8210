# Overview: Service-layer operations for customer feedback links and public submissions.

"""
Feedback Service

Staff create a link per completed task; the customer opens the public URL
and submits one response. Submission locks the link row so two concurrent
submissions cannot both consume the same link.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import FeedbackLink, FeedbackResponse, User
from ..schemas import FeedbackLinkPayload, FeedbackSubmission
from ..validation import ConflictError, NotFoundError
from . import activity_service
from .persistence import mint_id, transaction
from techasset.time_utils import utcnow


def list_links() -> list[dict]:
    stats = (
        db.session.query(
            FeedbackResponse.feedback_link_id.label("link_pk"),
            func.count(FeedbackResponse.id).label("response_count"),
            func.avg(FeedbackResponse.rating).label("average_rating"),
        )
        .group_by(FeedbackResponse.feedback_link_id)
        .subquery()
    )
    rows = (
        db.session.query(FeedbackLink, User.name, stats.c.response_count, stats.c.average_rating)
        .outerjoin(User, FeedbackLink.created_by_id == User.id)
        .outerjoin(stats, stats.c.link_pk == FeedbackLink.id)
        .order_by(FeedbackLink.created_at.desc(), FeedbackLink.id.desc())
        .all()
    )
    return [
        link.to_dict(created_by_name=name, response_count=count, average_rating=avg)
        for link, name, count, avg in rows
    ]


def get_public_link(link_id: str) -> dict:
    link = db.session.query(FeedbackLink).filter(FeedbackLink.link_id == link_id).first()
    if not link:
        raise NotFoundError("Feedback link not found")
    return link.to_public_dict()


def create_link(payload: FeedbackLinkPayload, *, actor_id: str) -> dict:
    internal_id = mint_id("fb")
    public_id = mint_id("fb")
    base_url = current_app.config.get("APP_URL", "").rstrip("/")
    generated = f"{base_url}?id={public_id}"

    with transaction() as session:
        link = FeedbackLink(
            id=internal_id,
            link_id=public_id,
            staff_name=payload.staff_name,
            customer_name=payload.customer_name,
            client=payload.client,
            task_name=payload.task_name,
            generated_link=generated,
            created_by_id=actor_id,
        )
        session.add(link)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=link.id,
            target_name=link.customer_name,
            details=f"Created feedback link for {link.customer_name}",
        )
    return {"id": internal_id, "linkId": public_id, "link": generated}


def delete_link(link_pk: str, *, actor_id: str) -> None:
    with transaction() as session:
        link = session.get(FeedbackLink, link_pk)
        if not link:
            raise NotFoundError("Feedback link not found")

        customer = link.customer_name
        session.delete(link)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=link_pk,
            target_name=customer,
            details=f"Deleted feedback link for {customer}",
        )


def list_responses(link_pk: str) -> list[dict]:
    responses = (
        db.session.query(FeedbackResponse)
        .filter(FeedbackResponse.feedback_link_id == link_pk)
        .order_by(FeedbackResponse.submitted_at.desc(), FeedbackResponse.id.desc())
        .all()
    )
    return [r.to_dict() for r in responses]


def submit_response(link_id: str, payload: FeedbackSubmission) -> str:
    """
    Record a customer's response against a public link id.

    Raises:
        NotFoundError: no link with that public id; nothing is written
        ConflictError: the link has already been used
    """
    with transaction() as session:
        link = (
            session.query(FeedbackLink)
            .filter(FeedbackLink.link_id == link_id)
            .with_for_update()
            .first()
        )
        if not link:
            raise NotFoundError("Feedback link not found or already used")
        if link.is_used:
            raise ConflictError("Feedback has already been submitted for this link")

        response = FeedbackResponse(
            id=mint_id("response"),
            feedback_link_id=link.id,
            rating=payload.rating,
            comments=payload.comments,
            client_name=payload.client_name,
            client_email=payload.client_email,
            client_company=payload.client_company,
        )
        session.add(response)

        link.is_used = True
        link.used_at = utcnow()
        session.flush()

        activity_service.record(
            actor_id=None,
            action="submit_feedback",
            target_id=link.id,
            target_name=link.customer_name,
            details=f"Feedback received from {link.customer_name}",
        )
        return response.id
