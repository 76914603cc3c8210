# Overview: Service-layer operations for consultancy credit blocks and the credit balance.

"""
Credit Service

DESIGN: Consumption lives on consultancy log entries (credit_consumed) with
no reference to the block it draws from. The balance is therefore computed
as purchased minus consumed on every read; it may go negative, and writes
are never blocked by it.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select

from ..extensions import db
from ..models import ConsultancyLogEntry, CreditBlock, User
from ..schemas import CreditBlockPayload
from ..shaping import as_float
from ..validation import NotFoundError
from . import activity_service
from .persistence import execute, mint_id, transaction


def list_blocks() -> list[dict]:
    rows = (
        db.session.query(CreditBlock, User.name)
        .outerjoin(User, CreditBlock.added_by_id == User.id)
        .order_by(CreditBlock.block_number.desc(), CreditBlock.created_at.desc())
        .all()
    )
    return [block.to_dict(added_by_name=name) for block, name in rows]


def get_active_block() -> dict | None:
    row = (
        db.session.query(CreditBlock, User.name)
        .outerjoin(User, CreditBlock.added_by_id == User.id)
        .filter(CreditBlock.is_active.is_(True))
        .order_by(CreditBlock.block_number.desc(), CreditBlock.created_at.desc())
        .first()
    )
    if not row:
        return None
    block, name = row
    return block.to_dict(added_by_name=name)


def summary() -> dict:
    purchased = execute(select(func.coalesce(func.sum(CreditBlock.total_credits), 0))).scalar()
    consumed = execute(select(func.coalesce(func.sum(ConsultancyLogEntry.credit_consumed), 0))).scalar()

    purchased = Decimal(str(purchased or 0))
    consumed = Decimal(str(consumed or 0))
    remaining = purchased - consumed

    return {
        "totalPurchased": as_float(purchased),
        "totalConsumed": as_float(consumed),
        "remaining": as_float(remaining),
        "overdrawn": remaining < 0,
        "activeBlock": get_active_block(),
    }


def create_block(payload: CreditBlockPayload, *, actor_id: str) -> str:
    with transaction() as session:
        block = CreditBlock(
            id=mint_id("credit"),
            block_number=payload.block_number,
            purchase_date=payload.purchase_date,
            total_credits=payload.total_credits,
            is_active=payload.is_active,
            added_by_id=actor_id,
        )
        session.add(block)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=block.id,
            target_name=f"Block {block.block_number}",
            details=f"Added credit block #{block.block_number} with {payload.total_credits} credits",
        )
        return block.id


def update_block(block_id: str, payload: CreditBlockPayload, *, actor_id: str) -> None:
    with transaction() as session:
        block = session.get(CreditBlock, block_id)
        if not block:
            raise NotFoundError("Credit block not found")

        block.block_number = payload.block_number
        block.purchase_date = payload.purchase_date
        block.total_credits = payload.total_credits
        block.is_active = payload.is_active
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=block.id,
            target_name=f"Block {block.block_number}",
            details=f"Updated credit block #{block.block_number}",
        )


def delete_block(block_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        block = session.get(CreditBlock, block_id)
        if not block:
            raise NotFoundError("Credit block not found")

        number = block.block_number
        session.delete(block)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=block_id,
            target_name=f"Block {number}",
            details=f"Deleted credit block #{number}",
        )
