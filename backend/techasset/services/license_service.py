# Overview: Service-layer operations for software licenses and their add-ons.

from __future__ import annotations

from sqlalchemy import delete, insert

from ..extensions import db
from ..models import SoftwareAddIn, SoftwareLicense, User
from ..schemas import LicensePayload
from ..shaping import dump_json_list, group_by
from ..validation import NotFoundError
from . import activity_service
from .persistence import child_id, mint_id, transaction


def _root_values(payload: LicensePayload) -> dict:
    return {
        "name": payload.name,
        "vendor": payload.vendor,
        "version": payload.version,
        "license_type": payload.license_type,
        "total_licenses": payload.total_licenses,
        "used_licenses": payload.used_licenses,
        "purchase_date": payload.purchase_date,
        "expiry_date": payload.expiry_date,
        "cost": payload.cost,
        "license_key": payload.license_key,
        "assigned_users": dump_json_list(payload.assigned_users),
        "status": payload.status,
        "notes": payload.notes,
        "entity": payload.entity,
        "department": payload.department,
    }


def _replace_addins(session, license_id: str, payload: LicensePayload) -> None:
    session.execute(delete(SoftwareAddIn).where(SoftwareAddIn.license_id == license_id))
    if not payload.addins:
        return
    session.execute(
        insert(SoftwareAddIn),
        [
            {
                "id": child_id(license_id, "addin", position),
                "license_id": license_id,
                "name": addin.name,
                "cost": addin.cost,
                "total_licenses": addin.total_licenses,
                "used_licenses": addin.used_licenses,
                "purchase_date": addin.purchase_date,
                "expiry_date": addin.expiry_date,
                "notes": addin.notes,
                "position": position,
            }
            for position, addin in enumerate(payload.addins, start=1)
        ],
    )


def list_licenses() -> list[dict]:
    rows = (
        db.session.query(SoftwareLicense, User.name)
        .outerjoin(User, SoftwareLicense.added_by_id == User.id)
        .order_by(SoftwareLicense.created_at.desc(), SoftwareLicense.id.desc())
        .all()
    )
    license_ids = [lic.id for lic, _ in rows]
    if not license_ids:
        return []

    addins = group_by(
        db.session.query(SoftwareAddIn)
        .filter(SoftwareAddIn.license_id.in_(license_ids))
        .order_by(SoftwareAddIn.position)
        .all(),
        "license_id",
    )
    return [lic.to_dict(added_by_name=name, addins=addins.get(lic.id, [])) for lic, name in rows]


def get_license(license_id: str) -> dict:
    row = (
        db.session.query(SoftwareLicense, User.name)
        .outerjoin(User, SoftwareLicense.added_by_id == User.id)
        .filter(SoftwareLicense.id == license_id)
        .first()
    )
    if not row:
        raise NotFoundError("License not found")
    lic, name = row
    addins = (
        db.session.query(SoftwareAddIn)
        .filter(SoftwareAddIn.license_id == lic.id)
        .order_by(SoftwareAddIn.position)
        .all()
    )
    return lic.to_dict(added_by_name=name, addins=addins)


def create_license(payload: LicensePayload, *, actor_id: str) -> str:
    with transaction() as session:
        lic = SoftwareLicense(id=mint_id("lic"), added_by_id=actor_id, **_root_values(payload))
        session.add(lic)
        session.flush()

        _replace_addins(session, lic.id, payload)

        activity_service.record(
            actor_id=actor_id,
            action="add_entry",
            target_id=lic.id,
            target_name=lic.name,
            details=f"Added software license: {lic.name}",
        )
        return lic.id


def update_license(license_id: str, payload: LicensePayload, *, actor_id: str) -> None:
    with transaction() as session:
        lic = session.get(SoftwareLicense, license_id)
        if not lic:
            raise NotFoundError("License not found")

        for column, value in _root_values(payload).items():
            setattr(lic, column, value)
        session.flush()

        _replace_addins(session, lic.id, payload)

        activity_service.record(
            actor_id=actor_id,
            action="update_entry",
            target_id=lic.id,
            target_name=lic.name,
            details=f"Updated software license: {lic.name}",
        )


def delete_license(license_id: str, *, actor_id: str) -> None:
    with transaction() as session:
        lic = session.get(SoftwareLicense, license_id)
        if not lic:
            raise NotFoundError("License not found")

        name = lic.name
        session.delete(lic)
        session.flush()

        activity_service.record(
            actor_id=actor_id,
            action="delete_entry",
            target_id=license_id,
            target_name=name,
            details=f"Deleted software license: {name}",
        )
