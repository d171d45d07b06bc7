"""Moves labour, machines, assets and material between projects.

Every transfer kind is its own variant with its own payload and one ``apply``.
Transfers execute immediately; the stored row is always ``approved``.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional, Union

from sqlalchemy.orm import Session

from app.core.errors import BusinessRuleViolation, InvalidState, NotFound
from app.models.asset import ConsumableGoods, Equipment, LabEquipment
from app.models.labour import Labour
from app.models.machine import Machine
from app.models.project import Project
from app.models.stock import Stock
from app.models.transfer import Transfer
from app.services.inventory_service import line_total, oldest_lot
from app.services.ledger_service import lock_row
from app.services.machine_service import end_assignment
from app.services.notification_service import notify_admins

logger = logging.getLogger(__name__)

# stock quantities carry three decimals
_SMALLEST_QTY = Decimal("0.001")


def _require_at_source(project_id, from_project_id, label: str) -> None:
    if project_id is None or int(project_id) != int(from_project_id):
        raise BusinessRuleViolation(f"{label} is not at the source project")


@dataclass(frozen=True)
class LabourTransfer:
    labour_id: int

    type = "labour"

    def label(self, db: Session) -> str:
        return "labour"

    def stamp(self, row: Transfer) -> None:
        row.labour_id = self.labour_id

    def apply(self, db: Session, row: Transfer) -> None:
        labour = lock_row(db, Labour, self.labour_id, "Labour")
        _require_at_source(labour.assigned_site_id, row.from_project_id, "Labour")
        labour.assigned_site_id = row.to_project_id


@dataclass(frozen=True)
class MachineTransfer:
    machine_id: int

    type = "machine"

    def label(self, db: Session) -> str:
        return "machine"

    def stamp(self, row: Transfer) -> None:
        row.machine_id = self.machine_id

    def apply(self, db: Session, row: Transfer) -> None:
        machine = lock_row(db, Machine, self.machine_id, "Machine")
        _require_at_source(machine.project_id, row.from_project_id, "Machine")
        if machine.status == "in-use" and machine.ownership_type == "rented":
            raise InvalidState("Return the rented machine before transferring it")

        end_assignment(machine, "available")
        machine.project_id = row.to_project_id
        machine.assigned_to_contractor_id = None


_ASSET_MODELS = {
    "lab-equipment": (LabEquipment, "Lab equipment"),
    "equipment": (Equipment, "Equipment"),
}


@dataclass(frozen=True)
class AssetTransfer:
    kind: str
    asset_id: int

    @property
    def type(self) -> str:
        return self.kind

    def label(self, db: Session) -> str:
        return _ASSET_MODELS[self.kind][1].lower()

    def stamp(self, row: Transfer) -> None:
        row.asset_id = self.asset_id

    def apply(self, db: Session, row: Transfer) -> None:
        model, label = _ASSET_MODELS[self.kind]
        asset = lock_row(db, model, self.asset_id, label)
        _require_at_source(asset.project_id, row.from_project_id, label)
        asset.project_id = row.to_project_id
        asset.status = "active"


@dataclass(frozen=True)
class StockTransfer:
    material_name: str
    quantity: Decimal

    type = "stock"

    def label(self, db: Session) -> str:
        return self.material_name

    def stamp(self, row: Transfer) -> None:
        row.material_name = self.material_name

    def apply(self, db: Session, row: Transfer) -> None:
        source = oldest_lot(db, row.from_project_id, self.material_name, min_quantity=_SMALLEST_QTY)
        if source is None:
            raise NotFound(f"No stock of {self.material_name} at source project")

        # source is floored at zero, so only what was there moves
        moved = min(self.quantity, source.quantity)
        source.quantity = source.quantity - moved
        source.total_price = line_total(source.quantity, source.unit_price)

        dest = (
            db.query(Stock)
            .filter(
                Stock.project_id == row.to_project_id,
                Stock.material_name == source.material_name,
                Stock.vendor_id.is_(None) if source.vendor_id is None else Stock.vendor_id == source.vendor_id,
                Stock.unit_price == source.unit_price,
            )
            .order_by(Stock.created_at.asc(), Stock.id.asc())
            .with_for_update()
            .first()
        )

        if dest is not None:
            dest.quantity = dest.quantity + moved
            dest.total_price = line_total(dest.quantity, dest.unit_price)
        else:
            dest = Stock(
                project_id=row.to_project_id,
                vendor_id=source.vendor_id,
                material_name=source.material_name,
                unit=source.unit,
                quantity=moved,
                unit_price=source.unit_price,
                total_price=line_total(moved, source.unit_price),
                payment_status=source.payment_status,
                photo_url=source.photo_url,
                remarks=f"Transferred from project {row.from_project_id}",
                added_by=row.requested_by,
            )
            db.add(dest)

        row.quantity = moved
        db.flush()
        logger.info(
            "stock transferred",
            extra={
                "source_stock_id": source.id,
                "dest_stock_id": dest.id,
                "material_name": source.material_name,
                "quantity": moved,
            },
        )


@dataclass(frozen=True)
class ConsumableTransfer:
    item: str
    quantity: Decimal

    type = "consumable-goods"

    def _source(self, db: Session, from_project_id: int) -> ConsumableGoods:
        q = db.query(ConsumableGoods)
        if self.item.isdigit():
            q = q.filter(ConsumableGoods.id == int(self.item))
        else:
            q = q.filter(
                ConsumableGoods.project_id == int(from_project_id),
                ConsumableGoods.name == self.item,
            )
        source = q.with_for_update().first()
        if source is None:
            raise NotFound("Consumable goods not found")
        _require_at_source(source.project_id, from_project_id, "Consumable goods")
        return source

    def label(self, db: Session) -> str:
        return self.item

    def stamp(self, row: Transfer) -> None:
        if self.item.isdigit():
            row.asset_id = int(self.item)
        else:
            row.material_name = self.item

    def apply(self, db: Session, row: Transfer) -> None:
        source = self._source(db, row.from_project_id)
        row.material_name = source.name

        moved = min(self.quantity, source.quantity)
        source.quantity = source.quantity - moved

        dest = (
            db.query(ConsumableGoods)
            .filter(
                ConsumableGoods.project_id == row.to_project_id,
                ConsumableGoods.name == source.name,
            )
            .with_for_update()
            .first()
        )
        if dest is not None:
            dest.quantity = dest.quantity + moved
        else:
            db.add(
                ConsumableGoods(
                    project_id=row.to_project_id,
                    name=source.name,
                    category=source.category,
                    quantity=moved,
                    unit=source.unit,
                    min_stock_level=source.min_stock_level,
                    expiry_date=source.expiry_date,
                    remarks=f"Transferred from project {row.from_project_id}",
                )
            )
        row.quantity = moved


TransferVariant = Union[LabourTransfer, MachineTransfer, AssetTransfer, StockTransfer, ConsumableTransfer]


def _as_int(item: str, label: str) -> int:
    try:
        return int(item)
    except (TypeError, ValueError) as exc:
        raise BusinessRuleViolation(f"{label} is required") from exc


def _quantity(value) -> Decimal:
    qty = Decimal(str(value)) if value not in (None, "") else Decimal("1")
    if qty <= 0:
        raise BusinessRuleViolation("Quantity must be greater than zero")
    return qty


_VARIANT_BUILDERS: Dict[str, Callable[[str, Decimal], TransferVariant]] = {
    "labour": lambda item, qty: LabourTransfer(labour_id=_as_int(item, "Labour")),
    "machine": lambda item, qty: MachineTransfer(machine_id=_as_int(item, "Item")),
    "lab-equipment": lambda item, qty: AssetTransfer(kind="lab-equipment", asset_id=_as_int(item, "Item")),
    "equipment": lambda item, qty: AssetTransfer(kind="equipment", asset_id=_as_int(item, "Item")),
    "stock": lambda item, qty: StockTransfer(material_name=item, quantity=qty),
    "consumable-goods": lambda item, qty: ConsumableTransfer(item=item, quantity=qty),
}

TRANSFER_TYPES = tuple(_VARIANT_BUILDERS)


def build_variant(type: str, item_id, quantity=None) -> TransferVariant:
    builder = _VARIANT_BUILDERS.get(type)
    if builder is None:
        raise BusinessRuleViolation(f"Unknown transfer type: {type}")
    if item_id is None or str(item_id).strip() == "":
        raise BusinessRuleViolation("Item is required")
    return builder(str(item_id).strip(), _quantity(quantity))


def create_transfer(
    *,
    db: Session,
    variant: TransferVariant,
    from_project_id: int,
    to_project_id: int,
    remarks: Optional[str] = None,
    requested_by: Optional[int] = None,
    notify: bool = False,
) -> Transfer:
    if int(from_project_id) == int(to_project_id):
        raise BusinessRuleViolation("Source and destination projects must be different")

    source_project = lock_row(db, Project, from_project_id, "Source project")
    dest_project = lock_row(db, Project, to_project_id, "Destination project")

    row = Transfer(
        type=variant.type,
        from_project_id=source_project.id,
        to_project_id=dest_project.id,
        quantity=getattr(variant, "quantity", Decimal("1")),
        remarks=remarks,
        status="approved",
        requested_by=requested_by,
    )
    variant.stamp(row)
    db.add(row)
    db.flush()

    variant.apply(db, row)
    db.flush()

    if notify:
        notify_admins(
            db=db,
            title="New Transfer Request",
            message=(
                f"Transfer of {row.quantity} {variant.label(db)} from "
                f"{source_project.name} to {dest_project.name} requested."
            ),
            related_id=row.id,
            related_model="Transfer",
        )

    logger.info(
        "transfer executed",
        extra={
            "transfer_id": row.id,
            "type": row.type,
            "from_project_id": row.from_project_id,
            "to_project_id": row.to_project_id,
        },
    )
    return row
